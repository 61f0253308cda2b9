"""Protocol for text-completion providers."""

from __future__ import annotations

from typing import Protocol


class TextCompletion(Protocol):
    def is_available(self) -> bool: ...

    async def complete(
        self,
        prompt: str,
        session_id: str | None = None,
        history: list[dict] | None = None,
    ) -> str: ...
