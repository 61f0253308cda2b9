"""Protocol for embedding providers backing semantic search."""

from __future__ import annotations

from typing import Protocol


class Embedder(Protocol):
    def is_configured(self) -> bool: ...

    async def embed_texts(self, texts: list[str]) -> list[list[float]]: ...

    async def embed_query(self, query: str) -> list[float]: ...

    @property
    def dimensions(self) -> int: ...
