"""Protocol for candidate selection strategies."""

from __future__ import annotations

from typing import Protocol

from audit_rag.models.domain import (
    AuditRecord,
    ContextBuildOptions,
    ExtractedFilters,
    ScoredCandidate,
)


class SelectionStrategy(Protocol):
    name: str

    async def select(
        self,
        query: str,
        pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions,
    ) -> list[ScoredCandidate]: ...
