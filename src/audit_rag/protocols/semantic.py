"""Protocol for semantic-similarity providers."""

from __future__ import annotations

from typing import Protocol

from audit_rag.models.domain import AuditRecord, ScoredCandidate


class SemanticSearch(Protocol):
    def is_available(self) -> bool: ...

    async def search(
        self,
        query: str,
        pool: list[AuditRecord],
        top_k: int,
        min_threshold: float,
    ) -> list[ScoredCandidate]:
        """Return matches sorted by similarity, already filtered by threshold."""
        ...

    async def pre_generate_embeddings(self, records: list[AuditRecord]) -> int: ...
