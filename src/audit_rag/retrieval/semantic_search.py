"""Embedding-backed semantic similarity over a candidate pool."""

from __future__ import annotations

import numpy as np

from audit_rag.exceptions import EmbeddingError, SemanticSearchError
from audit_rag.models.domain import AuditRecord, ScoredCandidate
from audit_rag.observability.logger import get_logger
from audit_rag.protocols.embedder import Embedder

logger = get_logger("semantic_search")


def embedding_text(record: AuditRecord) -> str:
    """Text embedded for a record; project names are left out, the project id stays."""
    parts = [
        record.project_id or "",
        record.department,
        record.risk_area,
        record.description,
        record.code,
        record.subholding,
    ]
    return " ".join(p for p in parts if p)


def cosine_scores(query_vector: list[float], matrix: list[list[float]]) -> np.ndarray:
    q = np.asarray(query_vector, dtype=np.float32)
    m = np.asarray(matrix, dtype=np.float32)
    if m.size == 0:
        return np.zeros(0, dtype=np.float32)
    norms = np.linalg.norm(m, axis=1) * np.linalg.norm(q)
    dots = m @ q
    with np.errstate(divide="ignore", invalid="ignore"):
        scores = np.where(norms > 0, dots / norms, 0.0)
    return scores


class EmbeddingSemanticSearch:
    def __init__(self, embedder: Embedder) -> None:
        self._embedder = embedder

    def is_available(self) -> bool:
        return self._embedder.is_configured()

    async def search(
        self,
        query: str,
        pool: list[AuditRecord],
        top_k: int,
        min_threshold: float,
    ) -> list[ScoredCandidate]:
        if not pool:
            return []
        try:
            query_vector = await self._embedder.embed_query(query)
            vectors = await self._embedder.embed_texts([embedding_text(r) for r in pool])
        except EmbeddingError as e:
            raise SemanticSearchError(f"Semantic search failed: {e}") from e

        scores = cosine_scores(query_vector, vectors)
        order = np.argsort(-scores, kind="stable")

        matches = [
            ScoredCandidate(record=pool[i], relevance=float(scores[i]))
            for i in order
            if scores[i] >= min_threshold
        ][:top_k]

        logger.info(
            "semantic_search",
            pool=len(pool),
            matched=len(matches),
            top_score=round(matches[0].relevance, 4) if matches else None,
        )
        return matches

    async def pre_generate_embeddings(self, records: list[AuditRecord]) -> int:
        if not records:
            return 0
        try:
            vectors = await self._embedder.embed_texts([embedding_text(r) for r in records])
        except EmbeddingError as e:
            raise SemanticSearchError(f"Embedding prewarm failed: {e}") from e
        return len(vectors)
