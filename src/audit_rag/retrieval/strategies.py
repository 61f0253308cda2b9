"""Candidate selection strategies: keyword, semantic and hybrid."""

from __future__ import annotations

import asyncio

from audit_rag.config.constants import ANALYTICAL_KEYWORDS
from audit_rag.exceptions import AuditRAGError, CapabilityTimeout, SemanticSearchError
from audit_rag.models.domain import (
    AuditRecord,
    ContextBuildOptions,
    ExtractedFilters,
    ScoredCandidate,
    StrategyName,
)
from audit_rag.observability.logger import get_logger
from audit_rag.protocols.semantic import SemanticSearch
from audit_rag.retrieval.relevance import rank_by_keyword

logger = get_logger("strategies")


def has_analytical_intent(query: str) -> bool:
    lowered = query.lower()
    return any(keyword in lowered for keyword in ANALYTICAL_KEYWORDS)


def select_strategy(
    query: str,
    filters: ExtractedFilters,
    semantic_available: bool,
) -> StrategyName:
    if not semantic_available:
        return "keyword"

    analytical = has_analytical_intent(query)
    specific = filters.has_specific_filters

    if analytical and specific:
        return "hybrid"
    if analytical:
        return "semantic"
    if specific:
        return "keyword"
    return "hybrid"


async def _semantic_search(
    semantic: SemanticSearch,
    query: str,
    pool: list[AuditRecord],
    top_k: int,
    min_threshold: float,
    timeout_s: float,
) -> list[ScoredCandidate]:
    if not semantic.is_available():
        raise SemanticSearchError("Semantic search is not configured")
    try:
        return await asyncio.wait_for(
            semantic.search(query, pool, top_k, min_threshold),
            timeout=timeout_s,
        )
    except asyncio.TimeoutError as e:
        raise CapabilityTimeout(f"Semantic search exceeded {timeout_s}s") from e
    except AuditRAGError:
        raise
    except Exception as e:
        raise SemanticSearchError(f"Semantic search failed: {e}") from e


class KeywordStrategy:
    name: StrategyName = "keyword"

    async def select(
        self,
        query: str,
        pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions,
    ) -> list[ScoredCandidate]:
        return rank_by_keyword(pool, filters, options.max_results)


class SemanticStrategy:
    name: StrategyName = "semantic"

    def __init__(self, semantic: SemanticSearch, timeout_s: float = 20.0) -> None:
        self._semantic = semantic
        self._timeout_s = timeout_s

    async def select(
        self,
        query: str,
        pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions,
    ) -> list[ScoredCandidate]:
        return await _semantic_search(
            self._semantic,
            query,
            pool,
            options.max_results,
            options.min_threshold,
            self._timeout_s,
        )


class HybridStrategy:
    """Keyword prefilter to ``max_results * oversample_factor``, then semantic re-rank."""

    name: StrategyName = "hybrid"

    def __init__(
        self,
        semantic: SemanticSearch,
        oversample_factor: int = 3,
        timeout_s: float = 20.0,
    ) -> None:
        self._semantic = semantic
        self._oversample_factor = oversample_factor
        self._timeout_s = timeout_s

    def prefilter(
        self,
        pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions,
    ) -> list[AuditRecord]:
        limit = options.max_results * self._oversample_factor
        return [c.record for c in rank_by_keyword(pool, filters, limit)]

    async def select(
        self,
        query: str,
        pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions,
    ) -> list[ScoredCandidate]:
        narrowed = self.prefilter(pool, filters, options)
        logger.info("hybrid_prefilter", pool=len(pool), narrowed=len(narrowed))
        return await _semantic_search(
            self._semantic,
            query,
            narrowed,
            options.max_results,
            options.min_threshold,
            self._timeout_s,
        )
