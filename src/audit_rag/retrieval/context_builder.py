"""Token-budgeted context assembly over a strategy-selected set of records."""

from __future__ import annotations

import math

from audit_rag.exceptions import CapabilityTimeout, ConfigurationError, SemanticSearchError
from audit_rag.models.domain import (
    AuditRecord,
    ContextBuildOptions,
    ContextBuildResult,
    ContextMetadata,
    ExtractedFilters,
    ScoredCandidate,
    StrategyName,
)
from audit_rag.observability.logger import get_logger
from audit_rag.protocols.semantic import SemanticSearch
from audit_rag.protocols.strategy import SelectionStrategy
from audit_rag.retrieval.strategies import (
    HybridStrategy,
    KeywordStrategy,
    SemanticStrategy,
    select_strategy,
)
from audit_rag.scoring.severity import severity_label

logger = get_logger("context_builder")

CONTEXT_HEADER = "Relevant Audit Results:\n\n"
NO_RECORDS_CONTEXT = "No audit results available for analysis."
NO_SELECTION_CONTEXT = "No relevant audit results found."

RECORD_TEMPLATE = """Audit Result {index} [{record.audit_result_id}]:
Project: {record.project_name}
Year: {record.year}
Department: {record.department}
Risk Area: {record.risk_area}
Description: {record.description}
Code: {record.code}
Severity: {severity} (Score: {record.nilai})
Subholding: {record.subholding}
"""


def format_record(record: AuditRecord, index: int) -> str:
    return RECORD_TEMPLATE.format(
        index=index,
        record=record,
        severity=severity_label(record.nilai),
    )


class ContextBuilder:
    def __init__(
        self,
        semantic: SemanticSearch | None = None,
        chars_per_token: int = 4,
        oversample_factor: int = 3,
        semantic_timeout_s: float = 20.0,
    ) -> None:
        if chars_per_token <= 0:
            raise ConfigurationError(f"chars_per_token must be positive, got {chars_per_token}")
        if oversample_factor < 1:
            raise ConfigurationError(f"oversample_factor must be at least 1, got {oversample_factor}")
        self._semantic = semantic
        self._chars_per_token = chars_per_token
        self._keyword = KeywordStrategy()
        self._strategies: dict[str, SelectionStrategy] = {"keyword": self._keyword}
        if semantic is not None:
            self._strategies["semantic"] = SemanticStrategy(semantic, timeout_s=semantic_timeout_s)
            self._strategies["hybrid"] = HybridStrategy(
                semantic,
                oversample_factor=oversample_factor,
                timeout_s=semantic_timeout_s,
            )

    @property
    def semantic_available(self) -> bool:
        return self._semantic is not None and self._semantic.is_available()

    def estimate_tokens(self, text: str) -> int:
        return math.ceil(len(text) / self._chars_per_token)

    async def build_context(
        self,
        query: str,
        candidate_pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions | None = None,
    ) -> ContextBuildResult:
        options = options or ContextBuildOptions()

        if not candidate_pool:
            logger.info("context_empty_pool")
            return self._placeholder(NO_RECORDS_CONTEXT, "keyword", total_candidates=0)

        strategy_name = options.strategy or select_strategy(
            query, filters, self.semantic_available
        )
        candidates, strategy_name = await self._select(
            strategy_name, query, candidate_pool, filters, options
        )
        candidates = candidates[: options.max_results]

        if not candidates:
            logger.info("context_empty_selection", strategy=strategy_name)
            return self._placeholder(
                NO_SELECTION_CONTEXT, strategy_name, total_candidates=len(candidate_pool)
            )

        context, appended, truncated = self._assemble(candidates, options.max_tokens)
        scores = [c.relevance for c in appended]
        average = sum(scores) / len(scores) if scores else 0.0
        estimated = self.estimate_tokens(context)

        logger.info(
            "context_built",
            strategy=strategy_name,
            candidates=len(candidate_pool),
            selected=len(appended),
            estimated_tokens=estimated,
            average_relevance=round(average, 4),
            truncated=truncated,
        )

        return ContextBuildResult(
            context_string=context,
            selected_records=[c.record for c in appended],
            strategy_used=strategy_name,
            estimated_tokens=estimated,
            metadata=ContextMetadata(
                total_candidates=len(candidate_pool),
                selected_count=len(appended),
                average_relevance=average,
                truncated=truncated,
            ),
            relevance_scores=scores,
        )

    async def _select(
        self,
        strategy_name: StrategyName,
        query: str,
        pool: list[AuditRecord],
        filters: ExtractedFilters,
        options: ContextBuildOptions,
    ) -> tuple[list[ScoredCandidate], StrategyName]:
        strategy = self._strategies.get(strategy_name)
        if strategy is None:
            logger.warning("strategy_unavailable", requested=strategy_name)
            return await self._keyword.select(query, pool, filters, options), "keyword"

        try:
            return await strategy.select(query, pool, filters, options), strategy_name
        except (SemanticSearchError, CapabilityTimeout) as e:
            logger.warning("semantic_degraded", requested=strategy_name, error=str(e))
            return await self._keyword.select(query, pool, filters, options), "keyword"

    def _assemble(
        self,
        candidates: list[ScoredCandidate],
        max_tokens: int,
    ) -> tuple[str, list[ScoredCandidate], bool]:
        context = CONTEXT_HEADER
        appended: list[ScoredCandidate] = []
        truncated = False

        for i, candidate in enumerate(candidates):
            entry = format_record(candidate.record, i + 1)
            if self.estimate_tokens(context + entry) > max_tokens:
                omitted = len(candidates) - i
                context += (
                    f"\n[Context truncated: {omitted} additional audit results "
                    "omitted due to token limit]\n"
                )
                truncated = True
                break
            context += entry + "\n"
            appended.append(candidate)

        return context.strip(), appended, truncated

    def _placeholder(
        self,
        text: str,
        strategy: StrategyName,
        total_candidates: int,
    ) -> ContextBuildResult:
        return ContextBuildResult(
            context_string=text,
            selected_records=[],
            strategy_used=strategy,
            estimated_tokens=self.estimate_tokens(text),
            metadata=ContextMetadata(
                total_candidates=total_candidates,
                selected_count=0,
                average_relevance=0.0,
                truncated=False,
            ),
        )

    async def prewarm_cache(self, records: list[AuditRecord]) -> int:
        """Embed every record ahead of time; returns the number embedded."""
        if not self.semantic_available:
            logger.warning("prewarm_skipped", reason="semantic_unavailable", records=len(records))
            return 0

        logger.info("prewarm_started", records=len(records))
        embedded = await self._semantic.pre_generate_embeddings(records)
        logger.info("prewarm_completed", embedded=embedded)
        return embedded
