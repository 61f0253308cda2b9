"""Query pipeline: intent, candidate pool, context, answer, formatted response."""

from __future__ import annotations

import time

from audit_rag.config.settings import Settings
from audit_rag.exceptions import AuditRAGError, CapabilityTimeout, CompletionError
from audit_rag.formatting.response_formatter import ResponseFormatter, build_metadata
from audit_rag.generation.answer_generator import AnswerGenerator
from audit_rag.models.domain import ContextBuildOptions, ExtractedFilters, RecognizedIntent
from audit_rag.models.schemas import QueryRequest, QueryResponse, QueryType
from audit_rag.observability.logger import get_logger
from audit_rag.observability.metrics import log_response_metrics, log_retrieval_metrics
from audit_rag.observability.tracing import TraceContext
from audit_rag.protocols.store import RecordStore
from audit_rag.query.filter_extractor import FilterExtractor
from audit_rag.query.intent import IntentRecognizer
from audit_rag.retrieval.context_builder import ContextBuilder

logger = get_logger("query_pipeline")


def decide_query_type(
    forced: QueryType | None,
    intent: RecognizedIntent,
    filters: ExtractedFilters,
) -> QueryType:
    if forced:
        return forced
    if intent.requires_analysis:
        return "complex" if filters.is_empty else "hybrid"
    return "simple"


class QueryPipeline:
    def __init__(
        self,
        intent_recognizer: IntentRecognizer,
        filter_extractor: FilterExtractor,
        record_store: RecordStore,
        context_builder: ContextBuilder,
        answer_generator: AnswerGenerator,
        formatter: ResponseFormatter,
        settings: Settings,
    ) -> None:
        self._intents = intent_recognizer
        self._extractor = filter_extractor
        self._store = record_store
        self._context = context_builder
        self._generator = answer_generator
        self._formatter = formatter
        self._settings = settings

    async def execute(self, request: QueryRequest) -> QueryResponse:
        trace = TraceContext()
        start = time.monotonic()

        with trace.span("intent"):
            intent = await self._intents.recognize_intent(request.query)

        validation = self._extractor.validate_filters(intent.filters)
        if not validation.valid:
            logger.warning("intent_filters_invalid", trace_id=trace.trace_id, errors=validation.errors)
        filters = validation.sanitized_filters
        extracted = filters.to_dict()

        query_type = decide_query_type(request.force_query_type, intent, filters)
        limit = (
            self._settings.simple_pool_limit
            if query_type == "simple"
            else self._settings.analysis_pool_limit
        )

        with trace.span("fetch", query_type=query_type) as span:
            try:
                pool = await self._store.fetch(filters, limit)
            except AuditRAGError as e:
                logger.error("record_fetch_failed", trace_id=trace.trace_id, error=str(e))
                pool = []
            span.metadata["pool"] = len(pool)

        if not pool:
            metadata = build_metadata(query_type, start, 0, intent.confidence, extracted, tokens_used=0)
            return self._finish(trace, intent, self._formatter.no_results_response(query_type, metadata))

        if query_type == "simple":
            metadata = build_metadata("simple", start, len(pool), intent.confidence, extracted)
            response = self._formatter.format_simple_results(pool, metadata, request.page)
            return self._finish(trace, intent, response)

        options = ContextBuildOptions(
            max_results=request.max_results or self._settings.max_results,
            max_tokens=self._settings.max_tokens,
            min_threshold=self._settings.min_threshold,
        )
        with trace.span("context") as span:
            context = await self._context.build_context(request.query, pool, filters, options)
            span.metadata["strategy"] = context.strategy_used

        log_retrieval_metrics(
            trace.trace_id,
            context.strategy_used,
            context.metadata.total_candidates,
            context.metadata.selected_count,
            context.metadata.average_relevance,
            context.estimated_tokens,
            context.metadata.truncated,
        )

        history = [turn.model_dump() for turn in request.history]
        try:
            with trace.span("generation"):
                answer = await self._generator.generate(
                    intent,
                    context.context_string,
                    session_id=request.session_id,
                    history=history,
                )
        except (CompletionError, CapabilityTimeout) as e:
            logger.warning(
                "generation_degraded",
                trace_id=trace.trace_id,
                query_type=query_type,
                error=str(e),
            )
            records = pool if query_type == "hybrid" else (context.selected_records or pool)
            metadata = build_metadata(
                "simple",
                start,
                len(records),
                intent.confidence,
                extracted,
                strategy_used=context.strategy_used,
            )
            response = self._formatter.format_simple_results(records, metadata, request.page)
            return self._finish(trace, intent, response)

        if query_type == "complex":
            metadata = build_metadata(
                "complex",
                start,
                context.metadata.selected_count,
                intent.confidence,
                extracted,
                tokens_used=context.estimated_tokens,
                strategy_used=context.strategy_used,
            )
            response = self._formatter.format_ai_response(answer, context.selected_records, metadata)
        else:
            metadata = build_metadata(
                "hybrid",
                start,
                len(pool),
                intent.confidence,
                extracted,
                tokens_used=context.estimated_tokens,
                strategy_used=context.strategy_used,
            )
            response = self._formatter.format_hybrid_response(pool, answer, metadata, request.page)

        return self._finish(trace, intent, response)

    def _finish(
        self,
        trace: TraceContext,
        intent: RecognizedIntent,
        response: QueryResponse,
    ) -> QueryResponse:
        log_response_metrics(
            trace.trace_id,
            response.type,
            response.metadata.findings_analyzed,
            response.metadata.confidence,
            intent.source,
            trace.span_summary(),
        )
        return response
