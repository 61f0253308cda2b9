"""Metric recording helpers for query traces."""

from __future__ import annotations

from audit_rag.observability.logger import get_logger

logger = get_logger("metrics")


def log_retrieval_metrics(
    trace_id: str,
    strategy: str,
    total_candidates: int,
    selected_count: int,
    average_relevance: float,
    estimated_tokens: int,
    truncated: bool,
) -> None:
    logger.info(
        "retrieval_metrics",
        trace_id=trace_id,
        strategy=strategy,
        total_candidates=total_candidates,
        selected_count=selected_count,
        average_relevance=round(average_relevance, 4),
        estimated_tokens=estimated_tokens,
        truncated=truncated,
    )


def log_response_metrics(
    trace_id: str,
    query_type: str,
    findings_analyzed: int,
    confidence: float,
    intent_source: str,
    spans: list[dict],
) -> None:
    logger.info(
        "response_metrics",
        trace_id=trace_id,
        query_type=query_type,
        findings_analyzed=findings_analyzed,
        confidence=round(confidence, 4),
        intent_source=intent_source,
        spans=spans,
    )
