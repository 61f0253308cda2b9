"""Rule-based relevance of an audit record against extracted filters."""

from __future__ import annotations

from audit_rag.config.constants import (
    RELEVANCE_WEIGHT_DEPARTMENT,
    RELEVANCE_WEIGHT_KEYWORDS,
    RELEVANCE_WEIGHT_YEAR,
)
from audit_rag.models.domain import AuditRecord, ExtractedFilters, ScoredCandidate

RAW_SCALE = 100.0


def keyword_relevance(record: AuditRecord, filters: ExtractedFilters) -> float:
    """Raw score on a 0-100 scale.

    Year match is worth 30, a department substring match 25, and keyword
    overlap up to 25 in proportion to the fraction of keywords found in the
    record's searchable text.
    """
    score = 0.0

    if filters.year and str(record.year).strip() == str(filters.year).strip():
        score += RELEVANCE_WEIGHT_YEAR

    if filters.department and filters.department.lower() in record.department.lower():
        score += RELEVANCE_WEIGHT_DEPARTMENT

    if filters.keywords:
        text = record.searchable_text().lower()
        matches = sum(1 for keyword in filters.keywords if keyword.lower() in text)
        score += matches / len(filters.keywords) * RELEVANCE_WEIGHT_KEYWORDS

    return score


def rank_by_keyword(
    pool: list[AuditRecord],
    filters: ExtractedFilters,
    limit: int,
) -> list[ScoredCandidate]:
    """Top ``limit`` records by keyword relevance, normalized to [0, 1].

    Ties keep pool order.
    """
    scored = [
        ScoredCandidate(record=record, relevance=keyword_relevance(record, filters) / RAW_SCALE)
        for record in pool
    ]
    scored.sort(key=lambda c: c.relevance, reverse=True)
    return scored[:limit]
