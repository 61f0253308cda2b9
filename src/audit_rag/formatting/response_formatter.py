"""Shape selected records and generated prose into QueryResponse objects."""

from __future__ import annotations

import math
import time
from typing import Any

from audit_rag.config.constants import NEUTRAL_GLYPH, SEVERITY_GLYPHS, STATUS_GLYPHS
from audit_rag.models.domain import AuditRecord
from audit_rag.models.schemas import (
    FindingSummary,
    PaginationInfo,
    QueryMetadata,
    QueryResponse,
    QueryType,
)
from audit_rag.scoring.severity import severity_label

DEFAULT_STATUS = "Open"
TITLE_MAX_CHARS = 80
NO_RESULTS_ANSWER = "No audit results found matching your query."


def severity_glyph(severity: str) -> str:
    return SEVERITY_GLYPHS.get(severity, NEUTRAL_GLYPH)


def status_glyph(status: str) -> str:
    return STATUS_GLYPHS.get(status, NEUTRAL_GLYPH)


def _title(record: AuditRecord) -> str:
    text = " ".join(record.description.split()) or record.risk_area or record.code
    if len(text) > TITLE_MAX_CHARS:
        return text[: TITLE_MAX_CHARS - 3].rstrip() + "..."
    return text


def to_finding_summary(record: AuditRecord) -> FindingSummary:
    return FindingSummary(
        id=record.audit_result_id,
        title=_title(record),
        severity=severity_label(record.nilai),
        status=DEFAULT_STATUS,
        project_name=record.project_name,
        department=record.department,
        year=record.year,
        score=record.nilai,
    )


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class ResponseFormatter:
    """Pure formatting; the only state is the page size."""

    def __init__(self, page_size: int = 10) -> None:
        self.page_size = page_size

    def paginate(self, total: int, page: int) -> PaginationInfo:
        total_pages = max(1, math.ceil(total / self.page_size))
        current = min(max(page, 1), total_pages)
        return PaginationInfo(
            total_count=total,
            current_page=current,
            page_size=self.page_size,
            total_pages=total_pages,
            has_more=current < total_pages,
        )

    def _listing(
        self, records: list[AuditRecord], page: int
    ) -> tuple[str, list[FindingSummary], PaginationInfo | None]:
        total = len(records)
        info = self.paginate(total, page)
        start = (info.current_page - 1) * self.page_size
        visible = records[start : start + self.page_size]
        summaries = [to_finding_summary(r) for r in visible]

        lines = [f"Found **{total}** finding{_plural(total)} matching your criteria.", ""]
        if total > self.page_size:
            lines.append(
                f"Showing {start + 1}-{start + len(visible)} of {total} "
                f"(page {info.current_page} of {info.total_pages})."
            )
            lines.append("")

        for offset, summary in enumerate(summaries, start + 1):
            lines.append(
                f"{offset}. {severity_glyph(summary.severity)} [{summary.id}] {summary.title}"
            )
            lines.append(
                f"   {summary.severity} (Score: {summary.score}) | "
                f"{status_glyph(summary.status)} {summary.status} | "
                f"{summary.project_name} | {summary.department} | {summary.year}"
            )

        pagination = info if total > self.page_size else None
        return "\n".join(lines).rstrip(), summaries, pagination

    def format_simple_results(
        self,
        records: list[AuditRecord],
        metadata: QueryMetadata,
        page: int = 1,
    ) -> QueryResponse:
        answer, summaries, pagination = self._listing(records, page)
        return QueryResponse(
            type="simple",
            answer=answer,
            finding_summaries=summaries,
            metadata=metadata,
            pagination=pagination,
        )

    def format_ai_response(
        self,
        llm_text: str,
        records: list[AuditRecord],
        metadata: QueryMetadata,
    ) -> QueryResponse:
        seen: set[str] = set()
        summaries: list[FindingSummary] = []
        for record in records:
            if record.audit_result_id in seen:
                continue
            seen.add(record.audit_result_id)
            summaries.append(to_finding_summary(record))

        answer = llm_text
        if summaries:
            references = "\n".join(
                f"{i}. [{s.id}] {s.title} ({severity_glyph(s.severity)} {s.severity})"
                for i, s in enumerate(summaries, 1)
            )
            answer += "\n\n---\n\n**📚 Source Findings Referenced:**\n\n" + references

        return QueryResponse(
            type="complex",
            answer=answer,
            finding_summaries=summaries,
            metadata=metadata,
        )

    def format_hybrid_response(
        self,
        records: list[AuditRecord],
        llm_analysis: str,
        metadata: QueryMetadata,
        page: int = 1,
    ) -> QueryResponse:
        listing, summaries, pagination = self._listing(records, page)
        answer = (
            "## 🔍 Database Results\n\n"
            + listing
            + "\n\n---\n\n## 🤖 AI Analysis\n\n"
            + llm_analysis
        )
        return QueryResponse(
            type="hybrid",
            answer=answer,
            finding_summaries=summaries,
            metadata=metadata,
            pagination=pagination,
        )

    @staticmethod
    def no_results_response(query_type: QueryType, metadata: QueryMetadata) -> QueryResponse:
        return QueryResponse(type=query_type, answer=NO_RESULTS_ANSWER, metadata=metadata)


def build_metadata(
    query_type: QueryType,
    start_time: float,
    findings_count: int,
    confidence: float,
    extracted_filters: dict[str, Any],
    tokens_used: int | None = None,
    strategy_used: str | None = None,
) -> QueryMetadata:
    """``start_time`` is a ``time.monotonic()`` reading taken when the query arrived."""
    return QueryMetadata(
        query_type=query_type,
        execution_time_ms=round((time.monotonic() - start_time) * 1000, 2),
        findings_analyzed=findings_count,
        tokens_used=tokens_used,
        confidence=confidence,
        extracted_filters=extracted_filters,
        strategy_used=strategy_used,
    )
