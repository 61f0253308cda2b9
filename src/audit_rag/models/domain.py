"""Core domain objects used throughout the system."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

StrategyName = Literal["keyword", "semantic", "hybrid"]


def _as_score(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class AuditRecord:
    audit_result_id: str
    project_name: str
    year: int | str
    department: str
    risk_area: str
    description: str
    code: str
    nilai: float
    subholding: str
    bobot: float | None = None
    kadar: float | None = None
    project_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditRecord:
        """Build a record from a store document (camelCase or snake_case keys)."""

        def pick(*keys: str, default: Any = "") -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        return cls(
            audit_result_id=str(pick("auditResultId", "audit_result_id", "id")),
            project_name=str(pick("projectName", "project_name")),
            year=pick("year", default=""),
            department=str(pick("department")),
            risk_area=str(pick("riskArea", "risk_area")),
            description=str(pick("descriptions", "description")),
            code=str(pick("code")),
            nilai=_as_score(pick("nilai", default=0)),
            subholding=str(pick("sh", "subholding")),
            bobot=pick("bobot", default=None),
            kadar=pick("kadar", default=None),
            project_id=pick("projectId", "project_id", default=None),
        )

    def searchable_text(self) -> str:
        parts = [
            self.project_name,
            self.department,
            self.risk_area,
            self.description,
            self.code,
            self.subholding,
        ]
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class DateRange:
    start: date | None = None
    end: date | None = None


@dataclass
class ExtractedFilters:
    year: str | None = None
    project_type: str | None = None
    severity: list[str] = field(default_factory=list)
    status: list[str] = field(default_factory=list)
    department: str | None = None
    keywords: list[str] = field(default_factory=list)
    date_range: DateRange | None = None

    @property
    def has_specific_filters(self) -> bool:
        return (
            self.year is not None
            or self.department is not None
            or self.project_type is not None
        )

    @property
    def is_empty(self) -> bool:
        return not (
            self.year
            or self.project_type
            or self.severity
            or self.status
            or self.department
            or self.keywords
            or self.date_range
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.year is not None:
            out["year"] = self.year
        if self.project_type is not None:
            out["projectType"] = self.project_type
        if self.severity:
            out["severity"] = list(self.severity)
        if self.status:
            out["status"] = list(self.status)
        if self.department is not None:
            out["department"] = self.department
        if self.keywords:
            out["keywords"] = list(self.keywords)
        if self.date_range is not None:
            out["dateRange"] = {
                "start": self.date_range.start.isoformat() if self.date_range.start else None,
                "end": self.date_range.end.isoformat() if self.date_range.end else None,
            }
        return out


@dataclass
class FilterValidationResult:
    valid: bool
    errors: list[str]
    sanitized_filters: ExtractedFilters


@dataclass(frozen=True)
class RecognizedIntent:
    intent: str
    filters: ExtractedFilters
    requires_analysis: bool
    confidence: float
    original_query: str
    source: str = "pattern"  # "llm", "pattern"


@dataclass
class ScoredCandidate:
    record: AuditRecord
    relevance: float


@dataclass
class ContextMetadata:
    total_candidates: int
    selected_count: int
    average_relevance: float
    truncated: bool


@dataclass
class ContextBuildResult:
    context_string: str
    selected_records: list[AuditRecord]
    strategy_used: StrategyName
    estimated_tokens: int
    metadata: ContextMetadata
    relevance_scores: list[float] = field(default_factory=list)


@dataclass
class ContextBuildOptions:
    max_results: int = 20
    max_tokens: int = 10_000
    strategy: StrategyName | None = None
    min_threshold: float = 0.2
