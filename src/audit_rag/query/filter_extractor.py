"""Deterministic extraction of structured filters from natural-language queries."""

from __future__ import annotations

import re
from datetime import date

from audit_rag.config.constants import (
    CASE_SENSITIVE_DEPARTMENTS,
    DEPARTMENTS,
    KEYWORD_STOPWORDS,
    MAX_YEAR,
    MIN_YEAR,
    PROJECT_TYPE_ALIASES,
    PROJECT_TYPES,
    SEVERITIES,
    SEVERITY_ALIASES,
    STATUS_ALIASES,
    STATUSES,
)
from audit_rag.models.domain import ExtractedFilters, FilterValidationResult
from audit_rag.observability.logger import get_logger

logger = get_logger("filter_extractor")

_YEAR_RE = re.compile(r"\b(20\d{2})\b")
_THIS_YEAR_RE = re.compile(r"\b(this year|current year)\b", re.I)
_LAST_YEAR_RE = re.compile(r"\b(last year|previous year)\b", re.I)
_NEXT_YEAR_RE = re.compile(r"\bnext year\b", re.I)

# Tier 1: explicit "X department" phrasing
_EXPLICIT_DEPARTMENT_PATTERNS = (
    re.compile(
        r"\b(?:in|from|at|for|of)\s+(?:the\s+)?"
        r"([A-Za-z][A-Za-z&]*(?:\s+[A-Za-z&]+){0,2}?)\s+(?:department|dept)\b",
        re.I,
    ),
    re.compile(r"\b([A-Za-z][A-Za-z&]*)\s+(?:department|dept)\b", re.I),
    re.compile(
        r"\b(?:department|dept)\b(?:\s*[:=]\s*|\s+(?:is\s+)?)([A-Za-z][A-Za-z&]*)", re.I
    ),
)

# Tier 3: department named next to findings/issues/problems
_CONTEXT_DEPARTMENT_PATTERNS = (
    re.compile(
        r"\b(?:show|list|find|get|display)\s+(?:me\s+)?([A-Za-z&]+)\s+(?:findings?|issues?|problems?)",
        re.I,
    ),
    re.compile(r"\b([A-Za-z&]+)\s+(?:findings?|issues?|problems?)\s+(?:in|from|for)", re.I),
    re.compile(r"\b(?:in|from|for)\s+([A-Za-z&]+)\s+(?:findings?|issues?|problems?)", re.I),
)

_DEPARTMENT_NOISE = KEYWORD_STOPWORDS | {
    "a", "an", "in", "of", "at", "to", "is", "or", "on", "by", "me", "my",
    "each", "any", "every", "issues", "issue", "problems", "problem",
    "report", "reports", "audit", "department", "dept",
}

_QUOTED_RE = re.compile(r'"([^"]+)"')
_WORD_RE = re.compile(r"\b[A-Za-z]{3,}\b")


def _alias_pattern(alias: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(alias)}\b", re.I)


def _sorted_aliases(table: dict[str, str]) -> list[tuple[re.Pattern[str], str]]:
    # Longest alias first so "shopping center" wins over "mall"-style short forms
    return [
        (_alias_pattern(alias), table[alias])
        for alias in sorted(table, key=len, reverse=True)
    ]


_PROJECT_TYPE_PATTERNS = _sorted_aliases(PROJECT_TYPE_ALIASES)
_SEVERITY_PATTERNS = _sorted_aliases(SEVERITY_ALIASES)
_STATUS_PATTERNS = _sorted_aliases(STATUS_ALIASES)


def _department_pattern(name: str) -> re.Pattern[str]:
    # Short codes must be written upper-case: "it" and "qa" are ordinary words.
    flags = 0 if name in CASE_SENSITIVE_DEPARTMENTS else re.I
    return re.compile(rf"(?<![A-Za-z]){re.escape(name)}(?![A-Za-z])", flags)


_DEPARTMENT_PATTERNS = [(_department_pattern(d), d) for d in DEPARTMENTS]
_DEPARTMENT_BY_LOWER = {d.lower(): d for d in DEPARTMENTS}

_KNOWN_DEPARTMENTS = "|".join(
    re.escape(d) for d in sorted(DEPARTMENTS, key=len, reverse=True)
)

# Known names next to "department" win over the single-word captures below,
# so "Customer Service department" keeps both words.
_NAMED_DEPARTMENT_PATTERNS = (
    re.compile(rf"(?<![A-Za-z&])({_KNOWN_DEPARTMENTS})\s+(?:department|dept)\b", re.I),
    re.compile(
        rf"\b(?:department|dept)\b(?:\s*[:=]\s*|\s+(?:is\s+|of\s+(?:the\s+)?)?)"
        rf"({_KNOWN_DEPARTMENTS})(?![A-Za-z&])",
        re.I,
    ),
)


def dedupe_keywords(keywords: list[str]) -> list[str]:
    """Case-insensitive dedupe that keeps the first-seen spelling and order."""
    seen: set[str] = set()
    unique: list[str] = []
    for keyword in keywords:
        key = keyword.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(keyword.strip())
    return unique


class FilterExtractor:
    def __init__(self, today: date | None = None) -> None:
        self._today = today

    def extract_with_patterns(self, query: str) -> ExtractedFilters:
        filters = ExtractedFilters(
            year=self._extract_year(query),
            project_type=self._extract_project_type(query),
            severity=self._extract_all(query, _SEVERITY_PATTERNS),
            status=self._extract_all(query, _STATUS_PATTERNS),
            department=self._extract_department(query),
            keywords=self._extract_keywords(query),
        )
        logger.debug("patterns_extracted", filters=filters.to_dict())
        return filters

    async def extract_with_ai(self, query: str) -> ExtractedFilters:
        # Structured LLM extraction lives in IntentRecognizer; this path stays deterministic.
        return self.extract_with_patterns(query)

    def _extract_year(self, query: str) -> str | None:
        current_year = (self._today or date.today()).year

        if _THIS_YEAR_RE.search(query):
            return str(current_year)
        if _LAST_YEAR_RE.search(query):
            return str(current_year - 1)
        if _NEXT_YEAR_RE.search(query):
            return str(current_year + 1)

        match = _YEAR_RE.search(query)
        if match:
            year = int(match.group(1))
            if MIN_YEAR <= year <= MAX_YEAR:
                return str(year)
        return None

    @staticmethod
    def _extract_project_type(query: str) -> str | None:
        for pattern, project_type in _PROJECT_TYPE_PATTERNS:
            if pattern.search(query):
                return project_type
        return None

    @staticmethod
    def _extract_all(query: str, patterns: list[tuple[re.Pattern[str], str]]) -> list[str]:
        found: list[str] = []
        for pattern, value in patterns:
            if value not in found and pattern.search(query):
                found.append(value)
        return found

    @staticmethod
    def _extract_department(query: str) -> str | None:
        for pattern in _NAMED_DEPARTMENT_PATTERNS:
            match = pattern.search(query)
            if match:
                return _DEPARTMENT_BY_LOWER[" ".join(match.group(1).split()).lower()]

        for pattern in _EXPLICIT_DEPARTMENT_PATTERNS:
            match = pattern.search(query)
            if not match:
                continue
            candidate = " ".join(match.group(1).split())
            if candidate.lower() in _DEPARTMENT_NOISE:
                continue
            return _DEPARTMENT_BY_LOWER.get(candidate.lower(), candidate)

        for pattern, name in _DEPARTMENT_PATTERNS:
            if pattern.search(query):
                return name

        for pattern in _CONTEXT_DEPARTMENT_PATTERNS:
            match = pattern.search(query)
            if match:
                canonical = _DEPARTMENT_BY_LOWER.get(match.group(1).lower())
                if canonical:
                    return canonical

        return None

    @staticmethod
    def _extract_keywords(query: str) -> list[str]:
        keywords = [phrase.strip() for phrase in _QUOTED_RE.findall(query)]

        unquoted = _QUOTED_RE.sub(" ", query)
        for word in _WORD_RE.findall(unquoted):
            if word.lower() not in KEYWORD_STOPWORDS:
                keywords.append(word)

        return dedupe_keywords(keywords)

    def validate_filters(self, filters: ExtractedFilters) -> FilterValidationResult:
        """Drop invalid values and report them; never raises."""
        errors: list[str] = []
        sanitized = ExtractedFilters()

        if filters.year is not None:
            year_text = str(filters.year).strip()
            if year_text.isdigit() and MIN_YEAR <= int(year_text) <= MAX_YEAR:
                sanitized.year = year_text
            else:
                errors.append(
                    f"Invalid year: {filters.year}. Must be between {MIN_YEAR} and {MAX_YEAR}."
                )

        if filters.project_type is not None:
            if filters.project_type in PROJECT_TYPES:
                sanitized.project_type = filters.project_type
            else:
                errors.append(f"Invalid project type: {filters.project_type}")

        if filters.severity:
            valid = [s for s in filters.severity if s in SEVERITIES]
            invalid = [s for s in filters.severity if s not in SEVERITIES]
            sanitized.severity = valid
            if invalid:
                errors.append(f"Invalid severity values: {', '.join(map(str, invalid))}")

        if filters.status:
            valid = [s for s in filters.status if s in STATUSES]
            invalid = [s for s in filters.status if s not in STATUSES]
            sanitized.status = valid
            if invalid:
                errors.append(f"Invalid status values: {', '.join(map(str, invalid))}")

        if filters.department is not None:
            sanitized.department = filters.department

        if filters.keywords:
            sanitized.keywords = list(filters.keywords)

        if filters.date_range is not None:
            start, end = filters.date_range.start, filters.date_range.end
            if start is not None and end is not None and start > end:
                errors.append("Invalid date range: start date must be before end date")
            else:
                sanitized.date_range = filters.date_range

        if errors:
            logger.warning("filters_sanitized", errors=errors)

        return FilterValidationResult(
            valid=not errors,
            errors=errors,
            sanitized_filters=sanitized,
        )
