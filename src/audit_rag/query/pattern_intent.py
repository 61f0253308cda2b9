"""Deterministic intent recognition used when the completion capability cannot help."""

from __future__ import annotations

import re

from audit_rag.config.constants import (
    ANALYSIS_KEYWORDS,
    DOMAIN_TERMS,
    FALLBACK_COMMON_WORDS,
    FALLBACK_FILTER_WORDS,
    FALLBACK_SEVERITY_MAP,
    FALLBACK_STATUS_MAP,
    MAX_YEAR,
    MIN_YEAR,
)
from audit_rag.models.domain import ExtractedFilters, RecognizedIntent
from audit_rag.observability.logger import get_logger
from audit_rag.query.filter_extractor import dedupe_keywords

logger = get_logger("pattern_intent")

FALLBACK_CONFIDENCE = 0.6

_YEAR_RE = re.compile(r"\b(20\d{2})\b")
_EDGE_PUNCTUATION = "\"'.,;:!?()[]{}"


def _synonym_patterns(table: dict[str, str]) -> list[tuple[re.Pattern[str], str]]:
    return [(re.compile(rf"\b{re.escape(k)}\b"), v) for k, v in table.items()]


_SEVERITY_SYNONYMS = _synonym_patterns(FALLBACK_SEVERITY_MAP)
_STATUS_SYNONYMS = _synonym_patterns(FALLBACK_STATUS_MAP)


class PatternIntentRecognizer:
    """Alias tables, a year regex and the domain acronym dictionary; no I/O."""

    def recognize(self, query: str) -> RecognizedIntent:
        lowered = query.lower()
        filters = ExtractedFilters()

        match = _YEAR_RE.search(query)
        if match and MIN_YEAR <= int(match.group(1)) <= MAX_YEAR:
            filters.year = match.group(1)

        filters.severity = self._collect(lowered, _SEVERITY_SYNONYMS)
        filters.status = self._collect(lowered, _STATUS_SYNONYMS)
        filters.keywords = dedupe_keywords(
            self._expand_domain_terms(lowered) + self._free_keywords(query)
        )

        requires_analysis = (
            any(keyword in lowered for keyword in ANALYSIS_KEYWORDS) or bool(filters.keywords)
        )

        logger.debug(
            "fallback_intent",
            requires_analysis=requires_analysis,
            keywords=len(filters.keywords),
        )

        return RecognizedIntent(
            intent="Analyze findings" if requires_analysis else "Find findings",
            filters=filters,
            requires_analysis=requires_analysis,
            confidence=FALLBACK_CONFIDENCE,
            original_query=query,
            source="pattern",
        )

    @staticmethod
    def _collect(lowered: str, synonyms: list[tuple[re.Pattern[str], str]]) -> list[str]:
        found: list[str] = []
        for pattern, value in synonyms:
            if value not in found and pattern.search(lowered):
                found.append(value)
        return found

    @staticmethod
    def _expand_domain_terms(lowered: str) -> list[str]:
        expanded: list[str] = []
        for term, expansions in DOMAIN_TERMS.items():
            if term in lowered:
                expanded.extend(expansions)
        return expanded

    @staticmethod
    def _free_keywords(query: str) -> list[str]:
        words = []
        for raw in query.split():
            word = raw.strip(_EDGE_PUNCTUATION)
            lower = word.lower()
            if (
                len(word) > 2
                and lower not in FALLBACK_COMMON_WORDS
                and lower not in FALLBACK_FILTER_WORDS
                and not word.isdigit()
            ):
                words.append(word)
        return words
