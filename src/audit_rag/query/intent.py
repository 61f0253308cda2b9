"""LLM-backed intent recognition with a deterministic fallback.

The completion call and JSON parsing produce an ``IntentResult``: either an
``IntentParsed`` carrying the recognized intent or an ``IntentFailure``
carrying the raw text and error. ``with_fallback`` turns any failure into the
pattern recognizer's answer, so ``IntentRecognizer.recognize_intent`` always
returns an intent.
"""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Any

from audit_rag.config.constants import (
    MAX_YEAR,
    MIN_YEAR,
    PROJECT_TYPES,
    SEVERITIES,
    SEVERITY_ALIASES,
    STATUS_ALIASES,
    STATUSES,
)
from audit_rag.exceptions import CapabilityTimeout, IntentParseError
from audit_rag.generation.prompt_templates import build_intent_prompt
from audit_rag.models.domain import ExtractedFilters, RecognizedIntent
from audit_rag.observability.logger import get_logger
from audit_rag.protocols.llm import TextCompletion
from audit_rag.query.filter_extractor import dedupe_keywords
from audit_rag.query.pattern_intent import PatternIntentRecognizer

logger = get_logger("intent")

DEFAULT_LLM_CONFIDENCE = 0.7

_FENCED_JSON_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")
_BRACED_JSON_RE = re.compile(r"\{[\s\S]*\}")
_YEAR_RE = re.compile(r"(20\d{2})")


@dataclass(frozen=True)
class IntentParsed:
    intent: RecognizedIntent


@dataclass(frozen=True)
class IntentFailure:
    reason: str
    raw: str | None = None
    error: Exception | None = None


IntentResult = IntentParsed | IntentFailure


def _canonical(value: Any, allowed: tuple[str, ...], aliases: dict[str, str] | None = None) -> str | None:
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    for candidate in allowed:
        if candidate.lower() == key:
            return candidate
    if aliases:
        return aliases.get(key)
    return None


def _canonical_list(values: Any, allowed: tuple[str, ...], aliases: dict[str, str]) -> list[str]:
    if not isinstance(values, list):
        return []
    out: list[str] = []
    for value in values:
        canonical = _canonical(value, allowed, aliases)
        if canonical and canonical not in out:
            out.append(canonical)
    return out


def _normalize_year(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    match = _YEAR_RE.search(str(value))
    if match and MIN_YEAR <= int(match.group(1)) <= MAX_YEAR:
        return match.group(1)
    return None


def _normalize_confidence(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return DEFAULT_LLM_CONFIDENCE
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_LLM_CONFIDENCE
    return min(max(confidence, 0.0), 1.0)


def _extract_json(raw: str) -> dict[str, Any]:
    match = _FENCED_JSON_RE.search(raw) or _BRACED_JSON_RE.search(raw)
    if not match:
        raise IntentParseError("No JSON found in completion output")
    text = match.group(1) if match.re is _FENCED_JSON_RE else match.group(0)
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise IntentParseError(f"Invalid JSON in completion output: {e}") from e
    if not isinstance(parsed, dict):
        raise IntentParseError("Completion JSON is not an object")
    return parsed


def _filters_from_json(data: Any) -> ExtractedFilters:
    if not isinstance(data, dict):
        return ExtractedFilters()

    filters = ExtractedFilters(
        year=_normalize_year(data.get("year")),
        project_type=_canonical(data.get("projectType"), PROJECT_TYPES),
        severity=_canonical_list(data.get("severity"), SEVERITIES, SEVERITY_ALIASES),
        status=_canonical_list(data.get("status"), STATUSES, STATUS_ALIASES),
    )

    department = data.get("department")
    if isinstance(department, str) and department.strip():
        filters.department = department.strip()

    keywords = data.get("keywords")
    if isinstance(keywords, list):
        terms = [str(k) for k in keywords if isinstance(k, (str, int, float)) and str(k).strip()]
        if filters.department:
            terms = [t for t in terms if t.strip().lower() != filters.department.lower()]
        filters.keywords = dedupe_keywords(terms)

    return filters


def parse_intent_response(raw: str, query: str) -> IntentResult:
    """Parse completion output into an intent; never raises."""
    try:
        parsed = _extract_json(raw)
    except IntentParseError as e:
        return IntentFailure(reason="malformed_output", raw=raw, error=e)

    intent_text = parsed.get("intent")
    intent = RecognizedIntent(
        intent=intent_text if isinstance(intent_text, str) and intent_text else "Find findings",
        filters=_filters_from_json(parsed.get("filters")),
        requires_analysis=bool(parsed.get("requiresAnalysis", False)),
        confidence=_normalize_confidence(parsed.get("confidence")),
        original_query=query,
        source="llm",
    )
    return IntentParsed(intent=intent)


def with_fallback(
    result: IntentResult,
    query: str,
    fallback: PatternIntentRecognizer | None = None,
) -> RecognizedIntent:
    if isinstance(result, IntentParsed):
        return result.intent

    logger.warning(
        "intent_fallback",
        reason=result.reason,
        error=str(result.error) if result.error else None,
    )
    return (fallback or PatternIntentRecognizer()).recognize(query)


class IntentRecognizer:
    def __init__(
        self,
        completion: TextCompletion | None = None,
        fallback: PatternIntentRecognizer | None = None,
        timeout_s: float = 30.0,
    ) -> None:
        self._completion = completion
        self._fallback = fallback or PatternIntentRecognizer()
        self._timeout_s = timeout_s

    async def recognize_intent(self, query: str) -> RecognizedIntent:
        result = await self._recognize_with_completion(query)
        intent = with_fallback(result, query, self._fallback)

        logger.info(
            "intent_recognized",
            source=intent.source,
            intent=intent.intent,
            requires_analysis=intent.requires_analysis,
            confidence=intent.confidence,
            filters=intent.filters.to_dict(),
        )
        return intent

    async def _recognize_with_completion(self, query: str) -> IntentResult:
        if self._completion is None or not self._completion.is_available():
            return IntentFailure(reason="completion_unavailable")

        try:
            raw = await asyncio.wait_for(
                self._completion.complete(build_intent_prompt(query)),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError:
            error = CapabilityTimeout(f"Intent completion exceeded {self._timeout_s}s")
            return IntentFailure(reason="timeout", error=error)
        except Exception as e:
            return IntentFailure(reason="completion_error", error=e)

        return parse_intent_response(raw, query)
