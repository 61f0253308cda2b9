"""Tests for answer and session-title generation."""

import pytest

from audit_rag.exceptions import CapabilityTimeout, CompletionError, CompletionUnavailable
from audit_rag.generation.answer_generator import DEFAULT_SESSION_TITLE, AnswerGenerator, clean_title
from audit_rag.models.domain import ExtractedFilters, RecognizedIntent
from audit_rag.query.pattern_intent import PatternIntentRecognizer


@pytest.fixture
def intent():
    return RecognizedIntent(
        intent="Summarize permit risks",
        filters=ExtractedFilters(),
        requires_analysis=True,
        confidence=0.9,
        original_query="why are permits late",
        source="llm",
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ('"Permit Delays Review."', "Permit Delays Review"),
        ("  IT access findings  ", "IT access findings"),
        ("one two three four five six seven eight", "one two three four five six"),
        ("", DEFAULT_SESSION_TITLE),
        ('""', DEFAULT_SESSION_TITLE),
    ],
)
def test_clean_title(raw, expected):
    assert clean_title(raw) == expected


def test_clean_title_caps_length():
    title = clean_title("Extraordinarily Comprehensive Infrastructure Procurement Reconciliation")
    assert len(title) == 60
    assert title.endswith("...")


async def test_generate_builds_prompt(make_completion, intent):
    completion = make_completion(responses=["Permits lag approvals."])
    generator = AnswerGenerator(completion, timeout_s=1.0)

    answer = await generator.generate(intent, "Relevant Audit Results:\n\nAudit Result 1", session_id="s1")

    assert answer == "Permits lag approvals."
    assert "User Question: why are permits late" in completion.prompts[0]
    assert "Summarize permit risks" in completion.prompts[0]
    assert "Audit Result 1" in completion.prompts[0]
    assert completion.sessions == ["s1"]


async def test_generate_unavailable(make_completion, intent):
    generator = AnswerGenerator(make_completion(available=False))
    assert not generator.is_available()
    with pytest.raises(CompletionUnavailable):
        await generator.generate(intent, "ctx")


async def test_generate_propagates_completion_error(make_completion, intent):
    generator = AnswerGenerator(make_completion(error=CompletionError("rate limited")))
    with pytest.raises(CompletionError, match="rate limited"):
        await generator.generate(intent, "ctx")


async def test_generate_timeout(make_completion, intent):
    generator = AnswerGenerator(make_completion(responses=["late"], delay=0.5), timeout_s=0.05)
    with pytest.raises(CapabilityTimeout):
        await generator.generate(intent, "ctx")


async def test_session_title(make_completion):
    completion = make_completion(responses=['"Hotel Revenue Findings."'])
    title = await AnswerGenerator(completion).generate_session_title("Show hotel revenue findings")

    assert title == "Hotel Revenue Findings"
    assert "Show hotel revenue findings" in completion.prompts[0]


@pytest.mark.parametrize(
    "kwargs",
    [{"available": False}, {"error": CompletionError("down")}, {"responses": ["x"], "delay": 0.5}],
)
async def test_session_title_defaults(make_completion, kwargs):
    generator = AnswerGenerator(make_completion(**kwargs), timeout_s=0.05)
    assert await generator.generate_session_title("hello") == DEFAULT_SESSION_TITLE


async def test_generate_includes_question_for_pattern_intent(make_completion):
    completion = make_completion(responses=["Late permits cluster in 2024."])
    intent = PatternIntentRecognizer().recognize("why are permits late")

    await AnswerGenerator(completion).generate(intent, "ctx")

    assert "User Question: why are permits late" in completion.prompts[0]
    assert "User Intent: Analyze findings" in completion.prompts[0]
