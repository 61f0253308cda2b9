"""Tests for Pydantic schemas."""

import pytest
from pydantic import ValidationError

from audit_rag.models.schemas import (
    ChatTurn,
    HealthResponse,
    PrewarmResponse,
    QueryMetadata,
    QueryRequest,
    QueryResponse,
    SessionTitleRequest,
)


def test_query_request_defaults():
    req = QueryRequest(query="critical hotel findings")
    assert req.page == 1
    assert req.session_id is None
    assert req.history == []
    assert req.force_query_type is None
    assert req.max_results is None


def test_query_request_history():
    req = QueryRequest(
        query="and in 2024?",
        session_id="s1",
        history=[{"role": "user", "content": "IT findings"}],
    )
    assert req.history == [ChatTurn(role="user", content="IT findings")]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"query": ""},
        {"query": "q", "page": 0},
        {"query": "q", "force_query_type": "fancy"},
        {"query": "q", "max_results": 500},
        {"query": "q", "history": [{"role": "system", "content": "x"}]},
    ],
)
def test_query_request_invalid(kwargs):
    with pytest.raises(ValidationError):
        QueryRequest(**kwargs)


def test_query_response_serialization():
    resp = QueryResponse(
        type="simple",
        answer="Found **0** findings matching your criteria.",
        metadata=QueryMetadata(
            query_type="simple",
            execution_time_ms=12.5,
            findings_analyzed=0,
            confidence=0.6,
            extracted_filters={"year": "2024"},
        ),
    )
    data = resp.model_dump()
    assert data["type"] == "simple"
    assert data["finding_summaries"] == []
    assert data["pagination"] is None
    assert data["metadata"]["extracted_filters"] == {"year": "2024"}


def test_session_title_request_requires_message():
    with pytest.raises(ValidationError):
        SessionTitleRequest(message="")


def test_health_and_prewarm():
    health = HealthResponse(
        status="degraded",
        record_count=3,
        completion_available=False,
        semantic_available=True,
        active_sessions=0,
    )
    assert health.status == "degraded"
    assert PrewarmResponse(records=3, embedded=0, skipped=True).skipped
