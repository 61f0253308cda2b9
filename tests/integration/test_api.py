"""HTTP-level tests for the FastAPI app with services attached directly."""

import json
from pathlib import Path

import httpx
import pytest

from audit_rag.api.app import attach_services, build_services, create_app, create_services
from audit_rag.exceptions import AuditRAGError, SemanticSearchError
from audit_rag.storage.memory_store import InMemoryRecordStore


class BrokenPipeline:
    async def execute(self, request):
        raise AuditRAGError("pipeline exploded")


@pytest.fixture
def make_client(settings, sample_records, make_completion, make_semantic):
    def factory(completion=None, semantic="default"):
        app = create_app()
        services = build_services(
            settings,
            InMemoryRecordStore(sample_records),
            completion or make_completion(responses=['"Hotel Revenue Findings"']),
            make_semantic() if semantic == "default" else semantic,
        )
        attach_services(app, services)
        client = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
        return client, app

    return factory


async def test_health_ok(make_client):
    client, _ = make_client()
    async with client:
        resp = await client.get("/health")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["record_count"] == 5
    assert body["active_sessions"] == 0
    assert resp.headers["X-Request-ID"]
    assert "X-Duration-MS" in resp.headers


async def test_health_degraded(make_client, make_completion):
    client, _ = make_client(completion=make_completion(available=False), semantic=None)
    async with client:
        body = (await client.get("/health")).json()

    assert body["status"] == "degraded"
    assert body["completion_available"] is False
    assert body["semantic_available"] is False


async def test_request_id_echoed(make_client):
    client, _ = make_client()
    async with client:
        resp = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"


async def test_query(make_client, make_completion):
    completion = make_completion(
        responses=[json.dumps({"intent": "List", "filters": {"year": "2024"}, "requiresAnalysis": False})]
    )
    client, _ = make_client(completion=completion)
    async with client:
        resp = await client.post("/query", json={"query": "list 2024 findings"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["type"] == "simple"
    assert len(body["finding_summaries"]) == 2
    assert body["metadata"]["extracted_filters"] == {"year": "2024"}


async def test_query_validation(make_client):
    client, _ = make_client()
    async with client:
        resp = await client.post("/query", json={"query": ""})
    assert resp.status_code == 422


async def test_query_pipeline_error(make_client):
    client, app = make_client()
    app.state.query_pipeline = BrokenPipeline()
    async with client:
        resp = await client.post("/query", json={"query": "anything"})

    assert resp.status_code == 500
    assert resp.json()["detail"] == "pipeline exploded"


async def test_session_title(make_client):
    client, _ = make_client()
    async with client:
        resp = await client.post("/sessions/title", json={"message": "Show hotel revenue findings"})
    assert resp.json() == {"title": "Hotel Revenue Findings"}


async def test_clear_session(make_client):
    client, app = make_client()

    async def create():
        return object()

    await app.state.session_cache.get_or_create("s1", create)
    async with client:
        first = (await client.delete("/sessions/s1")).json()
        second = (await client.delete("/sessions/s1")).json()

    assert first == {"session_id": "s1", "cleared": True}
    assert second["cleared"] is False


async def test_prewarm(make_client, make_semantic):
    semantic = make_semantic()
    client, _ = make_client(semantic=semantic)
    async with client:
        body = (await client.post("/embeddings/prewarm")).json()

    assert body == {"records": 5, "embedded": 5, "skipped": False}
    assert len(semantic.prewarmed) == 5


async def test_prewarm_skipped(make_client):
    client, _ = make_client(semantic=None)
    async with client:
        body = (await client.post("/embeddings/prewarm")).json()
    assert body == {"records": 5, "embedded": 0, "skipped": True}


async def test_prewarm_failure(make_client, make_semantic):
    semantic = make_semantic()

    async def fail(records):
        raise SemanticSearchError("embedding quota exhausted")

    semantic.pre_generate_embeddings = fail
    client, _ = make_client(semantic=semantic)
    async with client:
        resp = await client.post("/embeddings/prewarm")
    assert resp.status_code == 502


async def test_create_services_without_keys(settings, sample_records):
    Path(settings.records_path).write_text(
        json.dumps([{"auditResultId": "A-1", "projectName": "City Mall", "year": 2024, "nilai": 7}])
    )

    services = await create_services(settings)

    assert await services.record_store.count() == 1
    assert not services.completion.is_available()
    assert not services.context_builder.semantic_available
    assert Path(settings.embedding_cache_db_path).exists()
