"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

import pytest

from audit_rag.config.settings import Settings
from audit_rag.models.domain import AuditRecord, ScoredCandidate


class FakeCompletion:
    """Scripted text completion that records every prompt it receives."""

    def __init__(
        self,
        responses: list[str] | None = None,
        available: bool = True,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.responses = list(responses or [])
        self.available = available
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []
        self.sessions: list[str | None] = []

    def is_available(self) -> bool:
        return self.available

    async def complete(
        self,
        prompt: str,
        session_id: str | None = None,
        history: list[dict] | None = None,
    ) -> str:
        self.prompts.append(prompt)
        self.sessions.append(session_id)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0] if self.responses else ""


class FakeSemanticSearch:
    """Scores records by a fixed id -> similarity table."""

    def __init__(
        self,
        scores: dict[str, float] | None = None,
        available: bool = True,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.scores = scores or {}
        self.available = available
        self.error = error
        self.delay = delay
        self.search_pools: list[list[AuditRecord]] = []
        self.prewarmed: list[AuditRecord] = []

    def is_available(self) -> bool:
        return self.available

    async def search(
        self,
        query: str,
        pool: list[AuditRecord],
        top_k: int,
        min_threshold: float,
    ) -> list[ScoredCandidate]:
        self.search_pools.append(list(pool))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        scored = [
            ScoredCandidate(record=r, relevance=self.scores.get(r.audit_result_id, 0.5))
            for r in pool
        ]
        scored = [c for c in scored if c.relevance >= min_threshold]
        scored.sort(key=lambda c: c.relevance, reverse=True)
        return scored[:top_k]

    async def pre_generate_embeddings(self, records: list[AuditRecord]) -> int:
        self.prewarmed.extend(records)
        return len(records)


class FakeEmbedder:
    """Embeds text as letter-frequency vectors over a tiny alphabet."""

    alphabet = "abcdefghijklmnopqrstuvwxyz"

    def __init__(self, configured: bool = True) -> None:
        self.configured = configured
        self.embed_texts_calls = 0
        self.embed_query_calls = 0

    @property
    def dimensions(self) -> int:
        return len(self.alphabet)

    def is_configured(self) -> bool:
        return self.configured

    def _vector(self, text: str) -> list[float]:
        lowered = text.lower()
        return [float(lowered.count(ch)) for ch in self.alphabet]

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.embed_texts_calls += 1
        return [self._vector(t) for t in texts]

    async def embed_query(self, query: str) -> list[float]:
        self.embed_query_calls += 1
        return self._vector(query)


@pytest.fixture
def tmp_dir():
    """Create a temporary directory."""
    return tempfile.mkdtemp()


@pytest.fixture
def settings(tmp_dir):
    """Test settings with temp paths and no real API keys."""
    return Settings(
        openai_api_key="",
        google_api_key="",
        records_path=str(Path(tmp_dir) / "audit_results.json"),
        embedding_cache_db_path=str(Path(tmp_dir) / "embedding_cache.db"),
        llm_timeout_s=1.0,
        semantic_timeout_s=1.0,
        _env_file=None,
    )


@pytest.fixture
def make_completion():
    return FakeCompletion


@pytest.fixture
def make_semantic():
    return FakeSemanticSearch


@pytest.fixture
def make_embedder():
    return FakeEmbedder


def _record(
    record_id: str,
    project: str,
    year: int,
    department: str,
    risk_area: str,
    description: str,
    nilai: float,
    code: str = "F-01",
    subholding: str = "SH1",
) -> AuditRecord:
    return AuditRecord(
        audit_result_id=record_id,
        project_name=project,
        year=year,
        department=department,
        risk_area=risk_area,
        description=description,
        code=code,
        nilai=nilai,
        subholding=subholding,
    )


@pytest.fixture
def sample_records() -> list[AuditRecord]:
    return [
        _record("AR-001", "Grand Hotel Jakarta", 2024, "Finance", "Revenue",
                "PPJB documents signed without legal review", 16, code="FIN-01"),
        _record("AR-002", "Sunrise Apartment", 2024, "IT", "Access Control",
                "Shared administrator passwords on booking system", 12, code="IT-02"),
        _record("AR-003", "Central Hospital", 2023, "HR", "Payroll",
                "Overtime approvals missing for emergency staff", 9, code="HR-03"),
        _record("AR-004", "Green Valley Landed House", 2023, "Legal", "Permits",
                "IMB building permit expired before construction", 5, code="LEG-04"),
        _record("AR-005", "City Mall", 2025, "Finance", "Tax",
                "PBB land tax payments recorded late", 6, code="FIN-05"),
    ]
