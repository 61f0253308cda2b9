"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

QueryType = Literal["simple", "complex", "hybrid"]


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class QueryRequest(BaseModel):
    query: str = Field(min_length=1)
    page: int = Field(default=1, ge=1)
    session_id: str | None = None
    history: list[ChatTurn] = Field(default_factory=list)
    force_query_type: QueryType | None = None
    max_results: int | None = Field(default=None, ge=1, le=100)


class QueryMetadata(BaseModel):
    query_type: QueryType
    execution_time_ms: float
    findings_analyzed: int
    tokens_used: int | None = None
    confidence: float
    extracted_filters: dict[str, Any] = Field(default_factory=dict)
    strategy_used: str | None = None


class FindingSummary(BaseModel):
    id: str
    title: str
    severity: str
    status: str
    project_name: str
    department: str
    year: int | str
    score: float


class PaginationInfo(BaseModel):
    total_count: int
    current_page: int
    page_size: int
    total_pages: int
    has_more: bool


class QueryResponse(BaseModel):
    type: QueryType
    answer: str
    finding_summaries: list[FindingSummary] = Field(default_factory=list)
    metadata: QueryMetadata
    pagination: PaginationInfo | None = None


class PrewarmResponse(BaseModel):
    records: int
    embedded: int
    skipped: bool


class SessionTitleRequest(BaseModel):
    message: str = Field(min_length=1)


class SessionTitleResponse(BaseModel):
    title: str


class SessionClearedResponse(BaseModel):
    session_id: str
    cleared: bool


class HealthResponse(BaseModel):
    status: str
    record_count: int
    completion_available: bool
    semantic_available: bool
    active_sessions: int
