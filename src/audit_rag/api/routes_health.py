"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from audit_rag.api.dependencies import (
    get_completion,
    get_context_builder,
    get_record_store,
    get_session_cache,
)
from audit_rag.generation.session_cache import ChatSessionCache
from audit_rag.models.schemas import HealthResponse
from audit_rag.protocols.llm import TextCompletion
from audit_rag.protocols.store import RecordStore
from audit_rag.retrieval.context_builder import ContextBuilder

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    store: RecordStore = Depends(get_record_store),
    completion: TextCompletion = Depends(get_completion),
    builder: ContextBuilder = Depends(get_context_builder),
    sessions: ChatSessionCache = Depends(get_session_cache),
) -> HealthResponse:
    completion_available = completion.is_available()
    semantic_available = builder.semantic_available
    return HealthResponse(
        status="ok" if completion_available and semantic_available else "degraded",
        record_count=await store.count(),
        completion_available=completion_available,
        semantic_available=semantic_available,
        active_sessions=len(sessions),
    )
