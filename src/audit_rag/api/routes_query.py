"""Query and chat-session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from audit_rag.api.dependencies import (
    get_answer_generator,
    get_query_pipeline,
    get_session_cache,
)
from audit_rag.exceptions import AuditRAGError
from audit_rag.generation.answer_generator import AnswerGenerator
from audit_rag.generation.session_cache import ChatSessionCache
from audit_rag.models.schemas import (
    QueryRequest,
    QueryResponse,
    SessionClearedResponse,
    SessionTitleRequest,
    SessionTitleResponse,
)
from audit_rag.observability.logger import get_logger
from audit_rag.pipeline.query_pipeline import QueryPipeline

logger = get_logger("routes_query")

router = APIRouter()


@router.post("/query", response_model=QueryResponse)
async def query(
    request: QueryRequest,
    pipeline: QueryPipeline = Depends(get_query_pipeline),
) -> QueryResponse:
    try:
        return await pipeline.execute(request)
    except AuditRAGError as e:
        logger.error("query_failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/sessions/title", response_model=SessionTitleResponse)
async def session_title(
    request: SessionTitleRequest,
    generator: AnswerGenerator = Depends(get_answer_generator),
) -> SessionTitleResponse:
    return SessionTitleResponse(title=await generator.generate_session_title(request.message))


@router.delete("/sessions/{session_id}", response_model=SessionClearedResponse)
async def clear_session(
    session_id: str,
    sessions: ChatSessionCache = Depends(get_session_cache),
) -> SessionClearedResponse:
    return SessionClearedResponse(session_id=session_id, cleared=sessions.clear(session_id))
