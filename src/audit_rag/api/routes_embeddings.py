"""Embedding cache warm-up endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from audit_rag.api.dependencies import get_context_builder, get_record_store
from audit_rag.exceptions import AuditRAGError
from audit_rag.models.schemas import PrewarmResponse
from audit_rag.protocols.store import RecordStore
from audit_rag.retrieval.context_builder import ContextBuilder

router = APIRouter()


@router.post("/embeddings/prewarm", response_model=PrewarmResponse)
async def prewarm(
    store: RecordStore = Depends(get_record_store),
    builder: ContextBuilder = Depends(get_context_builder),
) -> PrewarmResponse:
    records = await store.all_records()
    if not builder.semantic_available:
        return PrewarmResponse(records=len(records), embedded=0, skipped=True)

    try:
        embedded = await builder.prewarm_cache(records)
    except AuditRAGError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return PrewarmResponse(records=len(records), embedded=embedded, skipped=False)
