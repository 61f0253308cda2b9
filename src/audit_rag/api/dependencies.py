"""FastAPI dependency injection helpers."""

from __future__ import annotations

from fastapi import Request

from audit_rag.generation.answer_generator import AnswerGenerator
from audit_rag.generation.session_cache import ChatSessionCache
from audit_rag.pipeline.query_pipeline import QueryPipeline
from audit_rag.protocols.llm import TextCompletion
from audit_rag.protocols.store import RecordStore
from audit_rag.retrieval.context_builder import ContextBuilder


def get_query_pipeline(request: Request) -> QueryPipeline:
    return request.app.state.query_pipeline


def get_record_store(request: Request) -> RecordStore:
    return request.app.state.record_store


def get_context_builder(request: Request) -> ContextBuilder:
    return request.app.state.context_builder


def get_answer_generator(request: Request) -> AnswerGenerator:
    return request.app.state.answer_generator


def get_completion(request: Request) -> TextCompletion:
    return request.app.state.completion


def get_session_cache(request: Request) -> ChatSessionCache:
    return request.app.state.session_cache
