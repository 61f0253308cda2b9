"""FastAPI application factory with lifespan management."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from fastapi import FastAPI

from audit_rag.api.middleware import RequestTimingMiddleware
from audit_rag.api.routes_embeddings import router as embeddings_router
from audit_rag.api.routes_health import router as health_router
from audit_rag.api.routes_query import router as query_router
from audit_rag.config.settings import Settings
from audit_rag.embeddings.cache import EmbeddingCache
from audit_rag.embeddings.cached_embedder import CachedEmbedder
from audit_rag.embeddings.openai_embedder import OpenAIEmbedder
from audit_rag.formatting.response_formatter import ResponseFormatter
from audit_rag.generation.answer_generator import AnswerGenerator
from audit_rag.generation.gemini_provider import GeminiCompletion
from audit_rag.generation.session_cache import ChatSessionCache
from audit_rag.observability.logger import get_logger, setup_logging
from audit_rag.pipeline.query_pipeline import QueryPipeline
from audit_rag.protocols.llm import TextCompletion
from audit_rag.protocols.semantic import SemanticSearch
from audit_rag.protocols.store import RecordStore
from audit_rag.query.filter_extractor import FilterExtractor
from audit_rag.query.intent import IntentRecognizer
from audit_rag.retrieval.context_builder import ContextBuilder
from audit_rag.retrieval.semantic_search import EmbeddingSemanticSearch
from audit_rag.storage.memory_store import InMemoryRecordStore

logger = get_logger("app")


@dataclass
class Services:
    settings: Settings
    record_store: RecordStore
    completion: TextCompletion
    semantic: SemanticSearch | None
    session_cache: ChatSessionCache
    context_builder: ContextBuilder
    answer_generator: AnswerGenerator
    query_pipeline: QueryPipeline


def build_services(
    settings: Settings,
    record_store: RecordStore,
    completion: TextCompletion,
    semantic: SemanticSearch | None,
    session_cache: ChatSessionCache | None = None,
) -> Services:
    """Wire the query path around already-constructed capabilities."""
    context_builder = ContextBuilder(
        semantic=semantic,
        chars_per_token=settings.chars_per_token,
        oversample_factor=settings.hybrid_oversample_factor,
        semantic_timeout_s=settings.semantic_timeout_s,
    )
    answer_generator = AnswerGenerator(completion, timeout_s=settings.llm_timeout_s)
    query_pipeline = QueryPipeline(
        intent_recognizer=IntentRecognizer(completion, timeout_s=settings.llm_timeout_s),
        filter_extractor=FilterExtractor(),
        record_store=record_store,
        context_builder=context_builder,
        answer_generator=answer_generator,
        formatter=ResponseFormatter(page_size=settings.page_size),
        settings=settings,
    )
    return Services(
        settings=settings,
        record_store=record_store,
        completion=completion,
        semantic=semantic,
        session_cache=session_cache or ChatSessionCache(
            max_size=settings.session_cache_max_size,
            ttl_s=settings.session_cache_ttl_s,
        ),
        context_builder=context_builder,
        answer_generator=answer_generator,
        query_pipeline=query_pipeline,
    )


def attach_services(app: FastAPI, services: Services) -> None:
    app.state.settings = services.settings
    app.state.record_store = services.record_store
    app.state.completion = services.completion
    app.state.semantic = services.semantic
    app.state.session_cache = services.session_cache
    app.state.context_builder = services.context_builder
    app.state.answer_generator = services.answer_generator
    app.state.query_pipeline = services.query_pipeline


async def create_services(settings: Settings) -> Services:
    Path(settings.embedding_cache_db_path).parent.mkdir(parents=True, exist_ok=True)

    record_store = await InMemoryRecordStore.load(settings.records_path)

    raw_embedder = OpenAIEmbedder(
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        batch_size=settings.embedding_batch_size,
        dimensions=settings.embedding_dimensions,
    )
    embedding_cache = EmbeddingCache(
        settings.embedding_cache_db_path,
        ttl_s=settings.embedding_cache_ttl_s,
        namespace=settings.embedding_model,
    )
    await embedding_cache.initialize()
    semantic = EmbeddingSemanticSearch(CachedEmbedder(delegate=raw_embedder, cache=embedding_cache))

    session_cache = ChatSessionCache(
        max_size=settings.session_cache_max_size,
        ttl_s=settings.session_cache_ttl_s,
    )
    completion = GeminiCompletion(
        api_key=settings.google_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        max_tokens=settings.gemini_max_tokens,
        sessions=session_cache,
    )

    return build_services(settings, record_store, completion, semantic, session_cache)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    setup_logging(level=settings.log_level)

    services = await create_services(settings)
    attach_services(app, services)

    logger.info(
        "startup_complete",
        records=await services.record_store.count(),
        completion_available=services.completion.is_available(),
        semantic_available=services.context_builder.semantic_available,
    )

    yield

    services.session_cache.clear_all()
    logger.info("shutdown_complete")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Audit RAG Engine",
        version="1.0.0",
        description="Query understanding and hybrid retrieval over audit findings",
        lifespan=lifespan,
    )
    app.add_middleware(RequestTimingMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(query_router, tags=["query"])
    app.include_router(embeddings_router, tags=["embeddings"])
    return app
