"""Embedder wrapper that consults the SQLite cache before the provider."""

from __future__ import annotations

from audit_rag.embeddings.cache import EmbeddingCache
from audit_rag.observability.logger import get_logger
from audit_rag.protocols.embedder import Embedder

logger = get_logger("cached_embedder")


class CachedEmbedder:
    def __init__(self, delegate: Embedder, cache: EmbeddingCache) -> None:
        self._delegate = delegate
        self._cache = cache

    @property
    def dimensions(self) -> int:
        return self._delegate.dimensions

    def is_configured(self) -> bool:
        return self._delegate.is_configured()

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []

        cached = await self._cache.get_batch(texts)
        misses = [i for i in range(len(texts)) if i not in cached]

        if misses:
            miss_texts = [texts[i] for i in misses]
            fresh = await self._delegate.embed_texts(miss_texts)
            await self._cache.put_batch(miss_texts, fresh)
            cached.update(zip(misses, fresh))

        logger.info(
            "embed_texts_with_cache",
            total=len(texts),
            hits=len(texts) - len(misses),
            misses=len(misses),
        )
        return [cached[i] for i in range(len(texts))]

    async def embed_query(self, query: str) -> list[float]:
        vector = await self._cache.get(query)
        if vector is not None:
            logger.debug("embed_query_cache_hit", query_len=len(query))
            return vector

        vector = await self._delegate.embed_query(query)
        await self._cache.put(query, vector)
        logger.debug("embed_query_cache_miss", query_len=len(query))
        return vector
