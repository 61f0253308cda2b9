"""Tests for the CachedEmbedder wrapper."""

from __future__ import annotations

from pathlib import Path

import pytest

from audit_rag.embeddings.cache import EmbeddingCache
from audit_rag.embeddings.cached_embedder import CachedEmbedder


@pytest.fixture
async def embedder_pair(tmp_dir, make_embedder):
    cache = EmbeddingCache(str(Path(tmp_dir) / "cache.db"), namespace="test-model")
    await cache.initialize()
    delegate = make_embedder()
    return CachedEmbedder(delegate=delegate, cache=cache), delegate


async def test_embed_query_caches(embedder_pair):
    embedder, delegate = embedder_pair
    first = await embedder.embed_query("permit delays")
    second = await embedder.embed_query("permit delays")
    assert first == second
    assert delegate.embed_query_calls == 1


async def test_embed_query_different_queries(embedder_pair):
    embedder, delegate = embedder_pair
    await embedder.embed_query("permit delays")
    await embedder.embed_query("payroll overtime")
    assert delegate.embed_query_calls == 2


async def test_embed_texts_caches(embedder_pair):
    embedder, delegate = embedder_pair
    texts = ["IMB expired", "PBB paid late", "shared passwords"]
    first = await embedder.embed_texts(texts)
    second = await embedder.embed_texts(texts)
    assert first == second
    assert delegate.embed_texts_calls == 1


async def test_embed_texts_partial_cache_keeps_order(embedder_pair):
    embedder, delegate = embedder_pair
    await embedder.embed_texts(["alpha", "beta"])

    result = await embedder.embed_texts(["gamma", "alpha", "beta"])

    assert delegate.embed_texts_calls == 2
    assert result == [delegate._vector(t) for t in ["gamma", "alpha", "beta"]]


async def test_duplicate_texts_in_one_batch(embedder_pair):
    embedder, _ = embedder_pair
    result = await embedder.embed_texts(["same", "same"])
    assert result[0] == result[1]


async def test_embed_texts_empty(embedder_pair):
    embedder, delegate = embedder_pair
    assert await embedder.embed_texts([]) == []
    assert delegate.embed_texts_calls == 0


async def test_passthrough(embedder_pair, tmp_dir, make_embedder):
    embedder, _ = embedder_pair
    assert embedder.dimensions == 26
    assert embedder.is_configured()

    cache = EmbeddingCache(str(Path(tmp_dir) / "other.db"))
    assert not CachedEmbedder(make_embedder(configured=False), cache).is_configured()
