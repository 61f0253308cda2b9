import numpy as np
import pytest

from audit_rag.exceptions import EmbeddingError, SemanticSearchError
from audit_rag.retrieval.semantic_search import EmbeddingSemanticSearch, cosine_scores, embedding_text


def test_embedding_text_leaves_out_project_name(sample_records):
    text = embedding_text(sample_records[0])
    assert "Grand Hotel" not in text
    assert "PPJB documents" in text
    assert "FIN-01" in text


def test_cosine_scores():
    scores = cosine_scores([1.0, 0.0], [[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
    np.testing.assert_allclose(scores, [1.0, 0.0, 0.0], atol=1e-6)


def test_cosine_scores_empty_matrix():
    assert cosine_scores([1.0], []).size == 0


async def test_search_ranks_by_similarity(sample_records, make_embedder):
    search = EmbeddingSemanticSearch(make_embedder())

    results = await search.search(embedding_text(sample_records[2]), sample_records, top_k=2, min_threshold=0.0)

    assert len(results) == 2
    assert results[0].record.audit_result_id == "AR-003"
    assert results[0].relevance == pytest.approx(1.0, abs=1e-5)
    assert results[0].relevance >= results[1].relevance


async def test_search_threshold(sample_records, make_embedder):
    search = EmbeddingSemanticSearch(make_embedder())
    results = await search.search("zzzz", sample_records, top_k=5, min_threshold=0.99)
    assert results == []


async def test_search_empty_pool(make_embedder):
    embedder = make_embedder()
    assert await EmbeddingSemanticSearch(embedder).search("q", [], 5, 0.2) == []
    assert embedder.embed_query_calls == 0


async def test_embedding_error_becomes_search_error(sample_records, make_embedder):
    embedder = make_embedder()

    async def fail(query):
        raise EmbeddingError("quota")

    embedder.embed_query = fail
    with pytest.raises(SemanticSearchError):
        await EmbeddingSemanticSearch(embedder).search("q", sample_records, 5, 0.2)


async def test_availability_follows_embedder(make_embedder):
    assert EmbeddingSemanticSearch(make_embedder()).is_available()
    assert not EmbeddingSemanticSearch(make_embedder(configured=False)).is_available()


async def test_pre_generate_embeddings(sample_records, make_embedder):
    embedder = make_embedder()
    assert await EmbeddingSemanticSearch(embedder).pre_generate_embeddings(sample_records) == 5
    assert embedder.embed_texts_calls == 1
    assert await EmbeddingSemanticSearch(embedder).pre_generate_embeddings([]) == 0
