"""OpenAI embedding provider for audit record text."""

from __future__ import annotations

from openai import AsyncOpenAI

from audit_rag.exceptions import EmbeddingError
from audit_rag.observability.logger import get_logger

logger = get_logger("embeddings")


class OpenAIEmbedder:
    def __init__(
        self,
        api_key: str = "",
        model: str = "text-embedding-3-small",
        batch_size: int = 100,
        dimensions: int = 1536,
    ) -> None:
        self._client = AsyncOpenAI(api_key=api_key) if api_key else None
        self._model = model
        self._batch_size = batch_size
        self._dimensions = dimensions

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def is_configured(self) -> bool:
        return self._client is not None

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        if self._client is None:
            raise EmbeddingError("OpenAI API key is not configured")

        vectors: list[list[float]] = []
        try:
            for start in range(0, len(texts), self._batch_size):
                response = await self._client.embeddings.create(
                    input=texts[start : start + self._batch_size],
                    model=self._model,
                    dimensions=self._dimensions,
                )
                vectors.extend(item.embedding for item in response.data)
        except Exception as e:
            raise EmbeddingError(f"Failed to embed {len(texts)} texts: {e}") from e

        logger.info(
            "embedded_texts",
            count=len(texts),
            batches=-(-len(texts) // self._batch_size),
            model=self._model,
        )
        return vectors

    async def embed_query(self, query: str) -> list[float]:
        vectors = await self.embed_texts([query])
        return vectors[0]
