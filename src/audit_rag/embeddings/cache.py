"""SQLite-backed embedding cache with time-to-live expiry."""

from __future__ import annotations

import hashlib
import json
import time
from collections.abc import Callable

import aiosqlite

CREATE_CACHE_TABLE = """
CREATE TABLE IF NOT EXISTS embedding_cache (
    text_hash TEXT PRIMARY KEY,
    embedding TEXT NOT NULL,
    created_at REAL NOT NULL
)
"""


class EmbeddingCache:
    """Entries are keyed by model name plus text, and expire after ``ttl_s`` seconds."""

    def __init__(
        self,
        db_path: str,
        ttl_s: float = 86_400,
        namespace: str = "",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._db_path = db_path
        self._ttl_s = ttl_s
        self._namespace = namespace
        self._clock = clock

    async def initialize(self) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(CREATE_CACHE_TABLE)
            await db.commit()

    async def get_batch(self, texts: list[str]) -> dict[int, list[float]]:
        """Return {index: embedding} for texts with a fresh cache entry."""
        if not texts:
            return {}
        hashes = [self._hash(t) for t in texts]
        indexes: dict[str, list[int]] = {}
        for i, h in enumerate(hashes):
            indexes.setdefault(h, []).append(i)

        placeholders = ",".join("?" for _ in indexes)
        cutoff = self._clock() - self._ttl_s

        found: dict[int, list[float]] = {}
        async with aiosqlite.connect(self._db_path) as db:
            async with db.execute(
                "SELECT text_hash, embedding FROM embedding_cache "
                f"WHERE text_hash IN ({placeholders}) AND created_at >= ?",
                [*indexes, cutoff],
            ) as cursor:
                async for text_hash, payload in cursor:
                    vector = json.loads(payload)
                    for i in indexes.get(text_hash, []):
                        found[i] = vector
        return found

    async def get(self, text: str) -> list[float] | None:
        return (await self.get_batch([text])).get(0)

    async def put_batch(self, texts: list[str], embeddings: list[list[float]]) -> None:
        if not texts:
            return
        now = self._clock()
        rows = [(self._hash(t), json.dumps(e), now) for t, e in zip(texts, embeddings)]
        async with aiosqlite.connect(self._db_path) as db:
            await db.executemany(
                "INSERT OR REPLACE INTO embedding_cache (text_hash, embedding, created_at) "
                "VALUES (?, ?, ?)",
                rows,
            )
            await db.commit()

    async def put(self, text: str, embedding: list[float]) -> None:
        await self.put_batch([text], [embedding])

    async def purge_expired(self) -> int:
        cutoff = self._clock() - self._ttl_s
        async with aiosqlite.connect(self._db_path) as db:
            cursor = await db.execute(
                "DELETE FROM embedding_cache WHERE created_at < ?", (cutoff,)
            )
            await db.commit()
            return cursor.rowcount

    def _hash(self, text: str) -> str:
        return hashlib.sha256(f"{self._namespace}\x00{text}".encode("utf-8")).hexdigest()
