"""Bounded, expiring map from conversation id to a stateful chat handle."""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from audit_rag.observability.logger import get_logger

logger = get_logger("session_cache")


@dataclass
class _Entry:
    handle: Any
    last_used: float


class ChatSessionCache:
    """LRU + TTL cache with at most one factory call per session id at a time.

    Concurrent ``get_or_create`` calls for the same id serialize on a per-id
    ``asyncio.Lock``; the second caller gets the handle the first one built.
    """

    def __init__(
        self,
        max_size: int = 256,
        ttl_s: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_size = max_size
        self._ttl_s = ttl_s
        self._clock = clock
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)

    def __contains__(self, session_id: str) -> bool:
        return self._lookup(session_id) is not None

    async def get_or_create(
        self,
        session_id: str,
        factory: Callable[[], Awaitable[Any]],
    ) -> Any:
        entry = self._lookup(session_id)
        if entry is not None:
            return entry.handle

        lock = self._locks.setdefault(session_id, asyncio.Lock())
        try:
            async with lock:
                entry = self._lookup(session_id)
                if entry is not None:
                    return entry.handle

                handle = await factory()
                self._entries[session_id] = _Entry(handle=handle, last_used=self._clock())
                self._entries.move_to_end(session_id)
                logger.info(
                    "chat_session_created", session_id=session_id, size=len(self._entries)
                )
                self._evict_overflow()
                return handle
        finally:
            if session_id not in self._entries:
                self._drop_lock(session_id)

    def clear(self, session_id: str) -> bool:
        removed = self._entries.pop(session_id, None) is not None
        self._drop_lock(session_id)
        if removed:
            logger.info("chat_session_cleared", session_id=session_id)
        return removed

    def clear_all(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        self._locks = {k: v for k, v in self._locks.items() if v.locked()}
        logger.info("chat_sessions_cleared", count=count)

    def _lookup(self, session_id: str) -> _Entry | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        now = self._clock()
        if now - entry.last_used > self._ttl_s:
            del self._entries[session_id]
            self._drop_lock(session_id)
            logger.info("chat_session_expired", session_id=session_id)
            return None
        entry.last_used = now
        self._entries.move_to_end(session_id)
        return entry

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now - e.last_used > self._ttl_s]
        for session_id in expired:
            del self._entries[session_id]
            self._drop_lock(session_id)

    def _evict_overflow(self) -> None:
        while len(self._entries) > self._max_size:
            session_id, _ = self._entries.popitem(last=False)
            self._drop_lock(session_id)
            logger.info("chat_session_evicted", session_id=session_id)

    def _drop_lock(self, session_id: str) -> None:
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]
