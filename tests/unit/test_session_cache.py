import asyncio

from audit_rag.generation.session_cache import ChatSessionCache


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _factory(calls: list[str], value: str, delay: float = 0.0):
    async def create():
        calls.append(value)
        if delay:
            await asyncio.sleep(delay)
        return value

    return create


async def test_concurrent_calls_create_once():
    cache = ChatSessionCache()
    calls: list[str] = []

    results = await asyncio.gather(
        *(cache.get_or_create("s1", _factory(calls, "chat-1", delay=0.01)) for _ in range(5))
    )

    assert calls == ["chat-1"]
    assert results == ["chat-1"] * 5
    assert len(cache) == 1


async def test_distinct_sessions_get_distinct_handles():
    cache = ChatSessionCache()
    calls: list[str] = []
    a = await cache.get_or_create("a", _factory(calls, "chat-a"))
    b = await cache.get_or_create("b", _factory(calls, "chat-b"))

    assert (a, b) == ("chat-a", "chat-b")
    assert "a" in cache and "b" in cache


async def test_entries_expire_after_idle_ttl():
    clock = FakeClock()
    cache = ChatSessionCache(ttl_s=10, clock=clock)
    calls: list[str] = []

    await cache.get_or_create("s", _factory(calls, "first"))
    clock.now = 8
    assert await cache.get_or_create("s", _factory(calls, "second")) == "first"

    # access refreshed the entry, so 8 + 9 is still inside the window
    clock.now = 17
    assert "s" in cache

    clock.now = 40
    assert "s" not in cache
    assert await cache.get_or_create("s", _factory(calls, "third")) == "third"
    assert calls == ["first", "third"]


async def test_len_purges_expired():
    clock = FakeClock()
    cache = ChatSessionCache(ttl_s=5, clock=clock)
    await cache.get_or_create("s", _factory([], "x"))
    clock.now = 6
    assert len(cache) == 0


async def test_least_recently_used_evicted():
    cache = ChatSessionCache(max_size=2)
    calls: list[str] = []

    await cache.get_or_create("a", _factory(calls, "a"))
    await cache.get_or_create("b", _factory(calls, "b"))
    await cache.get_or_create("a", _factory(calls, "a2"))
    await cache.get_or_create("c", _factory(calls, "c"))

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2


async def test_clear():
    cache = ChatSessionCache()
    await cache.get_or_create("s", _factory([], "x"))

    assert cache.clear("s") is True
    assert cache.clear("s") is False
    assert len(cache) == 0


async def test_clear_all():
    cache = ChatSessionCache()
    for sid in ("a", "b", "c"):
        await cache.get_or_create(sid, _factory([], sid))
    cache.clear_all()
    assert len(cache) == 0


async def test_factory_error_leaves_no_entry():
    cache = ChatSessionCache(max_size=2)

    async def broken():
        raise RuntimeError("cannot open chat")

    for i in range(50):
        try:
            await cache.get_or_create(f"s{i}", broken)
        except RuntimeError:
            pass
    assert "s0" not in cache
    assert cache._locks == {}
    assert await cache.get_or_create("s", _factory([], "ok")) == "ok"


async def test_expired_lookup_releases_lock():
    clock = FakeClock()
    cache = ChatSessionCache(ttl_s=5, clock=clock)
    await cache.get_or_create("s", _factory([], "x"))
    assert "s" in cache._locks

    clock.now = 6
    assert "s" not in cache
    assert "s" not in cache._locks
