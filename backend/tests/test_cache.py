import asyncio

import pytest

from sunpulse.services.cache import TTLCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def counting_producer(value="fresh"):
    calls = []

    async def produce():
        calls.append(1)
        return f"{value}-{len(calls)}"

    return produce, calls


def test_value_visible_until_ttl_then_absent():
    clock = FakeClock()
    cache = TTLCache(default_ttl=300, clock=clock)
    cache.set("snapshot", {"pulse": 0.5}, ttl=10)

    clock.now += 9.999
    assert cache.get("snapshot") == {"pulse": 0.5}

    clock.now += 0.001
    assert cache.get("snapshot") is None
    assert len(cache) == 0  # dropped on read


def test_default_ttl_applies_when_unspecified():
    clock = FakeClock()
    cache = TTLCache(default_ttl=300, clock=clock)
    cache.set("k", 1)
    clock.now += 299
    assert cache.get("k") == 1
    clock.now += 1
    assert cache.get("k") is None


def test_wrap_memoizes_within_ttl():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    produce, calls = counting_producer()

    first = asyncio.run(cache.wrap("alerts", produce, ttl=120))
    clock.now += 119
    second = asyncio.run(cache.wrap("alerts", produce, ttl=120))

    assert first == second == "fresh-1"
    assert len(calls) == 1


def test_wrap_reproduces_after_expiry():
    clock = FakeClock()
    cache = TTLCache(clock=clock)
    produce, calls = counting_producer()

    asyncio.run(cache.wrap("cme", produce, ttl=120))
    clock.now += 120
    value = asyncio.run(cache.wrap("cme", produce, ttl=120))

    assert value == "fresh-2"
    assert len(calls) == 2


def test_falsy_values_are_cached():
    cache = TTLCache(clock=FakeClock())
    calls = []

    async def produce():
        calls.append(1)
        return []

    asyncio.run(cache.wrap("markers", produce))
    asyncio.run(cache.wrap("markers", produce))
    assert len(calls) == 1


def test_producer_failure_propagates_and_is_not_cached():
    cache = TTLCache(clock=FakeClock())

    async def broken():
        raise RuntimeError("upstream exploded")

    with pytest.raises(RuntimeError):
        asyncio.run(cache.wrap("planets", broken))
    assert len(cache) == 0

    produce, calls = counting_producer("ok")
    assert asyncio.run(cache.wrap("planets", produce)) == "ok-1"


def test_overlapping_misses_each_run_the_producer():
    cache = TTLCache(clock=FakeClock())
    calls = []

    async def slow():
        calls.append(1)
        await asyncio.sleep(0)
        return len(calls)

    async def both():
        return await asyncio.gather(cache.wrap("snapshot", slow), cache.wrap("snapshot", slow))

    asyncio.run(both())
    assert len(calls) == 2


def test_clear_evicts_everything():
    cache = TTLCache(clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.clear()
    assert cache.get("a") is None and cache.get("b") is None
