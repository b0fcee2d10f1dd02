from __future__ import annotations

import asyncio
import threading
import time

from orderbridge.adapters.sp_api import CredentialCache


class _FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class _Acquirer:
    def __init__(self, expires_in: float = 3600.0) -> None:
        self.calls = 0
        self.expires_in = expires_in

    async def __call__(self) -> tuple[str, float]:
        self.calls += 1
        await asyncio.sleep(0)
        return f"token-{self.calls}", self.expires_in


def test_token_is_cached_until_safety_margin() -> None:
    clock = _FakeClock()
    cache = CredentialCache(safety_margin_seconds=60.0, clock=clock)
    acquire = _Acquirer()

    assert asyncio.run(cache.get(acquire)) == "token-1"
    clock.now += 3500
    assert asyncio.run(cache.get(acquire)) == "token-1"
    clock.now += 100
    assert cache.current() is None
    assert asyncio.run(cache.get(acquire)) == "token-2"
    assert acquire.calls == 2


def test_force_and_invalidate_trigger_refresh() -> None:
    cache = CredentialCache(clock=_FakeClock())
    acquire = _Acquirer()

    asyncio.run(cache.get(acquire))
    assert asyncio.run(cache.get(acquire, force=True)) == "token-2"
    cache.invalidate()
    assert cache.current() is None
    assert asyncio.run(cache.get(acquire)) == "token-3"


def test_concurrent_callers_share_one_refresh() -> None:
    cache = CredentialCache(clock=_FakeClock())
    acquire = _Acquirer()

    async def run() -> list[str]:
        return list(await asyncio.gather(*(cache.get(acquire) for _ in range(5))))

    tokens = asyncio.run(run())

    assert tokens == ["token-1"] * 5
    assert acquire.calls == 1


def test_token_shorter_than_margin_is_not_served_from_cache() -> None:
    clock = _FakeClock()
    cache = CredentialCache(safety_margin_seconds=60.0, clock=clock)

    asyncio.run(cache.get(_Acquirer(expires_in=30.0)))

    assert cache.current() is None


def test_threads_with_separate_event_loops_share_one_refresh() -> None:
    cache = CredentialCache(clock=_FakeClock())
    started = threading.Event()
    release = threading.Event()
    calls: list[int] = []

    async def slow_acquire() -> tuple[str, float]:
        calls.append(1)
        started.set()
        while not release.is_set():
            await asyncio.sleep(0.01)
        return f"token-{len(calls)}", 3600.0

    tokens: list[str] = []

    def fetch() -> None:
        tokens.append(asyncio.run(cache.get(slow_acquire)))

    leader = threading.Thread(target=fetch)
    leader.start()
    assert started.wait(timeout=5)
    follower = threading.Thread(target=fetch)
    follower.start()
    time.sleep(0.1)
    release.set()
    leader.join(timeout=5)
    follower.join(timeout=5)

    assert tokens == ["token-1", "token-1"]
    assert len(calls) == 1


def test_failed_refresh_reaches_every_waiter_and_is_retried() -> None:
    cache = CredentialCache(clock=_FakeClock())
    attempts: list[int] = []

    async def failing_acquire() -> tuple[str, float]:
        attempts.append(1)
        await asyncio.sleep(0)
        raise RuntimeError("token endpoint down")

    async def run() -> list[object]:
        return list(
            await asyncio.gather(
                cache.get(failing_acquire), cache.get(failing_acquire), return_exceptions=True
            )
        )

    outcomes = asyncio.run(run())

    assert [type(outcome) for outcome in outcomes] == [RuntimeError, RuntimeError]
    assert len(attempts) == 1
    assert asyncio.run(cache.get(_Acquirer())) == "token-1"
