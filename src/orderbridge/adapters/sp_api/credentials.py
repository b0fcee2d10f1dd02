"""Access-token cache for the Selling Partner API.

The cache belongs to one client instance, which may serve fetches from
several threads, each running its own event loop. Refreshes are single-flight
across all of them: the first caller that finds the token stale acquires a new
one and every caller arriving meanwhile awaits that same result.
"""

from __future__ import annotations

import asyncio
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = getLogger(__name__)

type TokenAcquirer = Callable[[], Awaitable[tuple[str, float]]]
"""Coroutine factory returning ``(access_token, expires_in_seconds)``."""


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class CredentialCache:
    def __init__(
        self,
        *,
        safety_margin_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._safety_margin = safety_margin_seconds
        self._clock = clock
        self._state_lock = threading.Lock()
        self._token: AccessToken | None = None
        self._inflight: Future[str] | None = None

    def current(self) -> str | None:
        """Return the cached token while it is still valid."""

        with self._state_lock:
            token = self._token
        if token is None or not token.is_valid(self._clock()):
            return None
        return token.value

    def invalidate(self) -> None:
        with self._state_lock:
            self._token = None

    async def get(self, acquire: TokenAcquirer, *, force: bool = False) -> str:
        """Return a valid token, calling ``acquire`` when absent, expired or forced.

        A forced call joins a refresh already in flight rather than starting a
        second one.
        """

        with self._state_lock:
            token = self._token
            if not force and token is not None and token.is_valid(self._clock()):
                return token.value
            inflight = self._inflight
            leading = inflight is None
            if inflight is None:
                inflight = self._inflight = Future()
                # RUNNING futures cannot be cancelled by a departing waiter.
                inflight.set_running_or_notify_cancel()
        if not leading:
            return await asyncio.wrap_future(inflight)
        return await self._refresh(acquire, inflight)

    async def _refresh(self, acquire: TokenAcquirer, outcome: Future[str]) -> str:
        try:
            value, expires_in = await acquire()
        except BaseException as exc:
            with self._state_lock:
                self._inflight = None
            outcome.set_exception(exc)
            raise
        expires_at = self._clock() + max(0.0, expires_in - self._safety_margin)
        with self._state_lock:
            self._token = AccessToken(value=value, expires_at=expires_at)
            self._inflight = None
        outcome.set_result(value)
        log.debug("Access token refreshed, valid for %.0fs", expires_at - self._clock())
        return value
