"""Retry and rate-limit settings for outbound HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

import httpx
from httpx_retries import Retry

# Token exchange and report-token calls are POSTs, so they are retried too.
RETRYABLE_METHODS: Final[frozenset[str]] = frozenset({"GET", "HEAD", "POST"})
# 429 is absent: the remote order client paces and backs off on throttling itself.
RETRYABLE_STATUSES: Final[frozenset[int]] = frozenset({500, 502, 503, 504})
TRANSIENT_ERRORS: Final[tuple[type[httpx.HTTPError], ...]] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
)


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Transport-level retries for server errors and dropped connections."""

    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 30.0
    methods: frozenset[str] = RETRYABLE_METHODS
    statuses: frozenset[int] = RETRYABLE_STATUSES

    @classmethod
    def disabled(cls) -> RetryPolicy:
        return cls(total=0)

    def build(self) -> Retry:
        return Retry(
            total=self.total,
            backoff_factor=self.backoff_factor,
            max_backoff_wait=self.max_backoff_wait,
            respect_retry_after_header=True,
            allowed_methods=sorted(self.methods),
            status_forcelist=sorted(self.statuses),
            retry_on_exceptions=TRANSIENT_ERRORS,
        )


@dataclass(slots=True, frozen=True)
class RateLimit:
    """At most ``max_calls`` requests per ``per_seconds`` window."""

    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
