"""Rate-limited async HTTP client with transport retries."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from aiolimiter import AsyncLimiter
from httpx_retries import RetryTransport

from orderbridge.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

    from httpx._types import QueryParamTypes

log = getLogger(__name__)

__all__ = [
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
]


class ResilientClient:
    """``httpx.AsyncClient`` wrapped in a retry transport and an optional limiter.

    ``transport`` replaces the network transport underneath the retry layer,
    which is how tests plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        limit = config.ratelimit
        self._limiter = AsyncLimiter(limit.max_calls, limit.per_seconds) if limit else None
        self._client = httpx.AsyncClient(
            timeout=config.timeout_seconds,
            transport=RetryTransport(transport=transport, retry=config.retry.build()),
        )

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: QueryParamTypes | None = None,
        data: Mapping[str, str] | None = None,
        json: object = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        if self._limiter is not None:
            await self._limiter.acquire()
        response = await self._client.request(
            method, url, params=params, data=data, json=json, headers=headers
        )
        # Path only: query strings may carry pagination tokens.
        log.debug(
            "%s %s %s -> %d",
            self.config.name,
            method,
            response.request.url.path,
            response.status_code,
        )
        return response
