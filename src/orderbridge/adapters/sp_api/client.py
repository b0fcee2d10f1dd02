"""HTTP client for the Selling Partner Orders API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from orderbridge.adapters.http_resilience import ResilienceConfig, ResilientClient
from orderbridge.config.sp_api import SellingPartnerConfig, get_selling_partner_config
from orderbridge.domain.ports.fetching import RemoteFetchResult, RemoteOrderFetcher

from .credentials import CredentialCache
from .errors import (
    AuthorizationError,
    FetchCancelledError,
    RateLimitError,
    RemoteOrderAPIError,
    RemoteOrderError,
)
from .schema import (
    OrderItemsResponse,
    OrdersResponse,
    RestrictedDataTokenResponse,
    TokenResponse,
)
from .translator import map_order_item

if TYPE_CHECKING:
    import threading
    from collections.abc import Awaitable, Callable

    from orderbridge.domain.model import CanonicalOrder

    from .schema import RemoteOrder, RemoteOrderItem

log = getLogger(__name__)

ORDERS_PATH: Final[str] = "/orders/v0/orders"
RESTRICTED_DATA_TOKEN_PATH: Final[str] = "/tokens/2021-03-01/restrictedDataToken"  # noqa: S105
PII_DATA_ELEMENTS: Final[tuple[str, ...]] = ("buyerInfo", "shippingAddress")
DEGRADED_ADDRESS_WARNING: Final[str] = (
    "Address data unavailable (restricted data token request failed); "
    "orders are imported without buyer and shipping details"
)
_AUTH_REJECTED_STATUSES: Final[frozenset[int]] = frozenset({400, 401, 403})

type Sleep = Callable[[float], Awaitable[None]]


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def _raise_if_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise FetchCancelledError("Remote order fetch was cancelled")


@dataclass(slots=True)
class _FetchSession:
    """Per-fetch state: the HTTP client, tokens in use and collected warnings."""

    client: ResilientClient
    cancel_event: threading.Event | None
    access_token: str = ""
    list_token: str = ""
    errors: list[str] = field(default_factory=list[str])


class SellingPartnerClient:
    """Fetch orders and their line items from the Selling Partner API.

    Credentials are validated on construction, before any network call. The
    access token is cached on the instance and reused across fetches until
    shortly before it expires.
    """

    def __init__(
        self,
        config: SellingPartnerConfig | None = None,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] = _default_client_factory,
        sleep: Sleep = asyncio.sleep,
        credentials: CredentialCache | None = None,
    ) -> None:
        self.config = config or get_selling_partner_config()
        self.config.require_credentials()
        self.client_factory = client_factory
        self._sleep = sleep
        self.credentials = credentials or CredentialCache(
            safety_margin_seconds=self.config.token_safety_margin_seconds
        )

    def fetch_orders(
        self,
        *,
        created_after: datetime,
        created_before: datetime | None = None,
        cancel_event: threading.Event | None = None,
    ) -> RemoteFetchResult:
        return asyncio.run(
            self.fetch_orders_async(
                created_after=created_after,
                created_before=created_before,
                cancel_event=cancel_event,
            )
        )

    async def fetch_orders_async(
        self,
        *,
        created_after: datetime,
        created_before: datetime | None = None,
        cancel_event: threading.Event | None = None,
    ) -> RemoteFetchResult:
        _raise_if_cancelled(cancel_event)
        log.info(
            "Fetching Amazon orders created after %s%s",
            _format_timestamp(created_after),
            f" and before {_format_timestamp(created_before)}" if created_before else "",
        )

        async with self.client_factory(self.config.resilience) as client:
            session = _FetchSession(client=client, cancel_event=cancel_event)
            await self._open_session(session, force_refresh=False)
            remote_orders = await self._list_orders(session, created_after, created_before)

            orders: list[CanonicalOrder] = []
            for remote_order in remote_orders:
                if remote_order.is_cancelled:
                    continue
                await self._pause(self.config.item_delay_seconds, session.cancel_event)
                try:
                    items = await self._list_order_items(session, remote_order.amazon_order_id)
                except FetchCancelledError:
                    raise
                # ValueError covers undecodable JSON and pydantic validation.
                except (RemoteOrderError, httpx.HTTPError, ValueError) as exc:
                    log.warning("Order items for %s failed: %s", remote_order.amazon_order_id, exc)
                    session.errors.append(f"{remote_order.amazon_order_id}: {exc}")
                    continue
                orders.extend(self._map_items(remote_order, items))

        log.info(
            "Fetched %s order items from %s orders (%s warnings)",
            len(orders),
            len(remote_orders),
            len(session.errors),
        )
        return RemoteFetchResult(orders=orders, errors=session.errors)

    async def _open_session(self, session: _FetchSession, *, force_refresh: bool) -> None:
        session.access_token = await self.credentials.get(
            lambda: self._acquire_access_token(session), force=force_refresh
        )
        session.list_token = await self._restricted_token_or_fallback(session, ORDERS_PATH)

    async def _list_orders(
        self,
        session: _FetchSession,
        created_after: datetime,
        created_before: datetime | None,
    ) -> list[RemoteOrder]:
        url = f"{self.config.endpoint}{ORDERS_PATH}"
        orders: list[RemoteOrder] = []
        next_token: str | None = None
        refreshed = False

        while True:
            params: dict[str, str | int] = {
                "MarketplaceIds": self.config.marketplace_id,
                "CreatedAfter": _format_timestamp(created_after),
                "MaxResultsPerPage": self.config.page_size,
            }
            if created_before is not None:
                params["CreatedBefore"] = _format_timestamp(created_before)
            if next_token:
                params["NextToken"] = next_token

            response = await self._send(
                session, "GET", url, token=session.list_token, params=params
            )
            if response.status_code == httpx.codes.FORBIDDEN:
                if refreshed:
                    raise AuthorizationError(
                        "Amazon rejected the orders request (403) even after refreshing the "
                        "access token. Check that the app is authorised for the Orders API in "
                        "Seller Central and that AMAZON_SP_REFRESH_TOKEN belongs to this seller."
                    )
                refreshed = True
                log.warning("Orders request forbidden, forcing an access token refresh")
                await self._open_session(session, force_refresh=True)
                continue
            if not response.is_success:
                raise RemoteOrderAPIError(
                    f"Orders request failed with status {response.status_code}: "
                    f"{response.text[:200]}",
                    status_code=response.status_code,
                )

            page = OrdersResponse.model_validate(response.json()).payload
            orders.extend(page.orders)
            log.debug("Fetched orders page with %s orders", len(page.orders))
            next_token = page.next_token
            if not next_token:
                return orders
            await self._pause(self.config.page_delay_seconds, session.cancel_event)

    async def _list_order_items(
        self, session: _FetchSession, order_id: str
    ) -> list[RemoteOrderItem]:
        url = f"{self.config.endpoint}{ORDERS_PATH}/{order_id}/orderItems"
        items: list[RemoteOrderItem] = []
        next_token: str | None = None

        while True:
            params = {"NextToken": next_token} if next_token else None
            response = await self._send(
                session, "GET", url, token=session.access_token, params=params
            )
            if not response.is_success:
                raise RemoteOrderAPIError(
                    f"Order items request failed with status {response.status_code}",
                    status_code=response.status_code,
                )
            page = OrderItemsResponse.model_validate(response.json()).payload
            items.extend(page.order_items)
            next_token = page.next_token
            if not next_token:
                return items
            await self._pause(self.config.item_delay_seconds, session.cancel_event)

    def _map_items(
        self, remote_order: RemoteOrder, items: list[RemoteOrderItem]
    ) -> list[CanonicalOrder]:
        mapped = [map_order_item(remote_order, item) for item in items]
        return [order for order in mapped if order.order_item_id]

    async def _acquire_access_token(self, session: _FetchSession) -> tuple[str, float]:
        response = await self._send(
            session,
            "POST",
            self.config.token_endpoint,
            token=None,
            data={
                "grant_type": "refresh_token",
                "refresh_token": self.config.refresh_token,
                "client_id": self.config.client_id,
                "client_secret": self.config.client_secret,
            },
        )
        if response.status_code in _AUTH_REJECTED_STATUSES:
            raise AuthorizationError(
                f"Login with Amazon rejected the refresh token ({response.status_code}). "
                "Check AMAZON_SP_CLIENT_ID, AMAZON_SP_CLIENT_SECRET and AMAZON_SP_REFRESH_TOKEN."
            )
        if not response.is_success:
            raise RemoteOrderAPIError(
                f"Token request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        token = TokenResponse.model_validate(response.json())
        return token.access_token, float(token.expires_in)

    async def _restricted_token_or_fallback(self, session: _FetchSession, path: str) -> str:
        try:
            return await self._request_restricted_token(session, path)
        except (RemoteOrderAPIError, httpx.HTTPError, ValidationError) as exc:
            log.warning("Restricted data token request failed, continuing without PII: %s", exc)
            if DEGRADED_ADDRESS_WARNING not in session.errors:
                session.errors.append(DEGRADED_ADDRESS_WARNING)
            return session.access_token

    async def _request_restricted_token(self, session: _FetchSession, path: str) -> str:
        response = await self._send(
            session,
            "POST",
            f"{self.config.endpoint}{RESTRICTED_DATA_TOKEN_PATH}",
            token=session.access_token,
            json={
                "restrictedResources": [
                    {"method": "GET", "path": path, "dataElements": list(PII_DATA_ELEMENTS)}
                ]
            },
        )
        if not response.is_success:
            raise RemoteOrderAPIError(
                f"Restricted data token request failed with status {response.status_code}",
                status_code=response.status_code,
            )
        return RestrictedDataTokenResponse.model_validate(response.json()).restricted_data_token

    async def _send(
        self,
        session: _FetchSession,
        method: str,
        url: str,
        *,
        token: str | None,
        params: dict[str, str | int] | dict[str, str] | None = None,
        data: dict[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        """Send one request, backing off exponentially on ``429`` responses."""

        headers = {"user-agent": self.config.user_agent}
        if token is not None:
            headers["x-amz-access-token"] = token

        attempts = self.config.max_attempts
        for attempt in range(attempts):
            _raise_if_cancelled(session.cancel_event)
            response = await session.client.request(
                method, url, params=params, data=data, json=json, headers=headers
            )
            if response.status_code != httpx.codes.TOO_MANY_REQUESTS:
                return response
            if attempt + 1 >= attempts:
                break
            delay = self.config.backoff_base_seconds * 2**attempt
            log.warning(
                "Rate limited (429), waiting %.1fs before retry %s/%s",
                delay,
                attempt + 1,
                attempts - 1,
            )
            await self._pause(delay, session.cancel_event)

        raise RateLimitError(
            f"Rate limit exceeded after {attempts} attempts; try the fetch again later"
        )

    async def _pause(self, seconds: float, cancel_event: threading.Event | None) -> None:
        _raise_if_cancelled(cancel_event)
        await self._sleep(seconds)
        _raise_if_cancelled(cancel_event)


if TYPE_CHECKING:
    _fetcher_check: RemoteOrderFetcher = SellingPartnerClient()
