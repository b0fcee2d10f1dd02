"""Fake Selling Partner API and payload factories for adapter tests."""

from __future__ import annotations

from collections.abc import Callable  # noqa: TC003
from dataclasses import dataclass, field, replace

import httpx

from orderbridge.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy

ENDPOINT = "https://sp.test"
TOKEN_ENDPOINT = "https://auth.test/o2/token"  # noqa: S105

type Handler = Callable[[httpx.Request], httpx.Response | None]


def remote_order(order_id: str, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "AmazonOrderId": order_id,
        "PurchaseDate": "2024-03-01T10:15:00Z",
        "OrderStatus": "Unshipped",
        "BuyerInfo": {"BuyerEmail": "jane@example.com", "BuyerName": "Jane Buyer"},
        "ShippingAddress": {
            "Name": "Jane Doe",
            "AddressLine1": "Hauptstr. 1",
            "City": "Berlin",
            "PostalCode": "10115",
            "CountryCode": "DE",
            "Phone": "+49 170 1234567",
        },
    }
    payload.update(overrides)
    return payload


def remote_item(item_id: str, **overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "OrderItemId": item_id,
        "SellerSKU": "SKU-1",
        "Title": "Widget",
        "QuantityOrdered": 1,
        "ItemPrice": {"CurrencyCode": "EUR", "Amount": "19.99"},
        "ShippingPrice": {"CurrencyCode": "EUR", "Amount": "4.90"},
    }
    payload.update(overrides)
    return payload


@dataclass
class FakeSellingPartnerApi:
    """Scriptable stand-in for the token, restricted-data-token and orders endpoints.

    ``order_pages`` are served in sequence, chained with ``NextToken``. A
    handler in ``overrides`` may answer any request first by returning a
    response instead of ``None``.
    """

    order_pages: list[list[dict[str, object]]] = field(default_factory=list)
    items: dict[str, list[dict[str, object]]] = field(default_factory=dict)
    overrides: list[Handler] = field(default_factory=list)
    requests: list[httpx.Request] = field(default_factory=list)
    token_requests: int = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for override in self.overrides:
            response = override(request)
            if response is not None:
                return response

        url = str(request.url)
        if url.startswith(TOKEN_ENDPOINT):
            self.token_requests += 1
            return httpx.Response(
                200,
                json={"access_token": f"access-{self.token_requests}", "expires_in": 3600},
            )
        if request.url.path.startswith("/tokens/"):
            return httpx.Response(200, json={"restrictedDataToken": "rdt", "expiresIn": 3600})
        if request.url.path.endswith("/orderItems"):
            order_id = request.url.path.split("/")[-2]
            return httpx.Response(
                200,
                json={"payload": {"AmazonOrderId": order_id, "OrderItems": self.items[order_id]}},
            )
        if request.url.path == "/orders/v0/orders":
            token = request.url.params.get("NextToken")
            index = int(token.removeprefix("page-")) if token else 0
            payload: dict[str, object] = {"Orders": self.order_pages[index]}
            if index + 1 < len(self.order_pages):
                payload["NextToken"] = f"page-{index + 1}"
            return httpx.Response(200, json={"payload": payload})
        return httpx.Response(404, json={"errors": [{"message": "unexpected request"}]})

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_client_factory(
    api: FakeSellingPartnerApi,
) -> Callable[[ResilienceConfig], ResilientClient]:
    def factory(resilience: ResilienceConfig) -> ResilientClient:
        quiet = replace(resilience, retry=RetryPolicy.disabled(), ratelimit=None)
        return ResilientClient(quiet, transport=httpx.MockTransport(api))

    return factory
