"""Selling Partner API adapter (remote Amazon orders)."""

from __future__ import annotations

from .client import DEGRADED_ADDRESS_WARNING, SellingPartnerClient
from .credentials import AccessToken, CredentialCache
from .errors import (
    AuthorizationError,
    FetchCancelledError,
    RateLimitError,
    RemoteOrderAPIError,
    RemoteOrderError,
)
from .translator import map_order_item

__all__ = [
    "DEGRADED_ADDRESS_WARNING",
    "AccessToken",
    "AuthorizationError",
    "CredentialCache",
    "FetchCancelledError",
    "RateLimitError",
    "RemoteOrderAPIError",
    "RemoteOrderError",
    "SellingPartnerClient",
    "map_order_item",
]
