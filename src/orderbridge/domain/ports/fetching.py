"""Ports for fetching orders from remote marketplaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import threading
    from datetime import datetime

    from orderbridge.domain.model import CanonicalOrder


@dataclass(slots=True)
class RemoteFetchResult:
    """Mapped orders from one remote fetch plus non-fatal error strings."""

    orders: list[CanonicalOrder] = field(default_factory=list["CanonicalOrder"])
    errors: list[str] = field(default_factory=list[str])


@runtime_checkable
class RemoteOrderFetcher(Protocol):
    """Port for retrieving orders created inside a time window."""

    def fetch_orders(
        self,
        *,
        created_after: datetime,
        created_before: datetime | None = None,
        cancel_event: threading.Event | None = None,
    ) -> RemoteFetchResult: ...


__all__ = ["RemoteFetchResult", "RemoteOrderFetcher"]
