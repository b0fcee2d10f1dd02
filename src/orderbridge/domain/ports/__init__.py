"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import RemoteFetchResult, RemoteOrderFetcher
from .persistence import BatchInsertResult, OrderStore

__all__ = [
    "BatchInsertResult",
    "OrderStore",
    "RemoteFetchResult",
    "RemoteOrderFetcher",
]
