"""Ports for persisting canonical orders."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from orderbridge.domain.model import CanonicalOrder, OrderChanges


@dataclass(slots=True)
class BatchInsertResult:
    """What the store did with a batch of new orders."""

    inserted_count: int = 0
    rejected_duplicate_ids: list[str] = field(default_factory=list[str])


@runtime_checkable
class OrderStore(Protocol):
    """Persistence contract for canonical orders.

    The store owns the global uniqueness of ``order_item_id``: ``batch_insert``
    never overwrites an existing order and reports the rejected ids instead.
    ``update`` persists the given changes verbatim, including ``status``.
    """

    def lookup_by_item_id(self, order_item_id: str) -> CanonicalOrder | None: ...

    def batch_insert(self, candidates: Sequence[CanonicalOrder]) -> BatchInsertResult: ...

    def list_all(self) -> list[CanonicalOrder]: ...

    def update(self, order_item_id: str, changes: OrderChanges) -> CanonicalOrder | None: ...

    def delete(self, order_item_id: str) -> bool: ...
