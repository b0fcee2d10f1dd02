"""In-memory order store, used by tests and as a scratch store for the CLI."""

from __future__ import annotations

import threading
from dataclasses import replace
from typing import TYPE_CHECKING

from orderbridge.domain.ports.persistence import BatchInsertResult, OrderStore

if TYPE_CHECKING:
    from collections.abc import Sequence

    from orderbridge.domain.model import CanonicalOrder, OrderChanges


class InMemoryOrderStore:
    def __init__(self, orders: Sequence[CanonicalOrder] = ()) -> None:
        self._lock = threading.Lock()
        self._orders: dict[str, CanonicalOrder] = {}
        if orders:
            self.batch_insert(orders)

    def lookup_by_item_id(self, order_item_id: str) -> CanonicalOrder | None:
        with self._lock:
            order = self._orders.get(order_item_id)
        return replace(order) if order is not None else None

    def batch_insert(self, candidates: Sequence[CanonicalOrder]) -> BatchInsertResult:
        result = BatchInsertResult()
        with self._lock:
            for candidate in candidates:
                key = candidate.order_item_id
                if key in self._orders:
                    result.rejected_duplicate_ids.append(key)
                    continue
                self._orders[key] = replace(candidate)
                result.inserted_count += 1
        return result

    def list_all(self) -> list[CanonicalOrder]:
        with self._lock:
            orders = [replace(order) for order in self._orders.values()]
        orders.sort(key=lambda order: order.purchase_date, reverse=True)
        return orders

    def update(self, order_item_id: str, changes: OrderChanges) -> CanonicalOrder | None:
        with self._lock:
            current = self._orders.get(order_item_id)
            if current is None:
                return None
            updated = replace(current, **changes)
            self._orders[order_item_id] = updated
        return replace(updated)

    def delete(self, order_item_id: str) -> bool:
        with self._lock:
            return self._orders.pop(order_item_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)


if TYPE_CHECKING:
    _store_check: OrderStore = InMemoryOrderStore()
