"""The single mutation path for existing orders."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.model import MUTABLE_FIELDS, OrderChanges
from orderbridge.domain.status import derive_status

if TYPE_CHECKING:
    from collections.abc import Mapping

    from orderbridge.domain.model import CanonicalOrder
    from orderbridge.domain.ports import OrderStore

log = getLogger(__name__)


def with_derived_status(current: CanonicalOrder, changes: Mapping[str, str | None]) -> OrderChanges:
    """Validate a partial update and attach the recomputed status."""

    unknown = set(changes) - MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    prepared = OrderChanges()
    for name, value in changes.items():
        cleaned = value.strip() if isinstance(value, str) else value
        prepared[name] = cleaned or None  # type: ignore[literal-required]
    prepared["status"] = derive_status(current, prepared)
    return prepared


def update_order_shipping(
    store: OrderStore,
    order_item_id: str,
    changes: Mapping[str, str | None],
) -> CanonicalOrder | None:
    """Apply ``changes`` to one order, returning ``None`` when it does not exist."""

    current = store.lookup_by_item_id(order_item_id)
    if current is None:
        log.debug("Update skipped, order item %s not found", order_item_id)
        return None
    return store.update(order_item_id, with_derived_status(current, changes))
