"""Shipment status derivation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from orderbridge.domain.model import OrderStatus

if TYPE_CHECKING:
    from orderbridge.domain.model import CanonicalOrder, OrderChanges

SHIPPING_FIELDS: Final[tuple[str, ...]] = ("shipping_carrier", "tracking_number", "shipping_date")


def _present(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def derive_status(current: CanonicalOrder | None, changes: OrderChanges) -> OrderStatus:
    """Return the status after applying ``changes`` over ``current``.

    An order is shipped iff carrier, tracking number and shipping date all
    resolve to non-empty values. Keys absent from ``changes`` keep the current
    value; keys present with ``None`` clear it.
    """

    for name in SHIPPING_FIELDS:
        if name in changes:
            value = changes.get(name)
        else:
            value = getattr(current, name) if current is not None else None
        if not _present(value):
            return OrderStatus.OPEN
    return OrderStatus.SHIPPED
