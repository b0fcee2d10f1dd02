"""Read-side helpers for listing orders."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from orderbridge.domain.model import CanonicalOrder, Platform


@dataclass(frozen=True, slots=True)
class OrderFilter:
    """Optional filters; ``date_to`` is inclusive through the end of that day."""

    date_from: str | None = None
    date_to: str | None = None
    country: str | None = None
    platform: Platform | None = None


def filter_orders(
    orders: Iterable[CanonicalOrder], order_filter: OrderFilter
) -> list[CanonicalOrder]:
    """Return matching orders, newest purchase date first."""

    upper = f"{order_filter.date_to}T23:59:59.999Z" if order_filter.date_to else None
    selected = [
        order
        for order in orders
        if (not order_filter.date_from or order.purchase_date >= order_filter.date_from)
        and (upper is None or order.purchase_date <= upper)
        and (not order_filter.country or order.country == order_filter.country)
        and (order_filter.platform is None or order.platform is order_filter.platform)
    ]
    selected.sort(key=lambda order: order.purchase_date, reverse=True)
    return selected
