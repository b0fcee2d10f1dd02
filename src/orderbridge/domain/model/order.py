"""Canonical order line item shared by every import path."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TypedDict

from .enums import CustomerType, OrderStatus, Platform

type Amount = Decimal | str
"""A fixed-point amount, or the raw source text when it could not be parsed."""


class OrderChanges(TypedDict, total=False):
    """Partial update of the mutable (shipping) fields of an order."""

    shipping_carrier: str | None
    tracking_number: str | None
    shipping_date: str | None
    shipper: str | None
    status: OrderStatus


MUTABLE_FIELDS: frozenset[str] = frozenset(
    {"shipping_carrier", "tracking_number", "shipping_date", "shipper"}
)


@dataclass(slots=True, kw_only=True)
class CanonicalOrder:
    """One purchased line item, keyed by ``order_item_id``."""

    platform: Platform
    purchase_date: str
    order_id: str
    order_item_id: str
    email: str = ""
    phone: str = ""
    first_name: str = ""
    last_name: str = ""
    street: str = ""
    contact_person: str | None = None
    city: str = ""
    postal_code: str = ""
    country: str = ""
    sku: str = ""
    product_name: str = ""
    quantity: int = 1
    price: Amount | None = None
    shipping_cost: Amount | None = None
    customer_type: CustomerType = CustomerType.PRIVATE
    shipping_carrier: str | None = None
    tracking_number: str | None = None
    shipping_date: str | None = None
    shipper: str | None = None
    status: OrderStatus = OrderStatus.OPEN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
