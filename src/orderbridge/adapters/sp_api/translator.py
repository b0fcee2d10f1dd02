"""Translate Selling Partner API payloads into canonical orders."""

from __future__ import annotations

from typing import TYPE_CHECKING

from orderbridge.domain.ingest_pipeline.mapping import (
    customer_type_for,
    normalize_iso_datetime,
    parse_amount,
    split_name,
)
from orderbridge.domain.model import CanonicalOrder, Platform

from .schema import BuyerInfo, ShippingAddress

if TYPE_CHECKING:
    from .schema import Money, RemoteOrder, RemoteOrderItem


def _amount(money: Money | None) -> str | None:
    return money.amount if money is not None else None


def map_order_item(order: RemoteOrder, item: RemoteOrderItem) -> CanonicalOrder:
    """Map one line item of a remote order.

    Address and buyer fields are empty when the fetch ran without a
    restricted data token.
    """

    address = order.shipping_address or ShippingAddress()
    buyer = order.buyer_info or BuyerInfo()
    first_name, last_name = split_name(address.name or buyer.buyer_name or "")

    return CanonicalOrder(
        platform=Platform.AMAZON,
        purchase_date=normalize_iso_datetime(order.purchase_date),
        order_id=order.amazon_order_id,
        order_item_id=item.order_item_id or order.amazon_order_id,
        email=buyer.buyer_email or "",
        phone=address.phone or "",
        first_name=first_name,
        last_name=last_name,
        street=address.address_line_1 or "",
        contact_person=address.address_line_2,
        city=address.city or "",
        postal_code=address.postal_code or "",
        country=address.country_code or "",
        sku=item.seller_sku or "",
        product_name=item.title or "",
        quantity=item.quantity_ordered or 1,
        price=parse_amount(_amount(item.item_price)),
        shipping_cost=parse_amount(_amount(item.shipping_price)),
        customer_type=customer_type_for(address.address_line_2),
    )
