from __future__ import annotations

from decimal import Decimal

from orderbridge.adapters.sp_api import map_order_item
from orderbridge.adapters.sp_api.schema import RemoteOrder, RemoteOrderItem
from orderbridge.domain.model import CustomerType, OrderStatus, Platform
from tests.helpers.sp_api import remote_item, remote_order


def test_map_order_item_uses_shipping_address() -> None:
    order = RemoteOrder.model_validate(remote_order("A-1"))
    item = RemoteOrderItem.model_validate(remote_item("I-1", QuantityOrdered=3))

    mapped = map_order_item(order, item)

    assert mapped.platform is Platform.AMAZON
    assert mapped.order_item_id == "I-1"
    assert mapped.city == "Berlin"
    assert mapped.country == "DE"
    assert mapped.quantity == 3
    assert mapped.shipping_cost == Decimal("4.90")
    assert mapped.customer_type is CustomerType.PRIVATE
    assert mapped.status is OrderStatus.OPEN
    assert mapped.tracking_number is None


def test_map_order_item_without_restricted_data() -> None:
    order = RemoteOrder.model_validate(
        remote_order("A-1", BuyerInfo=None, ShippingAddress=None)
    )
    item = RemoteOrderItem.model_validate(remote_item("", ItemPrice=None))

    mapped = map_order_item(order, item)

    assert mapped.order_item_id == "A-1"
    assert (mapped.first_name, mapped.last_name, mapped.email) == ("", "", "")
    assert mapped.price is None


def test_second_address_line_marks_business_customer() -> None:
    payload = remote_order("A-1")
    payload["ShippingAddress"] = {"Name": "Max Roe", "AddressLine2": "Acme GmbH", "City": "Köln"}
    order = RemoteOrder.model_validate(payload)

    mapped = map_order_item(order, RemoteOrderItem.model_validate(remote_item("I-1")))

    assert mapped.customer_type is CustomerType.BUSINESS
    assert mapped.contact_person == "Acme GmbH"
