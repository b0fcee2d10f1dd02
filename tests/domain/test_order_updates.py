from __future__ import annotations

import pytest

from orderbridge.adapters.memory import InMemoryOrderStore
from orderbridge.domain.model import OrderStatus
from orderbridge.domain.order_updates import update_order_shipping, with_derived_status
from tests.helpers.orders import make_order


def test_update_sets_fields_and_derives_shipped_status() -> None:
    store = InMemoryOrderStore([make_order("A1")])

    updated = update_order_shipping(
        store,
        "A1",
        {"shipping_carrier": " DHL ", "tracking_number": "123", "shipping_date": "2024-01-01"},
    )

    assert updated is not None
    assert updated.shipping_carrier == "DHL"
    assert updated.status is OrderStatus.SHIPPED
    stored = store.lookup_by_item_id("A1")
    assert stored is not None
    assert stored.status is OrderStatus.SHIPPED


def test_blank_values_clear_fields_and_reopen() -> None:
    store = InMemoryOrderStore(
        [
            make_order(
                "A1",
                shipping_carrier="DHL",
                tracking_number="123",
                shipping_date="2024-01-01",
                status=OrderStatus.SHIPPED,
            )
        ]
    )

    updated = update_order_shipping(store, "A1", {"tracking_number": ""})

    assert updated is not None
    assert updated.tracking_number is None
    assert updated.shipping_carrier == "DHL"
    assert updated.status is OrderStatus.OPEN


def test_update_of_unknown_order_returns_none() -> None:
    assert update_order_shipping(InMemoryOrderStore(), "missing", {"shipper": "LogoiX"}) is None


@pytest.mark.parametrize("field_name", ["status", "city", "order_item_id"])
def test_only_shipping_fields_are_mutable(field_name: str) -> None:
    with pytest.raises(ValueError, match=field_name):
        with_derived_status(make_order(), {field_name: "x"})
