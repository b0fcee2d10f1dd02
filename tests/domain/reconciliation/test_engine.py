from __future__ import annotations

from datetime import UTC, datetime

import pytest

from orderbridge.adapters.memory import InMemoryOrderStore
from orderbridge.domain.model import OrderStatus
from orderbridge.domain.reconciliation import ManifestRow, reconcile_shipping_manifest
from tests.helpers.orders import make_order


def _clock() -> datetime:
    return datetime(2024, 3, 5, 16, 30, tzinfo=UTC)


@pytest.fixture
def store() -> InMemoryOrderStore:
    return InMemoryOrderStore(
        [
            make_order("I-1", order_id="302-1"),
            make_order("I-2", order_id="302-1"),
            make_order(
                "I-3",
                order_id="302-2",
                first_name="Max",
                last_name="Roe",
                phone="+49 151 7654321",
                city="Hamburg",
            ),
        ]
    )


def test_exact_reference_updates_every_line_item(store: InMemoryOrderStore) -> None:
    rows = [ManifestRow(reference="302-1", carrier="DHL", tracking_number="00340434")]

    report = reconcile_shipping_manifest(rows, store, shipper="Lager 1", clock=_clock)

    assert report.updated == 2
    for item_id in ("I-1", "I-2"):
        order = store.lookup_by_item_id(item_id)
        assert order is not None
        assert order.shipping_carrier == "DHL"
        assert order.tracking_number == "00340434"
        assert order.shipping_date == "2024-03-05"
        assert order.shipper == "Lager 1"
        assert order.status is OrderStatus.SHIPPED


def test_fuzzy_match_is_reported_with_explanation(store: InMemoryOrderStore) -> None:
    rows = [
        ManifestRow(
            reference="TYPO-302-2",
            carrier="DPD",
            tracking_number="0987",
            name="max roe",
            city="Hamburg",
        )
    ]

    report = reconcile_shipping_manifest(rows, store, shipper=None, clock=_clock)

    assert report.updated == 1
    assert report.fuzzy_matched == ["TYPO-302-2 → 302-2 (Max Roe)"]
    order = store.lookup_by_item_id("I-3")
    assert order is not None
    assert order.status is OrderStatus.SHIPPED


def test_unknown_and_empty_references(store: InMemoryOrderStore) -> None:
    rows = [
        ManifestRow(reference="NOPE", carrier="DHL", tracking_number="1"),
        ManifestRow(reference="NOPE", carrier="DHL", tracking_number="2"),
        ManifestRow(reference="  ", carrier="DHL", tracking_number="3"),
    ]

    report = reconcile_shipping_manifest(rows, store, shipper=None, clock=_clock)

    assert report.updated == 0
    assert report.not_found == ["NOPE"]
    assert all(order.status is OrderStatus.OPEN for order in store.list_all())


def test_city_only_overlap_with_two_orders_is_ambiguous() -> None:
    store = InMemoryOrderStore(
        [
            make_order(
                "A-1", order_id="302-A", first_name="Anna", last_name="A", phone="0170 111111"
            ),
            make_order(
                "B-1", order_id="302-B", first_name="Bert", last_name="B", phone="0170 222222"
            ),
        ]
    )
    row = ManifestRow(
        reference="???", tracking_number="1", name="Carl C", phone="0170 333333", city="Berlin"
    )

    report = reconcile_shipping_manifest([row], store, shipper=None, clock=_clock)

    assert report.updated == 0
    assert report.ambiguous == ["???"]
    assert report.not_found == []


def test_missing_tracking_keeps_order_open(store: InMemoryOrderStore) -> None:
    rows = [ManifestRow(reference="302-2", carrier="DHL")]

    report = reconcile_shipping_manifest(rows, store, shipper="Lager 1", clock=_clock)

    assert report.updated == 1
    order = store.lookup_by_item_id("I-3")
    assert order is not None
    assert order.shipping_carrier == "DHL"
    assert order.tracking_number is None
    assert order.status is OrderStatus.OPEN
