from __future__ import annotations

import pytest

from orderbridge import app
from orderbridge.adapters.sqlalchemy import SqlAlchemyOrderStore  # noqa: TC001
from orderbridge.config import ImportConfig
from orderbridge.domain.model import OrderStatus, Platform
from orderbridge.domain.queries import OrderFilter
from tests.helpers.orders import amazon_report, amazon_row

pytestmark = pytest.mark.integration

EBAY_EXPORT = (
    "\ufeff;;;;\n"
    "Verkaufsprotokollnummer;Bestellnummer;Name des Empfängers;Telefon des Empfängers;"
    "Ort des Empfängers;Land des Empfängers;Angebotstitel;Anzahl;Verkauft für;Verkaufsdatum\n"
    "4711;12-34567-89012;Max Roe;0151 7654321;Hamburg;DE;Gadget;1;1.234,50 EUR;03.03.24\n"
    "Seite 1 von 1;;;;;;;;;\n"
)


def test_imports_then_manifest_then_listing(sqlite_store: SqlAlchemyOrderStore) -> None:
    config = ImportConfig(shipper_tag="Lager Nord")

    amazon = app.import_order_file(
        amazon_report(
            amazon_row(**{"order-id": "302-1", "order-item-id": "1001"}),
            amazon_row(**{"order-id": "302-1", "order-item-id": "1002"}),
        ),
        store=sqlite_store,
        config=config,
    )
    ebay = app.import_order_file(EBAY_EXPORT.encode(), store=sqlite_store, config=config)

    assert amazon.imported == 2
    assert (ebay.imported, ebay.skipped) == (1, 1)

    manifest = (
        "Referenz;Paketnummer;Versanddienstleister;Empfänger;Ort\n"
        "302-1;00340434;DHL;;\n"
        "FALSCH-1;00340435;DPD;Max Roe;Hamburg\n"
        "UNBEKANNT;00340436;DHL;;\n"
    )
    report = app.import_shipping_manifest(manifest, store=sqlite_store, config=config)

    assert report.updated == 3
    assert report.not_found == ["UNBEKANNT"]
    assert report.fuzzy_matched == ["FALSCH-1 → 12-34567-89012 (Max Roe)"]

    shipped = app.list_orders(OrderFilter(platform=Platform.EBAY), store=sqlite_store)
    (ebay_order,) = shipped
    assert ebay_order.order_item_id == "EBAY-4711"
    assert ebay_order.purchase_date == "2024-03-03T00:00:00.000Z"
    assert ebay_order.tracking_number == "00340435"
    assert ebay_order.shipper == "Lager Nord"
    assert ebay_order.status is OrderStatus.SHIPPED
    assert all(
        order.status is OrderStatus.SHIPPED for order in app.list_orders(store=sqlite_store)
    )
