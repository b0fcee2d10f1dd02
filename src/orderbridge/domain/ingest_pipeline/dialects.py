"""Declarative description of the marketplace export dialects.

Each dialect lists the header fragments that identify it and, per canonical
field, the column names it may use. Supporting a new export layout is a matter
of adding data here; detection and mapping read only these tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from orderbridge.domain.model import Platform

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@dataclass(frozen=True, slots=True)
class ColumnIndex:
    """Resolved mapping from canonical field name to the header actually present."""

    resolved: Mapping[str, str] = field(default_factory=dict[str, str])

    def value(self, row: Mapping[str, str], name: str) -> str:
        header = self.resolved.get(name)
        if header is None:
            return ""
        return (row.get(header) or "").strip()

    def first(self, row: Mapping[str, str], *names: str) -> str:
        for name in names:
            value = self.value(row, name)
            if value:
                return value
        return ""


@dataclass(frozen=True, slots=True)
class Dialect:
    platform: Platform
    signals: tuple[str, ...]
    columns: Mapping[str, tuple[str, ...]]
    item_id_prefix: str = ""

    def matches(self, header: Iterable[str]) -> bool:
        folded = [name.casefold() for name in header]
        return any(signal in name for signal in self.signals for name in folded)

    def index(self, header: Iterable[str]) -> ColumnIndex:
        by_folded: dict[str, str] = {}
        for name in header:
            by_folded.setdefault(name.strip().casefold(), name)
        resolved: dict[str, str] = {}
        for canonical, aliases in self.columns.items():
            for alias in aliases:
                actual = by_folded.get(alias.casefold())
                if actual is not None:
                    resolved[canonical] = actual
                    break
        return ColumnIndex(resolved=resolved)


AMAZON_DIALECT: Final[Dialect] = Dialect(
    platform=Platform.AMAZON,
    signals=("order-item-id", "purchase-date", "buyer-email"),
    columns={
        "order_item_id": ("order-item-id",),
        "order_id": ("order-id",),
        "purchase_date": ("purchase-date",),
        "email": ("buyer-email",),
        "phone": ("buyer-phone-number", "ship-phone-number"),
        "recipient_name": ("recipient-name",),
        "buyer_name": ("buyer-name",),
        "address_1": ("ship-address-1",),
        "address_2": ("ship-address-2",),
        "city": ("ship-city",),
        "postal_code": ("ship-postal-code",),
        "country": ("ship-country",),
        "sku": ("sku",),
        "product_name": ("product-name",),
        "quantity": ("quantity-purchased",),
        "price": ("item-price",),
        "shipping_cost": ("shipping-price",),
    },
)

EBAY_DIALECT: Final[Dialect] = Dialect(
    platform=Platform.EBAY,
    signals=(
        "bestellnummer",
        "verkaufsprotokollnummer",
        "käufer",
        "empfänger",
        "angebotstitel",
        "artikelnummer",
        "order number",
        "sales record number",
        "transaction id",
        "buyer name",
        "buyer username",
        "item title",
        "item number",
    ),
    columns={
        "sales_record_number": ("Verkaufsprotokollnummer", "Sales Record Number"),
        "transaction_id": ("Transaktionsnummer", "Transaction ID"),
        "order_number": ("Bestellnummer", "Order Number"),
        "purchase_date": ("Verkaufsdatum", "Sale Date"),
        "email": ("E-Mail des Käufers", "Buyer Email"),
        "phone": ("Telefon des Empfängers", "Ship To Phone", "Buyer Phone"),
        "recipient_name": ("Name des Empfängers", "Ship To Name"),
        "buyer_name": ("Name des Käufers", "Buyer Name"),
        "address_1": ("Adresse 1 des Empfängers", "Ship To Address 1", "Shipping Address 1"),
        "address_2": ("Adresse 2 des Empfängers", "Ship To Address 2", "Shipping Address 2"),
        "city": ("Ort des Empfängers", "Ship To City", "Shipping City"),
        "postal_code": ("PLZ des Empfängers", "Ship To Zip", "Shipping Zip"),
        "country": ("Land des Empfängers", "Ship To Country", "Shipping Country"),
        "sku": ("Bestandseinheit", "Custom Label"),
        "product_name": ("Angebotstitel", "Item Title"),
        "quantity": ("Anzahl", "Quantity"),
        "price": ("Verkauft für", "Sold For"),
        "shipping_cost": ("Verpackung und Versand", "Shipping And Handling"),
    },
    item_id_prefix="EBAY-",
)

# Checked in order: the first dialect whose signals match wins.
DIALECTS: Final[tuple[Dialect, ...]] = (AMAZON_DIALECT, EBAY_DIALECT)


def dialect_for(platform: Platform) -> Dialect:
    for dialect in DIALECTS:
        if dialect.platform is platform:
            return dialect
    raise ValueError(f"No dialect registered for {platform}")


def detect_platform(header: Iterable[str]) -> Platform | None:
    """Classify a header row; ``None`` means no dialect signal matched."""

    names = tuple(header)
    for dialect in DIALECTS:
        if dialect.matches(names):
            return dialect.platform
    return None
