"""Map raw export rows of a known dialect onto :class:`CanonicalOrder` values.

The mappers are pure: they read one row through a :class:`ColumnIndex`,
degrade missing columns to empty strings and never touch shipping fields.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Final

from orderbridge.domain.errors import RowError
from orderbridge.domain.model import Amount, CanonicalOrder, CustomerType, Platform

from .dialects import AMAZON_DIALECT, EBAY_DIALECT, ColumnIndex

type RowMapper = Callable[[Mapping[str, str], ColumnIndex | None], CanonicalOrder]

MONTH_ABBREVIATIONS: Final[Mapping[str, int]] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "mär": 3,
    "mrz": 3,
    "apr": 4,
    "may": 5,
    "mai": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "oct": 10,
    "okt": 10,
    "nov": 11,
    "dec": 12,
    "dez": 12,
}

_DOTTED_DATE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{2,4})\b")
_MONTH_NAME_DATE = re.compile(r"^([^\W\d_]{3,4})\.?-(\d{1,2})-(\d{2,4})\b")
_AMOUNT_NOISE = re.compile(r"[^\d,.\-]")
_GROUPED_THOUSANDS = re.compile(r"^-?[1-9]\d{0,2}(?:\.\d{3})+$")
_CENT: Final[Decimal] = Decimal("0.01")


def split_name(full_name: str) -> tuple[str, str]:
    """Split a full name into ``(first, last)``; the last token is the last name."""

    parts = full_name.split()
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return " ".join(parts[:-1]), parts[-1]


def _format_utc(value: datetime) -> str:
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_iso_datetime(value: str) -> str:
    """Re-emit an ISO-8601 date/time in UTC; unparseable input passes through."""

    text = value.strip()
    if not text:
        return ""
    candidate = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return _format_utc(parsed)


def _expand_year(year: int) -> int:
    return 2000 + year if year < 100 else year


def normalize_localized_date(value: str) -> str:
    """Normalize ``DD.MM.YYYY`` or ``Mon-DD-YYYY`` to midnight UTC of that day."""

    text = value.strip()
    if not text:
        return ""

    day = month = year = None
    if match := _DOTTED_DATE.match(text):
        day, month, year = int(match[1]), int(match[2]), int(match[3])
    elif match := _MONTH_NAME_DATE.match(text):
        month = MONTH_ABBREVIATIONS.get(match[1].casefold())
        day, year = int(match[2]), int(match[3])
    if day is None or month is None or year is None:
        return value

    try:
        midnight = datetime(_expand_year(year), month, day, tzinfo=UTC)
    except ValueError:
        return value
    return _format_utc(midnight)


def parse_amount(value: str | None) -> Amount | None:
    """Parse a currency string such as ``"1.234,56 €"`` into a fixed-point amount.

    Without a comma, dots grouping digits in threes (``"1.234 €"``) are
    thousands separators. Returns ``None`` for blank input and the original
    string when it does not contain a recognisable number.
    """

    if value is None or not value.strip():
        return None
    text = _AMOUNT_NOISE.sub("", value)
    if "," in text:
        if "." in text and text.rfind(".") > text.rfind(","):
            text = text.replace(",", "")
        else:
            text = text.replace(".", "").replace(",", ".")
    elif _GROUPED_THOUSANDS.match(text):
        text = text.replace(".", "")
    try:
        return Decimal(text).quantize(_CENT)
    except InvalidOperation:
        return value


def parse_quantity(value: str) -> int:
    try:
        quantity = int(value.strip())
    except ValueError:
        return 1
    return quantity if quantity >= 1 else 1


def customer_type_for(secondary_line: str | None) -> CustomerType:
    if secondary_line and secondary_line.strip():
        return CustomerType.BUSINESS
    return CustomerType.PRIVATE


def map_amazon_row(row: Mapping[str, str], columns: ColumnIndex | None = None) -> CanonicalOrder:
    """Map one Amazon order-report row.

    The line-item key falls back to the order id for reports without an
    ``order-item-id`` column; a row without either keeps an empty key and is
    dropped by the import pipeline.
    """

    index = columns or AMAZON_DIALECT.index(row.keys())
    first_name, last_name = split_name(index.first(row, "recipient_name", "buyer_name"))
    address_2 = index.value(row, "address_2")
    return CanonicalOrder(
        platform=Platform.AMAZON,
        purchase_date=normalize_iso_datetime(index.value(row, "purchase_date")),
        order_id=index.value(row, "order_id"),
        order_item_id=index.first(row, "order_item_id", "order_id"),
        email=index.value(row, "email"),
        phone=index.value(row, "phone"),
        first_name=first_name,
        last_name=last_name,
        street=index.value(row, "address_1"),
        contact_person=address_2 or None,
        city=index.value(row, "city"),
        postal_code=index.value(row, "postal_code"),
        country=index.value(row, "country"),
        sku=index.value(row, "sku"),
        product_name=index.value(row, "product_name"),
        quantity=parse_quantity(index.value(row, "quantity")),
        price=parse_amount(index.value(row, "price")),
        shipping_cost=parse_amount(index.value(row, "shipping_cost")),
        customer_type=customer_type_for(address_2),
    )


def map_ebay_row(row: Mapping[str, str], columns: ColumnIndex | None = None) -> CanonicalOrder:
    """Map one eBay sales-report row.

    eBay exports carry no line-item id, so one is synthesized from the sales
    record number (then transaction number, then order number). Rows without
    any of them are unmappable.
    """

    index = columns or EBAY_DIALECT.index(row.keys())
    prefix = EBAY_DIALECT.item_id_prefix
    record_id = index.first(row, "sales_record_number", "transaction_id", "order_number")
    order_item_id = prefix + record_id
    if order_item_id == prefix:
        raise RowError("eBay row has no sales record, transaction or order number")

    first_name, last_name = split_name(index.first(row, "recipient_name", "buyer_name"))
    address_2 = index.value(row, "address_2")
    return CanonicalOrder(
        platform=Platform.EBAY,
        purchase_date=normalize_localized_date(index.value(row, "purchase_date")),
        order_id=index.first(row, "order_number", "sales_record_number"),
        order_item_id=order_item_id,
        email=index.value(row, "email"),
        phone=index.value(row, "phone"),
        first_name=first_name,
        last_name=last_name,
        street=index.value(row, "address_1"),
        contact_person=address_2 or None,
        city=index.value(row, "city"),
        postal_code=index.value(row, "postal_code"),
        country=index.value(row, "country"),
        sku=index.value(row, "sku"),
        product_name=index.value(row, "product_name"),
        quantity=parse_quantity(index.value(row, "quantity")),
        price=parse_amount(index.value(row, "price")),
        shipping_cost=parse_amount(index.value(row, "shipping_cost")),
        customer_type=customer_type_for(address_2),
    )


ROW_MAPPERS: Final[Mapping[Platform, RowMapper]] = {
    Platform.AMAZON: map_amazon_row,
    Platform.EBAY: map_ebay_row,
}
