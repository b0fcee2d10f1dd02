"""Read carrier shipping manifests into :class:`ManifestRow` values."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from orderbridge.domain.errors import ParseError
from orderbridge.domain.ingest_pipeline.dialects import ColumnIndex
from orderbridge.domain.ingest_pipeline.tabular import DEFAULT_HEADER_SCAN_LIMIT, parse_table

from .contracts import ManifestRow

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

# A manifest line needs at least a reference and a parcel number.
MANIFEST_NOISE_THRESHOLD: Final[int] = 1

MANIFEST_COLUMNS: Final[Mapping[str, tuple[str, ...]]] = {
    "reference": ("Referenz", "Reference", "Kundenreferenz", "Auftragsnummer", "Order ID"),
    "tracking_number": (
        "Paketnummer",
        "Sendungsnummer",
        "Trackingnummer",
        "Tracking Number",
        "Tracking",
    ),
    "carrier": ("Versanddienstleister", "Dienstleister", "Carrier"),
    "name": ("Empfänger", "Empfängername", "Name", "Recipient"),
    "phone": ("Telefon", "Telefonnummer", "Phone"),
    "city": ("Ort", "Stadt", "City"),
}


def manifest_index(header: Iterable[str]) -> ColumnIndex:
    by_folded: dict[str, str] = {}
    for name in header:
        by_folded.setdefault(name.strip().casefold(), name)
    resolved: dict[str, str] = {}
    for canonical, aliases in MANIFEST_COLUMNS.items():
        for alias in aliases:
            actual = by_folded.get(alias.casefold())
            if actual is not None:
                resolved[canonical] = actual
                break
    return ColumnIndex(resolved=resolved)


def parse_manifest(
    content: bytes | str,
    *,
    scan_limit: int = DEFAULT_HEADER_SCAN_LIMIT,
) -> list[ManifestRow]:
    """Parse manifest content; raises :class:`ParseError` without a reference column."""

    table = parse_table(content, scan_limit=scan_limit, noise_threshold=MANIFEST_NOISE_THRESHOLD)
    columns = manifest_index(table.header)
    if "reference" not in columns.resolved:
        raise ParseError("Shipping manifest has no reference column")
    if not table.rows:
        raise ParseError("No records found in file")

    return [
        ManifestRow(
            reference=columns.value(row, "reference"),
            carrier=columns.value(row, "carrier"),
            tracking_number=columns.value(row, "tracking_number"),
            name=columns.value(row, "name"),
            phone=columns.value(row, "phone"),
            city=columns.value(row, "city"),
            row_number=row_number,
        )
        for row_number, row in enumerate(table.rows, start=1)
    ]
