from __future__ import annotations

import pytest

from orderbridge.domain.errors import ParseError
from orderbridge.domain.reconciliation import parse_manifest


def test_manifest_columns_are_resolved_by_alias() -> None:
    content = (
        "Referenz;Paketnummer;Versanddienstleister;Empfänger;Telefon;Ort\n"
        "302-1;00340434;DHL;Jane Doe;0170 1234567;Berlin\n"
        "302-2;00340435\n"
    )

    rows = parse_manifest(content)

    assert len(rows) == 2
    assert rows[0].reference == "302-1"
    assert rows[0].tracking_number == "00340434"
    assert rows[0].carrier == "DHL"
    assert rows[0].name == "Jane Doe"
    assert rows[0].city == "Berlin"
    assert rows[1].carrier == ""
    assert rows[1].row_number == 2


def test_manifest_without_reference_column_is_rejected() -> None:
    with pytest.raises(ParseError, match="reference"):
        parse_manifest("Paketnummer,Ort\n00340434,Berlin\n")
