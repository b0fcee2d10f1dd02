from __future__ import annotations

from dataclasses import dataclass

import pytest

from orderbridge.adapters.memory import InMemoryOrderStore
from orderbridge.domain.errors import ParseError, UnknownFormatError
from orderbridge.domain.ingest_pipeline import (
    DeduplicationPhase,
    ImportBatch,
    IngestionPipeline,
    PipelineContext,
    PipelinePhase,
    import_candidates,
    import_table,
    parse_table,
    resolve_platform,
)
from orderbridge.domain.model import OrderStatus, Platform
from tests.helpers.orders import amazon_report, amazon_row, make_order


@dataclass(slots=True)
class _RecordingPhase(PipelinePhase):
    name: str
    calls: list[str]

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        _ = (batch, context)
        self.calls.append(self.name)


def test_pipeline_runs_phases_in_order() -> None:
    calls: list[str] = []
    first = _RecordingPhase(name="first", calls=calls)
    second = _RecordingPhase(name="second", calls=calls)
    pipeline = IngestionPipeline(phases=(first, second))

    pipeline.run(ImportBatch(), context=PipelineContext())

    assert calls == ["first", "second"]
    assert pipeline.phase_names == ("first", "second")


def test_deduplication_keeps_first_occurrence_and_drops_empty_keys() -> None:
    first = make_order("A1", city="Berlin")
    repeat = make_order("A1", city="Hamburg")
    keyless = make_order("")
    batch = ImportBatch(candidates=[first, keyless, repeat, make_order("A2")])
    context = PipelineContext()

    DeduplicationPhase().run(batch, context=context)

    assert [order.order_item_id for order in batch.candidates] == ["A1", "A2"]
    assert batch.candidates[0].city == "Berlin"
    assert context.skipped == 2
    assert context.duplicate_ids == []


def test_end_to_end_csv_import() -> None:
    store = InMemoryOrderStore()
    content = (
        "order-item-id,purchase-date,recipient-name,ship-country\n"
        "A1-X,2024-03-01,Jane Doe,DE\n"
    )

    report = import_table(parse_table(content), store)

    assert report.imported == 1
    order = store.lookup_by_item_id("A1-X")
    assert order is not None
    assert (order.first_name, order.last_name) == ("Jane", "Doe")
    assert order.country == "DE"
    assert order.status is OrderStatus.OPEN


def test_reimport_is_idempotent() -> None:
    store = InMemoryOrderStore()
    content = amazon_report(
        amazon_row(**{"order-item-id": "I-1"}),
        amazon_row(**{"order-item-id": "I-2"}),
        amazon_row(**{"order-item-id": "I-3"}),
    )

    first = import_table(parse_table(content), store)
    second = import_table(parse_table(content), store)

    assert (first.imported, first.duplicates) == (3, 0)
    assert (second.imported, second.duplicates) == (0, 3)
    assert second.duplicate_ids == ["I-1", "I-2", "I-3"]


def test_repeated_item_in_file_is_imported_once() -> None:
    store = InMemoryOrderStore()
    content = amazon_report(
        amazon_row(**{"order-item-id": "I-1", "ship-city": "Berlin"}),
        amazon_row(**{"order-item-id": "I-1", "ship-city": "Hamburg"}),
    )

    report = import_table(parse_table(content), store)

    assert report.imported == 1
    assert report.duplicates == 0
    assert report.skipped == 1
    stored = store.lookup_by_item_id("I-1")
    assert stored is not None
    assert stored.city == "Berlin"


def test_unmappable_rows_are_skipped_without_failing_the_batch() -> None:
    store = InMemoryOrderStore()
    content = (
        "Verkaufsprotokollnummer;Bestellnummer;Name des Empfängers;Ort des Empfängers;"
        "Angebotstitel;Anzahl\n"
        "1001;12-1;Max Mustermann;München;Gadget;1\n"
        ";;Erika Muster;Köln;Gadget;1\n"
    )

    report = import_table(parse_table(content), store)

    assert report.imported == 1
    assert report.skipped == 1
    assert store.lookup_by_item_id("EBAY-1001") is not None


def test_explicit_platform_overrides_detection() -> None:
    assert resolve_platform(("order-item-id",), explicit=Platform.EBAY) is Platform.EBAY


def test_unknown_header_uses_fallback(caplog: pytest.LogCaptureFixture) -> None:
    platform = resolve_platform(("foo", "bar"), fallback=Platform.AMAZON)

    assert platform is Platform.AMAZON
    assert "assuming" in caplog.text


def test_unknown_header_without_fallback_raises() -> None:
    with pytest.raises(UnknownFormatError) as excinfo:
        resolve_platform(("foo", "bar"))

    assert excinfo.value.header == ("foo", "bar")


def test_file_without_records_is_a_parse_error() -> None:
    table = parse_table("order-item-id,purchase-date,recipient-name,ship-country\n")

    with pytest.raises(ParseError, match="No records"):
        import_table(table, InMemoryOrderStore())


def test_import_candidates_reports_store_duplicates() -> None:
    store = InMemoryOrderStore([make_order("R-1")])

    report = import_candidates([make_order("R-1"), make_order("R-2"), make_order("R-2")], store)

    assert report.imported == 1
    assert report.duplicate_ids == ["R-1"]
    assert report.skipped == 1
