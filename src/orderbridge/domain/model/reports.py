"""Operator-facing results of import and reconciliation runs."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ImportReport:
    """Outcome of one file import or one remote fetch batch.

    ``duplicates`` counts rows the order store rejected because the
    ``order_item_id`` already existed. ``skipped`` counts rows dropped before
    persistence (unmappable rows and repeats inside the same batch).
    """

    imported: int = 0
    duplicates: int = 0
    duplicate_ids: list[str] = field(default_factory=list[str])
    skipped: int = 0


@dataclass(slots=True)
class ShippingReconciliationReport:
    """Outcome of applying a shipping manifest to existing orders."""

    updated: int = 0
    not_found: list[str] = field(default_factory=list[str])
    fuzzy_matched: list[str] = field(default_factory=list[str])
    ambiguous: list[str] = field(default_factory=list[str])


@dataclass(slots=True)
class RemoteImportResult:
    """Import report for a remote fetch plus the non-fatal remote errors."""

    report: ImportReport
    errors: list[str] = field(default_factory=list[str])
