"""Shared context structures for the import pipeline (batch + run state)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from orderbridge.domain.model import CanonicalOrder, ImportReport

if TYPE_CHECKING:
    from collections.abc import Mapping

    from orderbridge.domain.errors import RowError
    from orderbridge.domain.model import Platform
    from orderbridge.domain.ports import OrderStore

    from .dialects import ColumnIndex


@dataclass(slots=True)
class ImportBatch:
    """Rows and candidates of a single import run.

    File imports start with ``rows`` and a ``platform``; the mapping phase
    fills ``candidates``. Remote fetches arrive already mapped and start with
    ``candidates`` only. Later phases narrow ``candidates`` in place.
    """

    rows: list[Mapping[str, str]] = field(default_factory=list["Mapping[str, str]"])
    platform: Platform | None = None
    columns: ColumnIndex | None = None
    candidates: list[CanonicalOrder] = field(default_factory=list[CanonicalOrder])


@dataclass(slots=True)
class PipelineContext:
    """Mutable context shared across pipeline phases."""

    store: OrderStore | None = None
    imported: int = 0
    skipped: int = 0
    duplicate_ids: list[str] = field(default_factory=list[str])
    row_errors: list[RowError] = field(default_factory=list["RowError"])

    def report(self) -> ImportReport:
        return ImportReport(
            imported=self.imported,
            duplicates=len(self.duplicate_ids),
            duplicate_ids=list(self.duplicate_ids),
            skipped=self.skipped,
        )
