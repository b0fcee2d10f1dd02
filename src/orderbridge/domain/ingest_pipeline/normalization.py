"""Normalization phase: map raw rows of a known dialect to canonical orders."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.errors import RowError

from .dialects import dialect_for
from .mapping import ROW_MAPPERS
from .orchestrator import PipelinePhase

if TYPE_CHECKING:
    from .context import ImportBatch, PipelineContext

log = getLogger(__name__)


class NormalizationPhase(PipelinePhase):
    """Run the dialect's row mapper over every row of the batch."""

    name: str = "normalization"

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        if batch.platform is None:
            if batch.rows:
                raise RuntimeError("Rows cannot be normalized without a platform")
            return

        mapper = ROW_MAPPERS[batch.platform]
        columns = batch.columns
        if columns is None and batch.rows:
            columns = dialect_for(batch.platform).index(batch.rows[0].keys())

        for row_number, row in enumerate(batch.rows, start=1):
            try:
                batch.candidates.append(mapper(row, columns))
            except RowError as exc:
                exc.row_number = row_number
                context.row_errors.append(exc)
                context.skipped += 1
                log.debug("Row %s skipped: %s", row_number, exc)
