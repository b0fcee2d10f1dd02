"""Persistence phase: hand the surviving candidates to the order store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .orchestrator import PipelinePhase

if TYPE_CHECKING:
    from .context import ImportBatch, PipelineContext


class PersistencePhase(PipelinePhase):
    name: str = "persistence"

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        store = context.store
        if store is None:
            raise RuntimeError("Persistence requires an order store")
        if not batch.candidates:
            return

        result = store.batch_insert(batch.candidates)
        context.imported += result.inserted_count
        context.duplicate_ids.extend(result.rejected_duplicate_ids)
