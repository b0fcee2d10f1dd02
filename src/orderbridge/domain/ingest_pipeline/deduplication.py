"""Intra-batch deduplication phase."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .orchestrator import PipelinePhase

if TYPE_CHECKING:
    from orderbridge.domain.model import CanonicalOrder

    from .context import ImportBatch, PipelineContext

log = getLogger(__name__)


class DeduplicationPhase(PipelinePhase):
    """Drop candidates without a key and repeats of a key within the batch.

    The first occurrence of an ``order_item_id`` wins. Dropped candidates are
    counted as skipped, never as store-level duplicates.
    """

    name: str = "deduplication"

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None:
        seen: set[str] = set()
        survivors: list[CanonicalOrder] = []

        for candidate in batch.candidates:
            key = candidate.order_item_id.strip()
            if not key:
                context.skipped += 1
                continue
            if key in seen:
                log.debug("Dropping repeated order item %s within batch", key)
                context.skipped += 1
                continue
            seen.add(key)
            survivors.append(candidate)

        batch.candidates[:] = survivors
