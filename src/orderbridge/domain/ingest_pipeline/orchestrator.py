"""Ordered execution of import phases over one batch."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import Protocol

from .context import ImportBatch, PipelineContext

log = getLogger(__name__)


class PipelinePhase(Protocol):
    """One step of an import run; mutates ``batch`` and ``context`` in place."""

    name: str

    def run(self, batch: ImportBatch, *, context: PipelineContext) -> None: ...


@dataclass(frozen=True, slots=True)
class IngestionPipeline:
    phases: tuple[PipelinePhase, ...] = ()

    @property
    def phase_names(self) -> tuple[str, ...]:
        return tuple(phase.name for phase in self.phases)

    def run(self, batch: ImportBatch, *, context: PipelineContext | None = None) -> ImportBatch:
        run_context = context or PipelineContext()
        for phase in self.phases:
            phase.run(batch, context=run_context)
            log.debug(
                "Phase %s done: %d candidates left, %d skipped",
                phase.name,
                len(batch.candidates),
                run_context.skipped,
            )
        return batch
