"""Entry points for running the import pipeline."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.errors import ParseError, UnknownFormatError

from .context import ImportBatch, PipelineContext
from .deduplication import DeduplicationPhase
from .dialects import detect_platform, dialect_for
from .normalization import NormalizationPhase
from .orchestrator import IngestionPipeline
from .persistence import PersistencePhase

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from orderbridge.domain.model import CanonicalOrder, ImportReport, Platform
    from orderbridge.domain.ports import OrderStore

    from .tabular import ParsedTable

log = getLogger(__name__)


def default_pipeline() -> IngestionPipeline:
    return IngestionPipeline(
        phases=(NormalizationPhase(), DeduplicationPhase(), PersistencePhase())
    )


def run_import_pipeline(*, batch: ImportBatch, store: OrderStore) -> PipelineContext:
    """Run the default import pipeline for ``batch`` and return the run context."""

    context = PipelineContext(store=store)
    default_pipeline().run(batch, context=context)
    return context


def resolve_platform(
    header: Sequence[str],
    *,
    explicit: Platform | None = None,
    fallback: Platform | None = None,
) -> Platform:
    """Choose the dialect for ``header``.

    An explicit platform always wins. Otherwise the detector decides, and an
    unrecognised header falls back to ``fallback`` or raises
    :class:`UnknownFormatError` when there is none.
    """

    if explicit is not None:
        return explicit
    detected = detect_platform(header)
    if detected is not None:
        return detected
    if fallback is None:
        raise UnknownFormatError(
            "Could not recognise the export format; choose the platform explicitly",
            header=tuple(header),
        )
    log.warning("No known export format matched the header, assuming %s", fallback)
    return fallback


def import_table(
    table: ParsedTable,
    store: OrderStore,
    *,
    platform: Platform | None = None,
    fallback: Platform | None = None,
) -> ImportReport:
    """Map, deduplicate and persist the rows of a parsed export file."""

    if not table.rows:
        raise ParseError("No records found in file")
    resolved = resolve_platform(table.header, explicit=platform, fallback=fallback)
    batch = ImportBatch(
        rows=list(table.rows),
        platform=resolved,
        columns=dialect_for(resolved).index(table.header),
    )
    context = run_import_pipeline(batch=batch, store=store)
    context.skipped += table.discarded
    report = context.report()
    log.info(
        "Imported %s %s orders (%s duplicates, %s skipped)",
        report.imported,
        resolved,
        report.duplicates,
        report.skipped,
    )
    return report


def import_candidates(candidates: Iterable[CanonicalOrder], store: OrderStore) -> ImportReport:
    """Deduplicate and persist already-mapped candidates (remote fetch batches)."""

    batch = ImportBatch(candidates=list(candidates))
    return run_import_pipeline(batch=batch, store=store).report()
