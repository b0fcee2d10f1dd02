"""Order import pipeline.

Exports are parsed into row maps, classified by dialect, mapped to
:class:`~orderbridge.domain.model.CanonicalOrder` candidates and run through
explicit phases that share an :class:`ImportBatch` and a
:class:`PipelineContext`.
"""

from __future__ import annotations

from .context import ImportBatch, PipelineContext
from .deduplication import DeduplicationPhase
from .dialects import AMAZON_DIALECT, DIALECTS, EBAY_DIALECT, ColumnIndex, Dialect, detect_platform
from .mapping import ROW_MAPPERS, map_amazon_row, map_ebay_row
from .normalization import NormalizationPhase
from .orchestrator import IngestionPipeline, PipelinePhase
from .persistence import PersistencePhase
from .runner import import_candidates, import_table, resolve_platform, run_import_pipeline
from .tabular import ParsedTable, parse_table

__all__ = [
    "AMAZON_DIALECT",
    "DIALECTS",
    "EBAY_DIALECT",
    "ROW_MAPPERS",
    "ColumnIndex",
    "DeduplicationPhase",
    "Dialect",
    "ImportBatch",
    "IngestionPipeline",
    "NormalizationPhase",
    "ParsedTable",
    "PersistencePhase",
    "PipelineContext",
    "PipelinePhase",
    "detect_platform",
    "import_candidates",
    "import_table",
    "map_amazon_row",
    "map_ebay_row",
    "parse_table",
    "resolve_platform",
    "run_import_pipeline",
]
