"""Order domain model."""

from __future__ import annotations

from .enums import CustomerType, OrderStatus, Platform
from .order import MUTABLE_FIELDS, Amount, CanonicalOrder, OrderChanges
from .reports import ImportReport, RemoteImportResult, ShippingReconciliationReport

__all__ = [
    "MUTABLE_FIELDS",
    "Amount",
    "CanonicalOrder",
    "CustomerType",
    "ImportReport",
    "OrderChanges",
    "OrderStatus",
    "Platform",
    "RemoteImportResult",
    "ShippingReconciliationReport",
]
