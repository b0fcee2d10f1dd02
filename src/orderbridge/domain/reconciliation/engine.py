"""Apply a shipping manifest to the order store."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from orderbridge.domain.model import ShippingReconciliationReport
from orderbridge.domain.order_updates import update_order_shipping

from .contracts import MatchTier
from .resolve import resolve_row

if TYPE_CHECKING:
    from collections.abc import Iterable

    from orderbridge.domain.ports import OrderStore
    from orderbridge.domain.time_windows import Clock

    from .contracts import ManifestRow, MatchResult
    from .scoring import MatchPolicy

log = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _append_once(values: list[str], value: str) -> None:
    if value not in values:
        values.append(value)


def _shipping_changes(
    row: ManifestRow, *, shipping_date: str, shipper: str | None
) -> dict[str, str | None]:
    changes: dict[str, str | None] = {"shipping_date": shipping_date, "shipper": shipper}
    if row.carrier.strip():
        changes["shipping_carrier"] = row.carrier
    if row.tracking_number.strip():
        changes["tracking_number"] = row.tracking_number
    return changes


def reconcile_shipping_manifest(
    rows: Iterable[ManifestRow],
    store: OrderStore,
    *,
    shipper: str | None,
    policy: MatchPolicy | None = None,
    clock: Clock = _utcnow,
) -> ShippingReconciliationReport:
    """Stamp carrier, tracking number, date and shipper onto matched orders.

    Rows with an empty reference are ignored. Ambiguous references are
    reported and never applied. ``updated`` counts distinct line items.
    """

    orders = store.list_all()
    shipping_date = clock().date().isoformat()
    report = ShippingReconciliationReport()
    updated_ids: set[str] = set()

    for row in rows:
        if not row.reference.strip():
            continue
        result: MatchResult = resolve_row(row, orders, policy=policy)

        if result.tier is MatchTier.NONE:
            _append_once(report.not_found, result.reference)
            continue
        if result.tier is MatchTier.AMBIGUOUS:
            log.warning(
                "Reference %s matches several orders (%s), skipped",
                result.reference,
                ", ".join(result.candidate_order_ids),
            )
            _append_once(report.ambiguous, result.reference)
            continue
        if result.tier is MatchTier.FUZZY:
            signals = ", ".join(sorted(result.signals))
            log.info("Fuzzy match %s on %s", result.explanation(), signals)
            _append_once(report.fuzzy_matched, result.explanation())

        changes = _shipping_changes(row, shipping_date=shipping_date, shipper=shipper)
        for order in result.orders:
            if update_order_shipping(store, order.order_item_id, changes) is not None:
                updated_ids.add(order.order_item_id)

    report.updated = len(updated_ids)
    log.info(
        "Shipping manifest applied: %s updated, %s not found, %s fuzzy, %s ambiguous",
        report.updated,
        len(report.not_found),
        len(report.fuzzy_matched),
        len(report.ambiguous),
    )
    return report
