"""Application orchestration entry points."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from logging import getLogger
from typing import TYPE_CHECKING, Final

from orderbridge.adapters.sp_api import SellingPartnerClient
from orderbridge.adapters.sqlalchemy import SqlAlchemyOrderStore, is_started, startup
from orderbridge.config import get_import_config
from orderbridge.domain import order_updates
from orderbridge.domain.ingest_pipeline import import_candidates, import_table, parse_table
from orderbridge.domain.model import RemoteImportResult
from orderbridge.domain.queries import OrderFilter, filter_orders
from orderbridge.domain.reconciliation import parse_manifest, reconcile_shipping_manifest
from orderbridge.domain.time_windows import TimeWindow

if TYPE_CHECKING:
    import threading
    from collections.abc import Mapping

    from orderbridge.config import ImportConfig
    from orderbridge.domain.model import (
        CanonicalOrder,
        ImportReport,
        Platform,
        ShippingReconciliationReport,
    )
    from orderbridge.domain.ports import OrderStore, RemoteOrderFetcher
    from orderbridge.domain.reconciliation import MatchPolicy

log = getLogger(__name__)

DEFAULT_REMOTE_LOOKBACK: Final[timedelta] = timedelta(days=7)


def default_store() -> OrderStore:
    """Return an order store over the configured database, starting it if needed."""

    if not is_started():
        startup()
    return SqlAlchemyOrderStore()


def _store_or_default(store: OrderStore | None) -> OrderStore:
    # Empty in-memory stores are falsy.
    return store if store is not None else default_store()


@lru_cache(maxsize=1)
def default_remote_client() -> SellingPartnerClient:
    """Process-wide client, so its access token is reused across fetches."""

    return SellingPartnerClient()


def import_order_file(
    content: bytes | str,
    *,
    platform: Platform | None = None,
    store: OrderStore | None = None,
    config: ImportConfig | None = None,
) -> ImportReport:
    """Import a marketplace order export.

    ``platform`` skips format detection. Raises ``ParseError`` for unreadable
    or empty files and ``UnknownFormatError`` when the format is not
    recognised and no fallback is configured.
    """

    import_config = config or get_import_config()
    table = parse_table(
        content,
        scan_limit=import_config.header_scan_limit,
        noise_threshold=import_config.noise_threshold,
    )
    return import_table(
        table,
        _store_or_default(store),
        platform=platform,
        fallback=import_config.unknown_format_fallback,
    )


def import_shipping_manifest(
    content: bytes | str,
    *,
    store: OrderStore | None = None,
    config: ImportConfig | None = None,
    policy: MatchPolicy | None = None,
) -> ShippingReconciliationReport:
    """Apply a carrier shipping manifest to existing orders."""

    import_config = config or get_import_config()
    rows = parse_manifest(content, scan_limit=import_config.header_scan_limit)
    log.info("Applying shipping manifest with %s rows", len(rows))
    return reconcile_shipping_manifest(
        rows,
        _store_or_default(store),
        shipper=import_config.shipper_tag,
        policy=policy,
    )


def fetch_remote_orders(
    *,
    window: TimeWindow | None = None,
    fetcher: RemoteOrderFetcher | None = None,
    store: OrderStore | None = None,
    cancel_event: threading.Event | None = None,
) -> RemoteImportResult:
    """Fetch Amazon orders created inside ``window`` and import them."""

    effective_window = window or TimeWindow(lookback=DEFAULT_REMOTE_LOOKBACK)
    bounds = effective_window.resolve()
    created_after = bounds.require_start()

    effective_fetcher = fetcher if fetcher is not None else default_remote_client()
    result = effective_fetcher.fetch_orders(
        created_after=created_after,
        created_before=bounds.end,
        cancel_event=cancel_event,
    )
    report = import_candidates(result.orders, _store_or_default(store))
    log.info(
        "Remote import finished: imported=%s, duplicates=%s, warnings=%s",
        report.imported,
        report.duplicates,
        len(result.errors),
    )
    return RemoteImportResult(report=report, errors=list(result.errors))


def update_order_shipping(
    order_item_id: str,
    changes: Mapping[str, str | None],
    *,
    store: OrderStore | None = None,
) -> CanonicalOrder | None:
    return order_updates.update_order_shipping(_store_or_default(store), order_item_id, changes)


def list_orders(
    order_filter: OrderFilter | None = None,
    *,
    store: OrderStore | None = None,
) -> list[CanonicalOrder]:
    orders = _store_or_default(store).list_all()
    return filter_orders(orders, order_filter or OrderFilter())


def delete_order(order_item_id: str, *, store: OrderStore | None = None) -> bool:
    deleted = _store_or_default(store).delete(order_item_id)
    if deleted:
        log.info("Deleted order item %s", order_item_id)
    return deleted
