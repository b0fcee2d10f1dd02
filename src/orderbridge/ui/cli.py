from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from orderbridge.app import (
    delete_order,
    fetch_remote_orders,
    import_order_file,
    import_shipping_manifest,
    list_orders,
    update_order_shipping,
)
from orderbridge.config import ConfigurationError, configure_logging
from orderbridge.domain.model import Platform
from orderbridge.domain.queries import OrderFilter
from orderbridge.domain.time_windows import TimeWindow, parse_iso_datetime

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 7.0

_PLATFORM_CHOICES = {platform.value.casefold(): platform for platform in Platform}
_SHIPPING_OPTIONS = {
    "carrier": "shipping_carrier",
    "tracking_number": "tracking_number",
    "shipping_date": "shipping_date",
    "shipper": "shipper",
}


def _parse_platform(value: str) -> Platform:
    try:
        return _PLATFORM_CHOICES[value.casefold()]
    except KeyError:
        choices = ", ".join(sorted(_PLATFORM_CHOICES))
        raise argparse.ArgumentTypeError(f"Unknown platform {value!r} (choose {choices})") from None


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import and reconcile marketplace orders")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level name (default: ORDERBRIDGE_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_orders = subparsers.add_parser("import-orders", help="Import an order export file")
    import_orders.add_argument("file", type=Path, help="Amazon or eBay order export")
    import_orders.add_argument(
        "--platform",
        type=_parse_platform,
        help="Skip format detection and read the file as this platform's export",
    )

    import_shipping = subparsers.add_parser(
        "import-shipping",
        help="Apply a carrier shipping manifest to existing orders",
    )
    import_shipping.add_argument("file", type=Path, help="Shipping manifest (CSV)")

    fetch = subparsers.add_parser("fetch-amazon", help="Fetch orders from the Amazon API")
    fetch.add_argument(
        "--start",
        type=str,
        help="ISO-8601 timestamp (UTC) marking the inclusive start of the window",
    )
    fetch.add_argument(
        "--end",
        type=str,
        help="ISO-8601 timestamp (UTC) marking the inclusive end of the window",
    )
    fetch.add_argument(
        "--lookback-days",
        type=float,
        help="Relative lookback window in days (defaults to 7 when --start is absent)",
    )

    listing = subparsers.add_parser("list", help="List stored orders, newest first")
    listing.add_argument("--platform", type=_parse_platform)
    listing.add_argument("--country", type=str, help="Country code, e.g. DE")
    listing.add_argument("--date-from", type=str, help="Earliest purchase date (YYYY-MM-DD)")
    listing.add_argument("--date-to", type=str, help="Latest purchase date, inclusive")

    update = subparsers.add_parser("update-shipping", help="Set shipping fields of one order")
    update.add_argument("order_item_id", type=str)
    update.add_argument("--carrier", type=str)
    update.add_argument("--tracking-number", type=str)
    update.add_argument("--shipping-date", type=str, help="Shipping date (YYYY-MM-DD)")
    update.add_argument("--shipper", type=str)

    remove = subparsers.add_parser("delete", help="Delete one order line item")
    remove.add_argument("order_item_id", type=str)

    return parser.parse_args(list(argv))


def _compute_time_window(args: argparse.Namespace) -> TimeWindow:
    start = parse_iso_datetime(args.start) if args.start else None
    end = parse_iso_datetime(args.end) if args.end else None

    lookback_days = args.lookback_days
    if lookback_days is None and start is None:
        lookback_days = DEFAULT_LOOKBACK_DAYS
    lookback: timedelta | None = None
    if lookback_days is not None:
        if lookback_days < 0:
            raise ValueError("Lookback days must be non-negative")
        lookback = timedelta(days=lookback_days)

    window = TimeWindow(start=start, end=end, lookback=lookback)
    window.resolve()
    return window


def _shipping_changes(args: argparse.Namespace) -> dict[str, str | None]:
    changes = {
        field_name: getattr(args, option)
        for option, field_name in _SHIPPING_OPTIONS.items()
        if getattr(args, option) is not None
    }
    if not changes:
        raise ValueError(
            "Pass at least one of --carrier, --tracking-number, --shipping-date, --shipper"
        )
    return changes


def _not_found(order_item_id: str) -> str:
    return f"Order item {order_item_id} not found"


def _emit(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, ensure_ascii=False, default=str))
    sys.stdout.write("\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=parsed_args.log_level)
        window: TimeWindow | None = None
        changes: dict[str, str | None] = {}
        if parsed_args.command == "fetch-amazon":
            window = _compute_time_window(parsed_args)
        elif parsed_args.command == "update-shipping":
            changes = _shipping_changes(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "import-orders":
            report = import_order_file(
                parsed_args.file.read_bytes(),
                platform=parsed_args.platform,
            )
            _emit(asdict(report))
        elif parsed_args.command == "import-shipping":
            _emit(asdict(import_shipping_manifest(parsed_args.file.read_bytes())))
        elif parsed_args.command == "fetch-amazon":
            _emit(asdict(fetch_remote_orders(window=window)))
        elif parsed_args.command == "list":
            orders = list_orders(
                OrderFilter(
                    date_from=parsed_args.date_from,
                    date_to=parsed_args.date_to,
                    country=parsed_args.country,
                    platform=parsed_args.platform,
                )
            )
            _emit([asdict(order) for order in orders])
        elif parsed_args.command == "update-shipping":
            order = update_order_shipping(parsed_args.order_item_id, changes)
            if order is None:
                raise LookupError(_not_found(parsed_args.order_item_id))  # noqa: TRY301
            _emit(asdict(order))
        elif parsed_args.command == "delete":
            if not delete_order(parsed_args.order_item_id):
                raise LookupError(_not_found(parsed_args.order_item_id))  # noqa: TRY301
            _emit({"deleted": parsed_args.order_item_id})
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Configuration error during %s", parsed_args.command)
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
