"""SQLAlchemy adapter package for orderbridge."""

from __future__ import annotations

from .store import SqlAlchemyOrderStore, StartupError, is_started, shutdown, startup
from .tables import create_all_tables, metadata, order_table

__all__ = [
    "SqlAlchemyOrderStore",
    "StartupError",
    "create_all_tables",
    "is_started",
    "metadata",
    "order_table",
    "shutdown",
    "startup",
]
