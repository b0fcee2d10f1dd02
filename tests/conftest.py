from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from orderbridge.adapters.memory import InMemoryOrderStore
from orderbridge.adapters.sqlalchemy import SqlAlchemyOrderStore, shutdown, startup
from orderbridge.adapters.sqlalchemy.tables import create_all_tables

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def memory_store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:")
    create_all_tables(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_store(sqlite_engine: Engine) -> Iterator[SqlAlchemyOrderStore]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield SqlAlchemyOrderStore()
    finally:
        shutdown()
