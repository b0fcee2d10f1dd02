from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import select
from sqlalchemy.engine import Engine  # noqa: TC002

from orderbridge.adapters.sqlalchemy import (
    SqlAlchemyOrderStore,
    StartupError,
    is_started,
    order_table,
    shutdown,
    startup,
)
from orderbridge.domain.model import OrderStatus, Platform
from tests.helpers.orders import make_order


def test_store_requires_startup() -> None:
    shutdown()

    with pytest.raises(StartupError, match="startup"):
        SqlAlchemyOrderStore()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        assert is_started()
        with pytest.raises(StartupError, match="force=True"):
            startup(engine=sqlite_engine)
    finally:
        shutdown()
    assert not is_started()


def test_amounts_are_stored_as_text(
    sqlite_store: SqlAlchemyOrderStore, sqlite_engine: Engine
) -> None:
    sqlite_store.batch_insert(
        [make_order("I-1", price=Decimal("1234.50"), shipping_cost="auf Anfrage")]
    )

    with sqlite_engine.connect() as connection:
        raw = connection.exec_driver_sql(
            "SELECT price, shipping_cost FROM orders WHERE order_item_id = 'I-1'"
        ).one()
    assert tuple(raw) == ("1234.50", "auf Anfrage")

    order = sqlite_store.lookup_by_item_id("I-1")
    assert order is not None
    assert order.price == Decimal("1234.50")
    assert order.shipping_cost == "auf Anfrage"


def test_enums_are_loaded_as_domain_values(
    sqlite_store: SqlAlchemyOrderStore, sqlite_engine: Engine
) -> None:
    sqlite_store.batch_insert([make_order("I-1")])

    with sqlite_engine.connect() as connection:
        row = connection.execute(select(order_table.c.platform, order_table.c.status)).one()

    assert row.platform is Platform.AMAZON
    assert row.status is OrderStatus.OPEN
