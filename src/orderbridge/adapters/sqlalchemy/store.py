"""SQLAlchemy-backed order store."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.orm import Session, sessionmaker

from orderbridge.config.storage import get_database_config
from orderbridge.domain.model import CanonicalOrder
from orderbridge.domain.ports.persistence import BatchInsertResult, OrderStore

from .tables import create_all_tables, order_table

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.engine import Engine, RowMapping

    from orderbridge.domain.model import OrderChanges

log = getLogger(__name__)

_ORDER_FIELDS = tuple(item.name for item in fields(CanonicalOrder))


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy store is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call orderbridge.adapters.sqlalchemy."
                "startup() before creating an order store."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, tables, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if engine is None:
        config = get_database_config()
        engine = create_engine(database_uri or config.uri, echo=config.echo)
    create_all_tables(engine)
    _STATE.engine = engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def _order_from_row(row: RowMapping) -> CanonicalOrder:
    return CanonicalOrder(**{name: row[name] for name in _ORDER_FIELDS})


class SqlAlchemyOrderStore:
    """Order store over the ``orders`` table; one transaction per call."""

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self.session_factory = session_factory or _STATE.session_factory

    def lookup_by_item_id(self, order_item_id: str) -> CanonicalOrder | None:
        stmt = select(order_table).where(order_table.c.order_item_id == order_item_id)
        with self.session_factory() as session:
            row = session.execute(stmt).mappings().one_or_none()
        return _order_from_row(row) if row is not None else None

    def batch_insert(self, candidates: Sequence[CanonicalOrder]) -> BatchInsertResult:
        result = BatchInsertResult()
        if not candidates:
            return result

        keys = [candidate.order_item_id for candidate in candidates]
        with self.session_factory.begin() as session:
            existing = set(
                session.execute(
                    select(order_table.c.order_item_id).where(
                        order_table.c.order_item_id.in_(keys)
                    )
                ).scalars()
            )
            rows: list[dict[str, object]] = []
            seen: set[str] = set()
            for candidate in candidates:
                key = candidate.order_item_id
                if key in existing or key in seen:
                    result.rejected_duplicate_ids.append(key)
                    continue
                seen.add(key)
                rows.append(asdict(candidate))
            if rows:
                session.execute(insert(order_table), rows)
            result.inserted_count = len(rows)

        log.debug(
            "Inserted %s orders, rejected %s duplicates",
            result.inserted_count,
            len(result.rejected_duplicate_ids),
        )
        return result

    def list_all(self) -> list[CanonicalOrder]:
        stmt = select(order_table).order_by(order_table.c.purchase_date.desc())
        with self.session_factory() as session:
            rows = session.execute(stmt).mappings().all()
        return [_order_from_row(row) for row in rows]

    def update(self, order_item_id: str, changes: OrderChanges) -> CanonicalOrder | None:
        values: Mapping[str, object] = dict(changes)
        with self.session_factory.begin() as session:
            if values:
                session.execute(
                    update(order_table)
                    .where(order_table.c.order_item_id == order_item_id)
                    .values(**values)
                )
            row = (
                session.execute(
                    select(order_table).where(order_table.c.order_item_id == order_item_id)
                )
                .mappings()
                .one_or_none()
            )
        return _order_from_row(row) if row is not None else None

    def delete(self, order_item_id: str) -> bool:
        with self.session_factory.begin() as session:
            result = session.execute(
                delete(order_table).where(order_table.c.order_item_id == order_item_id)
            )
        return bool(result.rowcount)


if TYPE_CHECKING:
    _store_check: OrderStore = SqlAlchemyOrderStore()
