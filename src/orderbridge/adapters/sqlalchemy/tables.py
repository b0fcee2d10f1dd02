"""SQLAlchemy table metadata for canonical orders."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from sqlalchemy import Column, Enum, Integer, MetaData, String, Table, TypeDecorator

from orderbridge.domain.model import CustomerType, OrderStatus, Platform

if TYPE_CHECKING:
    from sqlalchemy import Dialect
    from sqlalchemy.engine import Engine

    from orderbridge.domain.model import Amount


class AmountType(TypeDecorator[Decimal | str]):
    """Store amounts as text so unparseable source values survive unchanged."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Amount | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> Amount | None:
        _ = dialect
        if value is None:
            return None
        try:
            return Decimal(value)
        except InvalidOperation:
            return value


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "pk": "pk_%(table_name)s",
    }
)

order_table = Table(
    "orders",
    metadata,
    Column("order_item_id", String, primary_key=True),
    Column("platform", Enum(Platform, native_enum=False), nullable=False),
    Column("purchase_date", String, nullable=False, index=True),
    Column("order_id", String, nullable=False, index=True),
    Column("email", String, nullable=False, default=""),
    Column("phone", String, nullable=False, default=""),
    Column("first_name", String, nullable=False, default=""),
    Column("last_name", String, nullable=False, default=""),
    Column("street", String, nullable=False, default=""),
    Column("contact_person", String, nullable=True),
    Column("city", String, nullable=False, default=""),
    Column("postal_code", String, nullable=False, default=""),
    Column("country", String, nullable=False, default=""),
    Column("sku", String, nullable=False, default=""),
    Column("product_name", String, nullable=False, default=""),
    Column("quantity", Integer, nullable=False, default=1),
    Column("price", AmountType, nullable=True),
    Column("shipping_cost", AmountType, nullable=True),
    Column("customer_type", Enum(CustomerType, native_enum=False), nullable=False),
    Column("shipping_carrier", String, nullable=True),
    Column("tracking_number", String, nullable=True),
    Column("shipping_date", String, nullable=True),
    Column("shipper", String, nullable=True),
    Column("status", Enum(OrderStatus, native_enum=False), nullable=False),
)


def create_all_tables(engine: Engine) -> None:
    metadata.create_all(engine)
