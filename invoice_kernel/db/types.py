"""
Module: invoice_kernel.db.types
Responsibility: Column types that carry Money and Rate value objects in and
    out of the store.  These are the explicit serialize / deserialize boundary
    between the domain and the database; nothing else converts between a
    value object and a column value.
Architecture position: Kernel > DB.  May be imported by models/.  Imports
    the value objects from domain/values.py and nothing else from the kernel.

Invariants enforced:
    - Money columns are NUMERIC(15, 2), Rate columns NUMERIC(5, 4).  Values
      are rounded by the value objects before binding, so the database never
      rounds on its own.
    - Reading a column always yields a value object, never a raw Decimal.
    - On SQLite, which has no exact decimal storage, the canonical string
      rendering is stored instead so no binary float is involved.

Failure modes:
    - InvalidAmountError if a bound Python value is not convertible.
    - DataError from the driver if a value exceeds the column precision.
"""

from sqlalchemy import Numeric, String
from sqlalchemy.types import TypeDecorator

from invoice_kernel.domain.values import Money, Rate

MONEY_PRECISION = 15
RATE_PRECISION = 5


class MoneyType(TypeDecorator):
    """Money <-> NUMERIC(15, 2)."""

    impl = Numeric(MONEY_PRECISION, 2)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(MONEY_PRECISION + 2))
        return dialect.type_descriptor(Numeric(MONEY_PRECISION, 2, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        money = Money.of(value)
        if dialect.name == "sqlite":
            return str(money)
        return money.amount

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            # Driver without decimal support; repr keeps the shortest exact form
            value = repr(value)
        return Money.of(value)


class RateType(TypeDecorator):
    """Rate <-> NUMERIC(5, 4)."""

    impl = Numeric(RATE_PRECISION, 4)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(RATE_PRECISION + 3))
        return dialect.type_descriptor(Numeric(RATE_PRECISION, 4, asdecimal=True))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        rate = Rate.of(value)
        if dialect.name == "sqlite":
            return str(rate)
        return rate.value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, float):
            value = repr(value)
        return Rate.of(value)
