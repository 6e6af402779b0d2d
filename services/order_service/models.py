from decimal import Context, Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()

AMOUNT_PRECISION = 38
AMOUNT_SCALE = 2
AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_SCALE)
AMOUNT_CONTEXT = Context(prec=AMOUNT_PRECISION + 2)
MAX_AMOUNT = Decimal("9" * (AMOUNT_PRECISION - AMOUNT_SCALE) + "." + "9" * AMOUNT_SCALE)


class ExactAmount(TypeDecorator):
    """
    Fixed-point, non-negative amount. Backends with a native NUMERIC keep it;
    SQLite (which would store a float) gets a zero-padded fixed-width string,
    so values round-trip exactly and string order matches numeric order.
    """

    impl = Numeric(AMOUNT_PRECISION, AMOUNT_SCALE, asdecimal=True)
    cache_ok = True

    _width = AMOUNT_PRECISION + 1

    def load_dialect_impl(self, dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(self._width))
        return dialect.type_descriptor(self.impl)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = Decimal(value).quantize(AMOUNT_QUANTUM, context=AMOUNT_CONTEXT)
        if value < 0 or value > MAX_AMOUNT:
            raise ValueError(f"Amount out of storable range: {value}")
        if dialect.name == "sqlite":
            return format(value, f"0{self._width}.{AMOUNT_SCALE}f")
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).quantize(AMOUNT_QUANTUM, context=AMOUNT_CONTEXT)


class OrderRecord(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(String(255), nullable=False, index=True)
    amount = Column(ExactAmount(), nullable=False)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
