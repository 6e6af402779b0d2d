from __future__ import annotations

from datetime import datetime
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from libs.orders_common.db_factory import create_session_factory
from libs.orders_common.models import Order
from .models import AMOUNT_CONTEXT, AMOUNT_QUANTUM, MAX_AMOUNT, Base, OrderRecord


class SqlOrderStore:
    """
    Order store backed by SQLAlchemy. Every method is its own unit of work:
    the session commits when the block exits cleanly and rolls back otherwise.
    Returned Orders are detached copies, never live ORM rows.
    """

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker[Session]] = None) -> None:
        self.engine = engine
        self._session_factory = session_factory or create_session_factory(engine)

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def insert(self, customer_name: str, amount: Decimal) -> Order:
        now = datetime.now()
        record = OrderRecord(customer_name=customer_name, amount=amount, created_at=now, updated_at=now)
        with self._session_factory.begin() as session:
            session.add(record)
            session.flush()
            session.refresh(record)
            return Order.model_validate(record)

    def find_by_id(self, order_id: int) -> Optional[Order]:
        with self._session_factory() as session:
            record = session.get(OrderRecord, order_id)
            return Order.model_validate(record) if record is not None else None

    def update(self, order: Order) -> Order:
        with self._session_factory.begin() as session:
            record = session.get(OrderRecord, order.id)
            if record is None:
                raise LookupError(f"Order {order.id} does not exist")
            record.customer_name = order.customer_name
            record.amount = order.amount
            record.updated_at = max(datetime.now(), record.created_at)
            session.flush()
            session.refresh(record)
            return Order.model_validate(record)

    def delete_by_id(self, order_id: int) -> bool:
        with self._session_factory.begin() as session:
            result = session.execute(delete(OrderRecord).where(OrderRecord.id == order_id))
            return result.rowcount > 0

    def exists_by_id(self, order_id: int) -> bool:
        with self._session_factory() as session:
            return session.scalar(select(OrderRecord.id).where(OrderRecord.id == order_id)) is not None

    def find_all(self) -> List[Order]:
        return self._select(select(OrderRecord))

    def find_by_name_containing_ignore_case(self, text: str) -> List[Order]:
        return self._select(select(OrderRecord).where(OrderRecord.customer_name.icontains(text, autoescape=True)))

    def find_by_amount_between(self, min_amount: Decimal, max_amount: Decimal) -> List[Order]:
        # Amounts are stored on the 0.01 grid; snap bounds inward to it
        low = max(min_amount, Decimal(0)).quantize(AMOUNT_QUANTUM, rounding=ROUND_CEILING, context=AMOUNT_CONTEXT)
        high = min(max_amount, MAX_AMOUNT).quantize(AMOUNT_QUANTUM, rounding=ROUND_FLOOR, context=AMOUNT_CONTEXT)
        if low > high:
            return []
        return self._select(select(OrderRecord).where(OrderRecord.amount.between(low, high)))

    def _select(self, stmt) -> List[Order]:
        with self._session_factory() as session:
            records = session.scalars(stmt.order_by(OrderRecord.id)).all()
            return [Order.model_validate(r) for r in records]
