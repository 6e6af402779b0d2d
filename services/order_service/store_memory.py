from __future__ import annotations

import itertools
import threading
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from libs.orders_common.models import Order


class OrderStoreMemory:
    """Dict-backed order store with the same interface as SqlOrderStore."""

    def __init__(self) -> None:
        self._orders: Dict[int, Order] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def insert(self, customer_name: str, amount: Decimal) -> Order:
        now = datetime.now()
        with self._lock:
            order = Order(id=next(self._ids), customer_name=customer_name, amount=amount,
                          created_at=now, updated_at=now)
            self._orders[order.id] = order
        return order.model_copy()

    def find_by_id(self, order_id: int) -> Optional[Order]:
        order = self._orders.get(order_id)
        return order.model_copy() if order is not None else None

    def update(self, order: Order) -> Order:
        with self._lock:
            current = self._orders.get(order.id)
            if current is None:
                raise LookupError(f"Order {order.id} does not exist")
            updated = current.model_copy(update={
                "customer_name": order.customer_name,
                "amount": order.amount,
                "updated_at": max(datetime.now(), current.created_at),
            })
            self._orders[order.id] = updated
        return updated.model_copy()

    def delete_by_id(self, order_id: int) -> bool:
        with self._lock:
            return self._orders.pop(order_id, None) is not None

    def exists_by_id(self, order_id: int) -> bool:
        return order_id in self._orders

    def find_all(self) -> List[Order]:
        return [o.model_copy() for o in self._snapshot()]

    def find_by_name_containing_ignore_case(self, text: str) -> List[Order]:
        needle = text.casefold()
        return [o.model_copy() for o in self._snapshot() if needle in o.customer_name.casefold()]

    def find_by_amount_between(self, min_amount: Decimal, max_amount: Decimal) -> List[Order]:
        return [o.model_copy() for o in self._snapshot() if min_amount <= o.amount <= max_amount]

    def _snapshot(self) -> List[Order]:
        with self._lock:
            return [self._orders[k] for k in sorted(self._orders)]
