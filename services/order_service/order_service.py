from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Protocol

from libs.orders_common.logging import get_logger
from libs.orders_common.models import Order, OrderView
from .order_cache import OrderCache

logger = get_logger(__name__)


class ValidationError(ValueError):
    pass


class NotFoundError(LookupError):
    pass


class OrderStore(Protocol):
    def insert(self, customer_name: str, amount: Decimal) -> Order: ...
    def find_by_id(self, order_id: int) -> Optional[Order]: ...
    def update(self, order: Order) -> Order: ...
    def delete_by_id(self, order_id: int) -> bool: ...
    def exists_by_id(self, order_id: int) -> bool: ...
    def find_all(self) -> List[Order]: ...
    def find_by_name_containing_ignore_case(self, text: str) -> List[Order]: ...
    def find_by_amount_between(self, min_amount: Decimal, max_amount: Decimal) -> List[Order]: ...


class OrderService:
    """
    Orchestrates the order store and the per-id cache (cache-aside).

    Single-order reads check the cache first and repopulate it on a miss.
    Create and update write the store, then put the new view in the cache.
    Delete removes from the store, then evicts. List and search queries always
    go to the store and never touch the cache.

    No locking spans the store and the cache: two concurrent updates to the
    same order may leave the cache holding whichever put landed last, even if
    the other write reached the store last. The next eviction or update
    resolves it.

    With cache=None every read is a store read.
    """

    def __init__(self, store: OrderStore, cache: Optional[OrderCache] = None) -> None:
        self.store = store
        self.cache = cache

    @staticmethod
    def _validate(customer_name: Optional[str], amount: Optional[Decimal]) -> None:
        if customer_name is None or not customer_name.strip():
            raise ValidationError("Customer name is required")
        if amount is None:
            raise ValidationError("Amount is required")
        if not amount.is_finite() or amount <= 0:
            raise ValidationError("Amount must be positive")

    def _cache_put(self, view: OrderView) -> None:
        if self.cache is not None:
            self.cache.put(view)

    def create_order(self, customer_name: str, amount: Decimal) -> OrderView:
        self._validate(customer_name, amount)
        logger.info("Creating new order", customer_name=customer_name)

        order = self.store.insert(customer_name, amount)
        view = OrderView.from_order(order)
        self._cache_put(view)

        logger.info("Order created", order_id=view.id)
        return view

    def get_order_by_id(self, order_id: int) -> OrderView:
        if self.cache is not None:
            cached = self.cache.get(order_id)
            if cached is not None:
                logger.info("Order retrieved from cache", order_id=order_id)
                return cached

        logger.info("Order not in cache, fetching from store", order_id=order_id)
        order = self.store.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order not found with ID: {order_id}")

        view = OrderView.from_order(order)
        self._cache_put(view)
        return view

    def get_all_orders(self) -> List[OrderView]:
        logger.info("Fetching all orders")
        return [OrderView.from_order(o) for o in self.store.find_all()]

    def search_by_customer_name(self, customer_name: str) -> List[OrderView]:
        logger.info("Searching orders by customer name", customer_name=customer_name)
        return [OrderView.from_order(o) for o in self.store.find_by_name_containing_ignore_case(customer_name)]

    def search_by_amount_range(self, min_amount: Optional[Decimal], max_amount: Optional[Decimal]) -> List[OrderView]:
        logger.info("Searching orders by amount", min_amount=str(min_amount), max_amount=str(max_amount))
        if min_amount is None or max_amount is None:
            raise ValidationError("Both minAmount and maxAmount must be provided")
        if min_amount > max_amount:
            raise ValidationError("minAmount cannot be greater than maxAmount")
        return [OrderView.from_order(o) for o in self.store.find_by_amount_between(min_amount, max_amount)]

    def update_order(self, order_id: int, customer_name: str, amount: Decimal) -> OrderView:
        self._validate(customer_name, amount)
        logger.info("Updating order", order_id=order_id)

        order = self.store.find_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order not found with ID: {order_id}")

        order.customer_name = customer_name
        order.amount = amount
        try:
            stored = self.store.update(order)
        except LookupError as e:
            # Deleted by a concurrent request after the lookup above
            raise NotFoundError(f"Order not found with ID: {order_id}") from e
        view = OrderView.from_order(stored)
        # The cache must never be left stale after a successful update
        self._cache_put(view)

        logger.info("Order updated", order_id=order_id)
        return view

    def delete_order(self, order_id: int) -> None:
        logger.info("Deleting order", order_id=order_id)
        if not self.store.exists_by_id(order_id):
            raise NotFoundError(f"Order not found with ID: {order_id}")

        self.store.delete_by_id(order_id)
        if self.cache is not None:
            self.cache.evict(order_id)
        logger.info("Order deleted and removed from cache", order_id=order_id)

    def evict_order(self, order_id: int) -> None:
        if self.cache is not None:
            self.cache.evict(order_id)
        logger.info("Order evicted from cache", order_id=order_id)

    def evict_all_orders(self) -> None:
        if self.cache is not None:
            self.cache.evict_all()
        logger.info("All orders evicted from cache")
