from __future__ import annotations

import threading
from typing import Dict, Optional, Protocol

import redis

from libs.orders_common.logging import get_logger
from libs.orders_common.models import OrderView
from libs.orders_common.serdes_json import deserialize_view, serialize_view

logger = get_logger(__name__)


class CacheError(RuntimeError):
    """Raised when the cache backend cannot be written to."""


class OrderCache(Protocol):
    def put(self, view: OrderView) -> None: ...

    def get(self, order_id: int) -> Optional[OrderView]: ...

    def evict(self, order_id: int) -> None: ...

    def evict_all(self) -> None: ...


class InMemoryOrderCache:
    """Process-local cache. Stores and hands out copies so callers can't mutate entries."""

    def __init__(self) -> None:
        self._entries: Dict[int, OrderView] = {}
        self._lock = threading.Lock()

    def put(self, view: OrderView) -> None:
        logger.debug("Caching order", order_id=view.id)
        with self._lock:
            self._entries[view.id] = view.model_copy()

    def get(self, order_id: int) -> Optional[OrderView]:
        with self._lock:
            view = self._entries.get(order_id)
        return view.model_copy() if view is not None else None

    def evict(self, order_id: int) -> None:
        logger.debug("Evicting order from cache", order_id=order_id)
        with self._lock:
            self._entries.pop(order_id, None)

    def evict_all(self) -> None:
        logger.debug("Evicting all orders from cache")
        with self._lock:
            self._entries.clear()


class RedisOrderCache:
    """
    Redis-backed cache. Each entry is the camelCase JSON of an OrderView stored
    under "<prefix><id>". A ttl_seconds of 0 stores entries without expiry.

    A failed read is logged and reported as a miss so lookups fall through to
    the store; failed writes and evictions raise CacheError.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "orders:", ttl_seconds: int = 0) -> None:
        self.client = client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "orders:", ttl_seconds: int = 0) -> "RedisOrderCache":
        client = redis.Redis.from_url(
            url,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        return cls(client, key_prefix=key_prefix, ttl_seconds=ttl_seconds)

    def _key(self, order_id: int) -> str:
        return f"{self.key_prefix}{order_id}"

    def put(self, view: OrderView) -> None:
        try:
            if self.ttl_seconds > 0:
                self.client.setex(self._key(view.id), self.ttl_seconds, serialize_view(view))
            else:
                self.client.set(self._key(view.id), serialize_view(view))
        except redis.RedisError as e:
            raise CacheError(f"Failed to cache order {view.id}: {e}") from e
        logger.debug("Cached order", order_id=view.id, ttl=self.ttl_seconds)

    def get(self, order_id: int) -> Optional[OrderView]:
        try:
            raw = self.client.get(self._key(order_id))
        except redis.RedisError as e:
            logger.warning("Cache read failed, treating as miss", order_id=order_id, error=str(e))
            return None
        if raw is None:
            return None
        try:
            return deserialize_view(raw)
        except ValueError as e:
            logger.warning("Dropping unreadable cache entry", order_id=order_id, error=str(e))
            try:
                self.evict(order_id)
            except CacheError as evict_error:
                logger.warning("Could not drop unreadable cache entry", order_id=order_id, error=str(evict_error))
            return None

    def evict(self, order_id: int) -> None:
        try:
            self.client.delete(self._key(order_id))
        except redis.RedisError as e:
            raise CacheError(f"Failed to evict order {order_id}: {e}") from e
        logger.debug("Evicted order from cache", order_id=order_id)

    def evict_all(self) -> None:
        try:
            keys = list(self.client.scan_iter(match=f"{self.key_prefix}*"))
            if keys:
                self.client.delete(*keys)
        except redis.RedisError as e:
            raise CacheError(f"Failed to evict all orders: {e}") from e
        logger.debug("Evicted all orders from cache", count=len(keys))

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError:
            return False
