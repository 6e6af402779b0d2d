from __future__ import annotations

from typing import Optional

from libs.orders_common.config import (
    CACHE_BACKEND,
    CACHE_KEY_PREFIX,
    CACHE_TTL_SECONDS,
    DATABASE_URL,
    REDIS_URL,
)
from libs.orders_common.db_factory import create_engine
from services.order_service.order_cache import InMemoryOrderCache, OrderCache, RedisOrderCache
from services.order_service.order_service import OrderService, OrderStore
from services.order_service.store_memory import OrderStoreMemory
from services.order_service.store_sql import SqlOrderStore


def build_store(url: str = DATABASE_URL) -> OrderStore:
    if url == "memory":
        return OrderStoreMemory()
    return SqlOrderStore(create_engine(url))


def build_cache(backend: str = CACHE_BACKEND) -> Optional[OrderCache]:
    if backend == "none":
        return None
    if backend == "memory":
        return InMemoryOrderCache()
    if backend == "redis":
        return RedisOrderCache.from_url(REDIS_URL, key_prefix=CACHE_KEY_PREFIX, ttl_seconds=CACHE_TTL_SECONDS)
    raise ValueError(f"Unknown cache backend: {backend!r} (expected memory, redis or none)")


order_store = build_store()
order_cache = build_cache()
order_service = OrderService(store=order_store, cache=order_cache)
