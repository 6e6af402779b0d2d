import os

# Any SQLAlchemy URL, or "memory" for the process-local dict store
DATABASE_URL = os.getenv("ORDERS_DATABASE_URL", "sqlite:///./orders.db")

# "memory", "redis" or "none"
CACHE_BACKEND = os.getenv("ORDERS_CACHE_BACKEND", "memory").lower()
REDIS_URL = os.getenv("ORDERS_REDIS_URL", "redis://localhost:6379/0")
CACHE_KEY_PREFIX = os.getenv("ORDERS_CACHE_KEY_PREFIX", "orders:")
CACHE_TTL_SECONDS = int(os.getenv("ORDERS_CACHE_TTL_SECONDS", "0"))

LOG_LEVEL = os.getenv("ORDERS_LOG_LEVEL", "info")
LOG_JSON = os.getenv("ORDERS_LOG_JSON", "true").lower() in ("1", "true", "yes")

SEED_SAMPLE_DATA = os.getenv("ORDERS_SEED_SAMPLE_DATA", "false").lower() in ("1", "true", "yes")
