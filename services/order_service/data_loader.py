from __future__ import annotations

from decimal import Decimal
from typing import List, Tuple

from libs.orders_common.logging import get_logger
from .order_service import OrderStore

logger = get_logger(__name__)

SAMPLE_ORDERS: List[Tuple[str, Decimal]] = [
    ("John Doe", Decimal("150.50")),
    ("Jane Smith", Decimal("299.99")),
    ("Bob Johnson", Decimal("75.25")),
    ("Alice Brown", Decimal("450.00")),
    ("Charlie Wilson", Decimal("199.99")),
]


def load_sample_data(store: OrderStore) -> int:
    """Insert the sample orders into an empty store. Returns how many were inserted."""
    if store.find_all():
        logger.info("Store already has orders, skipping sample data")
        return 0

    logger.info("Loading initial data...")
    for customer_name, amount in SAMPLE_ORDERS:
        store.insert(customer_name, amount)
    logger.info("Initial data loaded", count=len(SAMPLE_ORDERS))
    return len(SAMPLE_ORDERS)
