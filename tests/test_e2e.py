"""
End-to-End tests - requires a running order service, e.g.:
    ORDERS_CACHE_BACKEND=redis uvicorn services.order_service.app.main:app --port 8001

Run with: ORDERS_SERVICE_URL=http://localhost:8001 pytest tests/test_e2e.py -v -s
"""
import os
import time
from decimal import Decimal

import pytest
import requests

ORDER_SERVICE_URL = os.getenv("ORDERS_SERVICE_URL")

pytestmark = pytest.mark.skipif(not ORDER_SERVICE_URL, reason="ORDERS_SERVICE_URL not set")


@pytest.fixture
def unique_name():
    """Generate unique customer name for each test."""
    return f"E2E Customer {int(time.time() * 1000)}"


def create_order(name: str, amount: str) -> dict:
    response = requests.post(f"{ORDER_SERVICE_URL}/orders", json={"customerName": name, "amount": amount})
    assert response.status_code == 201
    return response.json()


class TestE2EOrderFlow:
    """End-to-end tests for the full order lifecycle."""

    def test_create_get_delete(self, unique_name):
        """Test: Create order → Get (cache) → Delete → 404."""
        created = create_order(unique_name, "150.50")
        print(f"\n✅ Order created: {created['id']}")

        response = requests.get(f"{ORDER_SERVICE_URL}/orders/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

        response = requests.delete(f"{ORDER_SERVICE_URL}/orders/{created['id']}")
        assert response.status_code == 204
        print(f"✅ Order deleted: {created['id']}")

        response = requests.get(f"{ORDER_SERVICE_URL}/orders/{created['id']}")
        assert response.status_code == 404

    def test_update_then_read_after_eviction(self, unique_name):
        """Test: Create → Update → Evict all → Get falls through to store."""
        created = create_order(unique_name, "10.00")

        response = requests.put(
            f"{ORDER_SERVICE_URL}/orders/{created['id']}",
            json={"customerName": unique_name, "amount": "20.00"},
        )
        assert response.status_code == 200
        updated = response.json()

        response = requests.post(f"{ORDER_SERVICE_URL}/orders/cache/evict/all")
        assert response.status_code == 200

        response = requests.get(f"{ORDER_SERVICE_URL}/orders/{created['id']}")
        assert response.status_code == 200
        assert Decimal(response.json()["amount"]) == Decimal("20.00")
        assert response.json() == updated
        print(f"✅ Order read back from store after eviction: {updated['id']}")

    def test_search_by_customer(self, unique_name):
        """Test: Create → Search by lower-cased substring."""
        created = create_order(unique_name, "5.00")

        response = requests.get(
            f"{ORDER_SERVICE_URL}/orders/search/customer",
            params={"customerName": unique_name.lower()},
        )
        assert response.status_code == 200
        assert created["id"] in [o["id"] for o in response.json()]

    def test_invalid_amount_range_returns_400(self):
        """Test: minAmount > maxAmount returns 400."""
        response = requests.get(
            f"{ORDER_SERVICE_URL}/orders/search/amount",
            params={"minAmount": "10", "maxAmount": "1"},
        )
        assert response.status_code == 400

    def test_get_nonexistent_order_returns_404(self):
        """Test: Get non-existent order returns 404."""
        response = requests.get(f"{ORDER_SERVICE_URL}/orders/999999999")
        assert response.status_code == 404
