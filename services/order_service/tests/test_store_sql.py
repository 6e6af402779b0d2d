from decimal import Decimal

import pytest

from libs.orders_common.db_factory import create_engine
from libs.orders_common.models import Order
from services.order_service.store_sql import SqlOrderStore


def make_store():
    store = SqlOrderStore(create_engine("sqlite://"))
    store.create_schema()
    return store


def test_insert_assigns_id_and_timestamps():
    store = make_store()

    order = store.insert("John Doe", Decimal("150.50"))

    assert order.id == 1
    assert order.amount == Decimal("150.50")
    assert order.created_at == order.updated_at
    assert store.find_by_id(1) == order
    assert store.exists_by_id(1)


def test_find_missing_returns_none():
    store = make_store()
    assert store.find_by_id(99) is None
    assert not store.exists_by_id(99)
    assert store.delete_by_id(99) is False


def test_update_overwrites_fields_and_keeps_created():
    store = make_store()
    order = store.insert("John Doe", Decimal("150.50"))

    order.customer_name = "Johnny"
    order.amount = Decimal("10.00")
    updated = store.update(order)

    assert updated.customer_name == "Johnny"
    assert updated.amount == Decimal("10.00")
    assert updated.created_at == order.created_at
    assert updated.updated_at >= updated.created_at
    assert store.find_by_id(order.id) == updated


def test_update_missing_raises():
    store = make_store()
    order = store.insert("John Doe", Decimal("150.50"))
    store.delete_by_id(order.id)

    with pytest.raises(LookupError):
        store.update(order)


def test_returned_orders_are_detached():
    store = make_store()
    order = store.insert("John Doe", Decimal("150.50"))

    order.customer_name = "Changed"

    assert store.find_by_id(order.id).customer_name == "John Doe"


def test_name_search_is_case_insensitive_substring():
    store = make_store()
    store.insert("Jane Smith", Decimal("299.99"))
    store.insert("Jane Doe", Decimal("20.00"))
    store.insert("Bob Johnson", Decimal("75.25"))
    store.insert("100%_match", Decimal("1.00"))

    assert [o.customer_name for o in store.find_by_name_containing_ignore_case("jane")] == ["Jane Smith", "Jane Doe"]
    assert [o.customer_name for o in store.find_by_name_containing_ignore_case("JOHN")] == ["Bob Johnson"]
    assert [o.customer_name for o in store.find_by_name_containing_ignore_case("%_")] == ["100%_match"]


def test_amount_between_is_inclusive():
    store = make_store()
    store.insert("A", Decimal("75.25"))
    store.insert("B", Decimal("150.50"))
    store.insert("C", Decimal("299.99"))

    names = [o.customer_name for o in store.find_by_amount_between(Decimal("75.25"), Decimal("150.50"))]
    assert names == ["A", "B"]
    assert [o.customer_name for o in store.find_by_amount_between(Decimal("150.50"), Decimal("150.50"))] == ["B"]
    assert store.find_by_amount_between(Decimal("300"), Decimal("400")) == []


def test_find_all_and_delete():
    store = make_store()
    a = store.insert("A", Decimal("1.00"))
    b = store.insert("B", Decimal("2.00"))

    assert [o.id for o in store.find_all()] == [a.id, b.id]
    assert store.delete_by_id(a.id) is True
    assert [o.id for o in store.find_all()] == [b.id]
    assert isinstance(store.find_all()[0], Order)


def test_large_amounts_round_trip_exactly():
    store = make_store()
    big = Decimal("12345678901234567.89")
    widest = Decimal("9" * 36 + ".99")

    a = store.insert("Big", big)
    b = store.insert("Widest", widest)

    assert store.find_by_id(a.id).amount == big
    assert str(store.find_by_id(a.id).amount) == "12345678901234567.89"
    assert store.find_by_id(b.id).amount == widest


def test_amount_between_is_exact_beyond_float_precision():
    store = make_store()
    store.insert("A", Decimal("10000000000000000.01"))
    store.insert("B", Decimal("10000000000000000.02"))
    store.insert("C", Decimal("9.99"))

    exact = store.find_by_amount_between(Decimal("10000000000000000.01"), Decimal("10000000000000000.01"))
    assert [o.customer_name for o in exact] == ["A"]

    # string storage must still order numerically, not lexically
    assert [o.customer_name for o in store.find_by_amount_between(Decimal("5"), Decimal("10"))] == ["C"]
    assert [o.customer_name for o in store.find_by_amount_between(Decimal("10"), Decimal("1E+17"))] == ["A", "B"]


def test_amount_between_with_off_grid_bounds():
    store = make_store()
    store.insert("A", Decimal("0.10"))
    store.insert("B", Decimal("0.11"))

    assert [o.customer_name for o in store.find_by_amount_between(Decimal("0.101"), Decimal("0.119"))] == ["B"]
    assert store.find_by_amount_between(Decimal("0.101"), Decimal("0.109")) == []
    assert [o.customer_name for o in store.find_by_amount_between(Decimal("-5"), Decimal("1E+50"))] == ["A", "B"]
