"""SQLAlchemy store: single-statement mutations and constraint identification on SQLite."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from invoice_api.db.constraints import (
    CHECK,
    FOREIGN_KEY,
    RESTRICT,
    UNIQUE,
    ConstraintViolation,
    NoRows,
)


def _customer(store):
    return store.customers.create({"first_name": "Ada", "last_name": "Lovelace"})


def _product(store, price="10.50"):
    return store.products.create(
        {"name": "Cable", "description": None, "price": Decimal(price), "available_items": 3}
    )


def _invoice(store, customer_id, number="INV-1"):
    return store.invoices.create(
        {
            "invoice_number": number,
            "customer_id": customer_id,
            "invoice_date": datetime(2024, 5, 1, tzinfo=timezone.utc),
        }
    )


def test_create_assigns_increasing_ids(store):
    first = _customer(store)
    second = _customer(store)
    assert first["id"] > 0
    assert second["id"] > first["id"]


def test_get_missing_row_raises_no_rows(store):
    with pytest.raises(NoRows):
        store.customers.get(42)


def test_update_missing_row_raises_no_rows(store):
    with pytest.raises(NoRows):
        store.customers.update(42, {"first_name": "A", "last_name": "B"})


def test_delete_missing_row_raises_no_rows(store):
    with pytest.raises(NoRows):
        store.products.delete(42)


def test_list_is_ordered_and_capped(store):
    for _ in range(105):
        _customer(store)
    rows = store.customers.list()
    assert len(rows) == 100
    assert [r["id"] for r in rows] == sorted(r["id"] for r in rows)
    assert rows[0]["id"] == 1


def test_negative_price_names_the_price_check(store):
    with pytest.raises(ConstraintViolation) as exc_info:
        _product(store, price="-1")
    assert exc_info.value.constraint == "product_price_check"
    assert exc_info.value.kind == CHECK


def test_negative_stock_names_the_available_items_check(store):
    with pytest.raises(ConstraintViolation) as exc_info:
        store.products.create(
            {"name": "Cable", "description": None, "price": Decimal("1"), "available_items": -1}
        )
    assert exc_info.value.constraint == "product_available_items_check"


def test_missing_customer_names_the_customer_foreign_key(store):
    with pytest.raises(ConstraintViolation) as exc_info:
        _invoice(store, customer_id=99)
    assert exc_info.value.constraint == "invoice_customer_id_fkey"
    assert exc_info.value.kind == FOREIGN_KEY


def test_duplicate_invoice_number_names_the_unique_key(store):
    customer = _customer(store)
    _invoice(store, customer["id"])
    with pytest.raises(ConstraintViolation) as exc_info:
        _invoice(store, customer["id"])
    assert exc_info.value.constraint == "invoice_invoice_number_key"
    assert exc_info.value.kind == UNIQUE
    assert len(store.invoices.list()) == 1


def test_update_to_own_invoice_number_is_allowed(store):
    customer = _customer(store)
    created = _invoice(store, customer["id"])
    updated = store.invoices.update(
        created["id"], {"invoice_number": "INV-1", "customer_id": customer["id"]}
    )
    assert updated["invoice_number"] == "INV-1"


def test_update_to_other_invoice_number_is_a_unique_violation(store):
    customer = _customer(store)
    _invoice(store, customer["id"], number="INV-1")
    second = _invoice(store, customer["id"], number="INV-2")
    with pytest.raises(ConstraintViolation) as exc_info:
        store.invoices.update(second["id"], {"invoice_number": "INV-1", "customer_id": customer["id"]})
    assert exc_info.value.constraint == "invoice_invoice_number_key"


def test_delete_referenced_customer_is_restricted(store):
    customer = _customer(store)
    _invoice(store, customer["id"])
    with pytest.raises(ConstraintViolation) as exc_info:
        store.customers.delete(customer["id"])
    assert exc_info.value.constraint == "invoice_customer_id_fkey"
    assert exc_info.value.kind == RESTRICT
    assert store.customers.get(customer["id"])["id"] == customer["id"]


def test_upsert_missing_product_names_the_product_foreign_key(store):
    customer = _customer(store)
    invoice = _invoice(store, customer["id"])
    with pytest.raises(ConstraintViolation) as exc_info:
        store.invoice_items.upsert(invoice["id"], 77, 5)
    assert exc_info.value.constraint == "invoice_item_product_id_fkey"


def test_upsert_missing_invoice_names_the_invoice_foreign_key(store):
    product = _product(store)
    with pytest.raises(ConstraintViolation) as exc_info:
        store.invoice_items.upsert(77, product["id"], 5)
    assert exc_info.value.constraint == "invoice_item_invoice_id_fkey"


def test_upsert_zero_count_names_the_count_check(store):
    customer = _customer(store)
    invoice = _invoice(store, customer["id"])
    product = _product(store)
    with pytest.raises(ConstraintViolation) as exc_info:
        store.invoice_items.upsert(invoice["id"], product["id"], 0)
    assert exc_info.value.constraint == "invoice_item_count_check"


def test_upsert_replaces_count_in_place(store):
    customer = _customer(store)
    invoice = _invoice(store, customer["id"])
    product = _product(store)

    first = store.invoice_items.upsert(invoice["id"], product["id"], 5)
    second = store.invoice_items.upsert(invoice["id"], product["id"], 3)

    assert second["id"] == first["id"]
    assert second["count"] == 3
    rows = store.invoice_items.list_for_invoice(invoice["id"])
    assert len(rows) == 1
    assert rows[0]["count"] == 3


def test_list_for_invoice_computes_line_sum(store):
    customer = _customer(store)
    invoice = _invoice(store, customer["id"])
    product = _product(store, price="10.50")
    store.invoice_items.upsert(invoice["id"], product["id"], 3)

    [row] = store.invoice_items.list_for_invoice(invoice["id"])
    assert row["id"] == product["id"]
    assert row["sum"] == Decimal("31.50")


def test_list_for_invoice_distinguishes_empty_from_missing(store):
    customer = _customer(store)
    invoice = _invoice(store, customer["id"])

    assert store.invoice_items.list_for_invoice(invoice["id"]) == []
    with pytest.raises(NoRows):
        store.invoice_items.list_for_invoice(invoice["id"] + 1)


def test_remove_missing_pair_raises_no_rows(store):
    with pytest.raises(NoRows):
        store.invoice_items.remove(1, 1)
