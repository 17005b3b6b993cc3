# invoice_api/api/customers.py

from typing import Any, Dict, List

from invoice_api.api.payloads import check_length, parse_payload
from invoice_api.db import schema
from invoice_api.db.store import Store
from invoice_api.errors import (
    FIRST_NAME_REQUIRED,
    LAST_NAME_REQUIRED,
    ValidationFailed,
    translate_errors,
)
from invoice_api.models.customers import CustomerIn, CustomerOut

NOT_FOUND = "Customer not found"


def _row_to_customer(row) -> CustomerOut:
    return CustomerOut(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
    )


def _customer_values(payload: Any) -> Dict[str, Any]:
    customer = parse_payload(CustomerIn, payload)

    if not customer.first_name.strip():
        raise ValidationFailed(FIRST_NAME_REQUIRED)
    if not customer.last_name.strip():
        raise ValidationFailed(LAST_NAME_REQUIRED)

    return {
        "first_name": check_length(schema.customer.c.first_name, customer.first_name),
        "last_name": check_length(schema.customer.c.last_name, customer.last_name),
    }


def list_customers(store: Store) -> List[CustomerOut]:
    """
    Return the first 100 customers by id.
    """
    with translate_errors(NOT_FOUND):
        rows = store.customers.list()
    return [_row_to_customer(row) for row in rows]


def create_customer(store: Store, payload: Any) -> CustomerOut:
    values = _customer_values(payload)
    with translate_errors(NOT_FOUND):
        row = store.customers.create(values)
    return _row_to_customer(row)


def get_customer(store: Store, customer_id: int) -> CustomerOut:
    with translate_errors(NOT_FOUND):
        row = store.customers.get(customer_id)
    return _row_to_customer(row)


def update_customer(store: Store, customer_id: int, payload: Any) -> CustomerOut:
    values = _customer_values(payload)
    with translate_errors(NOT_FOUND):
        row = store.customers.update(customer_id, values)
    return _row_to_customer(row)


def delete_customer(store: Store, customer_id: int) -> None:
    """
    Remove a customer; refused while any invoice still references it.
    """
    with translate_errors(NOT_FOUND):
        store.customers.delete(customer_id)
