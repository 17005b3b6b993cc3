# invoice_api/api/invoice_items.py

from typing import Any, List

from invoice_api.api.payloads import parse_payload
from invoice_api.db.schema import MAX_INT
from invoice_api.db.store import Store
from invoice_api.errors import (
    COUNT_NOT_POSITIVE,
    COUNT_OUT_OF_RANGE,
    ValidationFailed,
    translate_errors,
)
from invoice_api.models.invoices import InvoiceItemIn, InvoiceItemOut, InvoiceProductOut


def list_invoice_products(store: Store, invoice_id: int) -> List[InvoiceProductOut]:
    """
    Products on an invoice with count and line sum, by product id.

    An invoice without items gives an empty list; a missing invoice is a 404.
    """
    with translate_errors("Invoice not found"):
        rows = store.invoice_items.list_for_invoice(invoice_id)

    return [
        InvoiceProductOut(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            price=row["price"],
            count=row["count"],
            sum=row["sum"],
        )
        for row in rows
    ]


def add_product_to_invoice(
    store: Store, invoice_id: int, product_id: int, payload: Any
) -> InvoiceItemOut:
    """
    Put a product on an invoice. Adding a product that is already there
    replaces its count instead of failing.
    """
    item = parse_payload(InvoiceItemIn, payload)
    if item.count <= 0:
        raise ValidationFailed(COUNT_NOT_POSITIVE)
    if item.count > MAX_INT:
        raise ValidationFailed(COUNT_OUT_OF_RANGE)

    # NoRows cannot happen here; missing invoice/product surface as foreign keys
    with translate_errors("Invoice item not found"):
        row = store.invoice_items.upsert(invoice_id, product_id, item.count)

    return InvoiceItemOut(
        id=row["id"],
        invoice_id=row["invoice_id"],
        product_id=row["product_id"],
        count=row["count"],
    )


def remove_product_from_invoice(store: Store, invoice_id: int, product_id: int) -> None:
    with translate_errors("Provided invoice doesn't contain the specified product"):
        store.invoice_items.remove(invoice_id, product_id)
