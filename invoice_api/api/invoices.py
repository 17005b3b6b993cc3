# invoice_api/api/invoices.py

from datetime import datetime, timezone
from typing import Any, Dict, List

from invoice_api.api.payloads import check_length, parse_payload
from invoice_api.db import schema
from invoice_api.db.store import Store
from invoice_api.errors import (
    CUSTOMER_ID_NOT_POSITIVE,
    CUSTOMER_ID_OUT_OF_RANGE,
    INVOICE_DATE_INVALID,
    INVOICE_NUMBER_REQUIRED,
    ValidationFailed,
    translate_errors,
)
from invoice_api.models.invoices import InvoiceIn, InvoiceOut, as_utc

NOT_FOUND = "Invoice not found"


def _row_to_invoice(row) -> InvoiceOut:
    return InvoiceOut(
        id=row["id"],
        invoice_number=row["invoice_number"],
        invoice_date=row["invoice_date"],
        customer_id=row["customer_id"],
    )


def _invoice_values(payload: Any) -> Dict[str, Any]:
    invoice = parse_payload(InvoiceIn, payload)

    if not invoice.invoice_number.strip():
        raise ValidationFailed(INVOICE_NUMBER_REQUIRED)
    if invoice.customer_id <= 0:
        raise ValidationFailed(CUSTOMER_ID_NOT_POSITIVE)
    if invoice.customer_id > schema.MAX_INT:
        raise ValidationFailed(CUSTOMER_ID_OUT_OF_RANGE)

    values = {
        "invoice_number": check_length(schema.invoice.c.invoice_number, invoice.invoice_number),
        "customer_id": invoice.customer_id,
    }
    if invoice.invoice_date is not None:
        try:
            values["invoice_date"] = as_utc(invoice.invoice_date)
        except OverflowError:
            # offset pushes the instant outside the datetime range
            raise ValidationFailed(INVOICE_DATE_INVALID) from None
    return values


def list_invoices(store: Store) -> List[InvoiceOut]:
    with translate_errors(NOT_FOUND):
        rows = store.invoices.list()
    return [_row_to_invoice(row) for row in rows]


def create_invoice(store: Store, payload: Any) -> InvoiceOut:
    """
    Create an invoice; invoice_date defaults to the current time.

    A duplicate invoice_number is a 409, an unknown customer a 400.
    """
    values = _invoice_values(payload)
    values.setdefault("invoice_date", datetime.now(timezone.utc))

    with translate_errors(NOT_FOUND):
        row = store.invoices.create(values)
    return _row_to_invoice(row)


def get_invoice(store: Store, invoice_id: int) -> InvoiceOut:
    with translate_errors(NOT_FOUND):
        row = store.invoices.get(invoice_id)
    return _row_to_invoice(row)


def update_invoice(store: Store, invoice_id: int, payload: Any) -> InvoiceOut:
    """
    Update an invoice by id. Without an invoice_date the stored one is kept.
    """
    values = _invoice_values(payload)
    with translate_errors(NOT_FOUND):
        row = store.invoices.update(invoice_id, values)
    return _row_to_invoice(row)


def delete_invoice(store: Store, invoice_id: int) -> None:
    with translate_errors(NOT_FOUND):
        store.invoices.delete(invoice_id)
