# invoice_api/api/products.py

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from invoice_api.api.payloads import check_length, parse_payload
from invoice_api.db import schema
from invoice_api.db.store import Store
from invoice_api.errors import (
    AVAILABLE_ITEMS_NEGATIVE,
    AVAILABLE_ITEMS_OUT_OF_RANGE,
    PRICE_INVALID,
    PRICE_NEGATIVE,
    PRICE_REQUIRED,
    PRODUCT_NAME_REQUIRED,
    ValidationFailed,
    translate_errors,
)
from invoice_api.models.products import CENTS, ProductIn, ProductOut

NOT_FOUND = "Product not found"

# price is NUMERIC(10, 2)
MAX_PRICE = Decimal("99999999.99")


def _row_to_product(row) -> ProductOut:
    return ProductOut(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        price=row["price"],
        available_items=row["available_items"],
    )


def parse_price(raw: Optional[str]) -> Decimal:
    if raw is None or not raw.strip():
        raise ValidationFailed(PRICE_REQUIRED)

    try:
        price = Decimal(raw.strip()).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationFailed(PRICE_INVALID) from None

    if not price.is_finite():
        raise ValidationFailed(PRICE_INVALID)
    if price < 0:
        raise ValidationFailed(PRICE_NEGATIVE)
    if price > MAX_PRICE:
        raise ValidationFailed(PRICE_INVALID)
    return price


def _product_values(payload: Any) -> Dict[str, Any]:
    product = parse_payload(ProductIn, payload)

    if not product.name.strip():
        raise ValidationFailed(PRODUCT_NAME_REQUIRED)
    price = parse_price(product.price)
    if product.available_items < 0:
        raise ValidationFailed(AVAILABLE_ITEMS_NEGATIVE)
    if product.available_items > schema.MAX_INT:
        raise ValidationFailed(AVAILABLE_ITEMS_OUT_OF_RANGE)

    description = product.description
    if description is not None and not description.strip():
        description = None

    return {
        "name": check_length(schema.product.c.name, product.name),
        "description": description,
        "price": price,
        "available_items": product.available_items,
    }


def list_products(store: Store) -> List[ProductOut]:
    with translate_errors(NOT_FOUND):
        rows = store.products.list()
    return [_row_to_product(row) for row in rows]


def create_product(store: Store, payload: Any) -> ProductOut:
    values = _product_values(payload)
    with translate_errors(NOT_FOUND):
        row = store.products.create(values)
    return _row_to_product(row)


def get_product(store: Store, product_id: int) -> ProductOut:
    with translate_errors(NOT_FOUND):
        row = store.products.get(product_id)
    return _row_to_product(row)


def update_product(store: Store, product_id: int, payload: Any) -> ProductOut:
    """
    Replace every field of a product; an omitted description clears it.
    """
    values = _product_values(payload)
    with translate_errors(NOT_FOUND):
        row = store.products.update(product_id, values)
    return _row_to_product(row)


def delete_product(store: Store, product_id: int) -> None:
    with translate_errors(NOT_FOUND):
        store.products.delete(product_id)
