# invoice_api/models/products.py

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, field_serializer, field_validator

CENTS = Decimal("0.01")


def fixed_point(value: Decimal) -> str:
    """Money on the wire: a decimal string with two places, never a float."""
    return format(value.quantize(CENTS, rounding=ROUND_HALF_UP), "f")


class ProductIn(BaseModel):
    name: str = ""
    description: Optional[str] = None
    price: Optional[str] = None
    available_items: int = 0

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value):
        # accept bare JSON numbers as well as strings
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("name", mode="before")
    @classmethod
    def null_name(cls, value):
        return "" if value is None else value

    @field_validator("available_items", mode="before")
    @classmethod
    def null_stock(cls, value):
        return 0 if value is None else value


class ProductOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    available_items: int

    class Config:
        from_attributes = True

    @field_serializer("price")
    def serialize_price(self, value: Decimal) -> str:
        return fixed_point(value)
