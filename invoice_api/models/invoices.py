# invoice_api/models/invoices.py

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_serializer, field_validator

from invoice_api.models.products import fixed_point


def as_utc(value: datetime) -> datetime:
    # naive timestamps are stored and read back as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class InvoiceIn(BaseModel):
    invoice_number: str = ""
    invoice_date: Optional[datetime] = None
    customer_id: int = 0

    @field_validator("invoice_number", mode="before")
    @classmethod
    def null_number(cls, value):
        return "" if value is None else value

    @field_validator("customer_id", mode="before")
    @classmethod
    def null_customer(cls, value):
        return 0 if value is None else value


class InvoiceOut(BaseModel):
    id: int
    invoice_number: str
    invoice_date: datetime
    customer_id: int

    class Config:
        from_attributes = True

    @field_validator("invoice_date")
    @classmethod
    def invoice_date_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class InvoiceItemIn(BaseModel):
    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def null_count(cls, value):
        return 0 if value is None else value


class InvoiceItemOut(BaseModel):
    id: int
    invoice_id: int
    product_id: int
    count: int


class InvoiceProductOut(BaseModel):
    """One product line of an invoice, with price x count."""

    id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    count: int
    sum: Decimal

    @field_serializer("price", "sum")
    def serialize_money(self, value: Decimal) -> str:
        return fixed_point(value)
