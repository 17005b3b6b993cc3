# invoice_api/models/customers.py

from pydantic import BaseModel, field_validator


class CustomerIn(BaseModel):
    first_name: str = ""
    last_name: str = ""

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def null_as_empty(cls, value):
        return "" if value is None else value


class CustomerOut(BaseModel):
    id: int
    first_name: str
    last_name: str

    class Config:
        from_attributes = True
