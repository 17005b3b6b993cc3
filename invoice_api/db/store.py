# invoice_api/db/store.py
"""
Contracts between the entity handlers and persistence.

Handlers only see the Protocols below. Every operation either returns row
mappings or raises one of the StoreError signals from
invoice_api.db.constraints:

    NoRows               - no row matched the addressed id / pair
    ConstraintViolation  - a write was rejected; carries the constraint name
                           and the violation kind

Store bundles one implementation per resource and is handed to every
handler call, so tests can swap in a fake without touching handler code.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.engine import Engine

from invoice_api.db.constraints import Row
from invoice_api.db.engine import get_engine, ping
from invoice_api.db.queries import InvoiceItemQueries, TableQueries
from invoice_api.db.schema import customer, invoice, product


class ResourceStore(Protocol):
    def list(self) -> List[Row]: ...
    def get(self, row_id: int) -> Row: ...
    def create(self, values: Dict[str, Any]) -> Row: ...
    def update(self, row_id: int, values: Dict[str, Any]) -> Row: ...
    def delete(self, row_id: int) -> None: ...


class InvoiceItemStore(Protocol):
    def list_for_invoice(self, invoice_id: int) -> List[Row]: ...
    def upsert(self, invoice_id: int, product_id: int, count: int) -> Row: ...
    def remove(self, invoice_id: int, product_id: int) -> None: ...


@dataclass
class Store:
    customers: ResourceStore
    products: ResourceStore
    invoices: ResourceStore
    invoice_items: InvoiceItemStore
    engine: Optional[Engine] = None

    @classmethod
    def from_engine(cls, engine: Engine) -> "Store":
        return cls(
            customers=TableQueries(engine, customer),
            products=TableQueries(engine, product),
            invoices=TableQueries(engine, invoice),
            invoice_items=InvoiceItemQueries(engine),
            engine=engine,
        )

    def ping(self) -> bool:
        if self.engine is None:
            return False
        return ping(self.engine)


def get_store() -> Store:
    """FastAPI dependency; tests override it with a store on a throwaway engine."""
    return Store.from_engine(get_engine())
