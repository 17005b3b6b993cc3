# invoice_api/db/queries.py

from typing import Any, Dict, List

from sqlalchemy import Numeric, Table, and_, cast, delete, func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError

from invoice_api.db.constraints import (
    LIST_LIMIT,
    NoRows,
    Row,
    identify_delete_violation,
    identify_write_violation,
)
from invoice_api.db.schema import invoice, invoice_item, product

TIMESTAMP_COLUMNS = ("created_at", "updated_at")


class TableQueries:
    """
    List/get/create/update/delete for one table addressed by its ``id``.

    Every mutation is a single statement in its own transaction; existence
    is read back from RETURNING instead of a separate lookup.
    """

    def __init__(self, engine: Engine, table: Table):
        self.engine = engine
        self.table = table
        self.columns = [c for c in table.c if c.name not in TIMESTAMP_COLUMNS]

    def list(self) -> List[Row]:
        stmt = select(*self.columns).order_by(self.table.c.id).limit(LIST_LIMIT)

        with self.engine.connect() as conn:
            return conn.execute(stmt).mappings().all()

    def get(self, row_id: int) -> Row:
        stmt = select(*self.columns).where(self.table.c.id == row_id)

        with self.engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()

        if row is None:
            raise NoRows(f"{self.table.name} {row_id}")
        return row

    def create(self, values: Dict[str, Any]) -> Row:
        stmt = insert(self.table).values(**values).returning(*self.columns)

        with self.engine.begin() as conn:
            try:
                return conn.execute(stmt).mappings().one()
            except IntegrityError as e:
                raise identify_write_violation(conn, e, self.table, values) from e

    def update(self, row_id: int, values: Dict[str, Any]) -> Row:
        stmt = (
            update(self.table)
            .where(self.table.c.id == row_id)
            .values(**values, updated_at=func.now())
            .returning(*self.columns)
        )

        with self.engine.begin() as conn:
            try:
                row = conn.execute(stmt).mappings().first()
            except IntegrityError as e:
                raise identify_write_violation(conn, e, self.table, values, row_id=row_id) from e

        if row is None:
            raise NoRows(f"{self.table.name} {row_id}")
        return row

    def delete(self, row_id: int) -> None:
        stmt = delete(self.table).where(self.table.c.id == row_id).returning(self.table.c.id)

        with self.engine.begin() as conn:
            try:
                deleted = conn.execute(stmt).first()
            except IntegrityError as e:
                raise identify_delete_violation(conn, e, self.table, row_id) from e

        if deleted is None:
            raise NoRows(f"{self.table.name} {row_id}")


def _upsert_insert(conn: Connection):
    # ON CONFLICT lives in the dialect-specific insert constructs
    if conn.dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


class InvoiceItemQueries:
    """Line items of an invoice, keyed by the (invoice_id, product_id) pair."""

    item_columns = (
        invoice_item.c.id,
        invoice_item.c.invoice_id,
        invoice_item.c.product_id,
        invoice_item.c.count,
    )

    def __init__(self, engine: Engine):
        self.engine = engine

    def list_for_invoice(self, invoice_id: int) -> List[Row]:
        """
        Products on the invoice with their line sum, by product id.

        Driven from the invoice table with outer joins, so a missing invoice
        yields no rows at all while an invoice without items yields one row
        of NULLs.
        """
        stmt = (
            select(
                product.c.id,
                product.c.name,
                product.c.description,
                product.c.price,
                invoice_item.c.count,
                cast(product.c.price * invoice_item.c.count, Numeric(10, 2)).label("sum"),
            )
            .select_from(
                invoice.outerjoin(invoice_item, invoice_item.c.invoice_id == invoice.c.id)
                .outerjoin(product, product.c.id == invoice_item.c.product_id)
            )
            .where(invoice.c.id == invoice_id)
            .order_by(product.c.id)
            .limit(LIST_LIMIT)
        )

        with self.engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()

        if not rows:
            raise NoRows(f"invoice {invoice_id}")
        return [row for row in rows if row["id"] is not None]

    def upsert(self, invoice_id: int, product_id: int, count: int) -> Row:
        values = {"invoice_id": invoice_id, "product_id": product_id, "count": count}

        with self.engine.begin() as conn:
            stmt = _upsert_insert(conn)(invoice_item).values(**values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[invoice_item.c.invoice_id, invoice_item.c.product_id],
                set_={"count": stmt.excluded.count, "updated_at": func.now()},
            ).returning(*self.item_columns)

            try:
                return conn.execute(stmt).mappings().one()
            except IntegrityError as e:
                raise identify_write_violation(conn, e, invoice_item, values) from e

    def remove(self, invoice_id: int, product_id: int) -> None:
        stmt = (
            delete(invoice_item)
            .where(
                and_(
                    invoice_item.c.invoice_id == invoice_id,
                    invoice_item.c.product_id == product_id,
                )
            )
            .returning(invoice_item.c.id)
        )

        with self.engine.begin() as conn:
            deleted = conn.execute(stmt).first()

        if deleted is None:
            raise NoRows(f"invoice {invoice_id} product {product_id}")
