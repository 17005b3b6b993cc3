# invoice_api/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Text, Numeric, DateTime,
    ForeignKeyConstraint, UniqueConstraint, CheckConstraint, Index, func,
)

metadata = MetaData()

# Integer columns are INT4 on PostgreSQL
MAX_INT = 2**31 - 1

# Constraint names match PostgreSQL's defaults so the same names come back
# from the driver there and from the probes on SQLite.

customer = Table(
    "customer",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", String(50), nullable=False),
    Column("last_name", String(50), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
)

product = Table(
    "product",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("description", Text),
    Column("price", Numeric(10, 2), nullable=False),
    Column("available_items", Integer, nullable=False, server_default="1"),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("price >= 0", name="product_price_check"),
    CheckConstraint("available_items >= 0", name="product_available_items_check"),
)

invoice = Table(
    "invoice",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_number", String(50), nullable=False),
    Column("invoice_date", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("customer_id", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    UniqueConstraint("invoice_number", name="invoice_invoice_number_key"),
    ForeignKeyConstraint(["customer_id"], ["customer.id"], name="invoice_customer_id_fkey"),
    Index("idx_invoice_date", "invoice_date"),
    Index("idx_invoice_customer_id", "customer_id"),
)

invoice_item = Table(
    "invoice_item",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_id", Integer, nullable=False),
    Column("product_id", Integer, nullable=False),
    Column("count", Integer, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), nullable=False, server_default=func.now()),
    CheckConstraint("count > 0", name="invoice_item_count_check"),
    ForeignKeyConstraint(["invoice_id"], ["invoice.id"], name="invoice_item_invoice_id_fkey"),
    ForeignKeyConstraint(["product_id"], ["product.id"], name="invoice_item_product_id_fkey"),
    UniqueConstraint("invoice_id", "product_id", name="invoice_item_invoice_id_product_id_key"),
    Index("idx_invoice_item_invoice_id", "invoice_id"),
    Index("idx_invoice_item_product_id", "product_id"),
)
