# invoice_api/db/constraints.py
"""
Store-side failure signals, and identification of the constraint behind an
IntegrityError.

PostgreSQL drivers report the violated constraint directly
(``exc.orig.diag.constraint_name``). SQLite does not, so on SQLite the
candidate constraints declared in the schema are probed inside the same
transaction, right after the failing statement:

    CHECK        evaluate the constraint expression against the written values
    FOREIGN KEY  look for the referenced row
    UNIQUE       look for another row holding the same values
    RESTRICT     (deletes) look for rows referencing the deleted one

The error message text is never inspected.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import (
    CheckConstraint, ForeignKeyConstraint, Table, UniqueConstraint,
    and_, literal, literal_column, select,
)
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from invoice_api.db.schema import metadata

LIST_LIMIT = 100

# Violation kinds
UNIQUE = "unique"
FOREIGN_KEY = "foreign_key"  # written row references a missing row
CHECK = "check"
RESTRICT = "restrict"  # deleted row is still referenced elsewhere

Row = Mapping[str, Any]


class StoreError(Exception):
    pass


class NoRows(StoreError):
    pass


class ConstraintViolation(StoreError):
    def __init__(self, constraint: Optional[str], kind: Optional[str]):
        super().__init__(
            f"{kind or 'unidentified'} violation on {constraint or 'unknown constraint'}"
        )
        self.constraint = constraint
        self.kind = kind


def _kind_of(constraint) -> Optional[str]:
    if isinstance(constraint, CheckConstraint):
        return CHECK
    if isinstance(constraint, ForeignKeyConstraint):
        return FOREIGN_KEY
    if isinstance(constraint, UniqueConstraint):
        return UNIQUE
    return None


CONSTRAINT_KINDS: Dict[str, str] = {
    c.name: _kind_of(c)
    for t in metadata.sorted_tables
    for c in t.constraints
    if c.name and _kind_of(c)
}


def _named(constraints) -> list:
    # constraint collections are sets; probe in a stable order
    return sorted((c for c in constraints if c.name), key=lambda c: c.name)


def referencing_keys(table: Table) -> List[ForeignKeyConstraint]:
    """Foreign keys on other tables that point at ``table``."""
    return _named(
        fk
        for t in metadata.sorted_tables
        for fk in t.foreign_key_constraints
        if fk.referred_table is table
    )


def driver_constraint_name(exc: IntegrityError) -> Optional[str]:
    diag = getattr(exc.orig, "diag", None)
    return getattr(diag, "constraint_name", None)


def _check_fails(conn: Connection, table: Table, check: CheckConstraint, values: Dict[str, Any]) -> bool:
    written = select(
        *[literal(v, table.c[k].type).label(k) for k, v in values.items() if k in table.c]
    ).subquery()
    outcome = conn.execute(
        select(literal_column(str(check.sqltext))).select_from(written)
    ).scalar()
    # NULL passes a CHECK constraint
    return outcome is not None and not outcome


def _referenced_row_missing(conn: Connection, fk: ForeignKeyConstraint, values: Dict[str, Any]) -> bool:
    if any(values.get(el.parent.name) is None for el in fk.elements):
        return False
    stmt = (
        select(literal(1))
        .select_from(fk.referred_table)
        .where(and_(*[el.column == values[el.parent.name] for el in fk.elements]))
        .limit(1)
    )
    return conn.execute(stmt).first() is None


def _duplicate_exists(
    conn: Connection,
    table: Table,
    unique: UniqueConstraint,
    values: Dict[str, Any],
    row_id: Optional[int],
) -> bool:
    columns = list(unique.columns)
    if any(c.name not in values for c in columns):
        return False
    conditions = [c == values[c.name] for c in columns]
    if row_id is not None:
        conditions.append(table.c.id != row_id)
    stmt = select(literal(1)).select_from(table).where(and_(*conditions)).limit(1)
    return conn.execute(stmt).first() is not None


def identify_write_violation(
    conn: Connection,
    exc: IntegrityError,
    table: Table,
    values: Dict[str, Any],
    row_id: Optional[int] = None,
) -> ConstraintViolation:
    """
    Name the constraint an INSERT/UPDATE of ``values`` into ``table`` broke.

    ``row_id`` is the updated row, excluded from the uniqueness probe.
    Must run on the connection that executed the failing statement, before
    its transaction ends.
    """
    name = driver_constraint_name(exc)
    if name is not None:
        return ConstraintViolation(name, CONSTRAINT_KINDS.get(name))

    for check in _named(table.constraints):
        if isinstance(check, CheckConstraint):
            if _check_fails(conn, table, check, values):
                return ConstraintViolation(check.name, CHECK)

    for fk in _named(table.foreign_key_constraints):
        if _referenced_row_missing(conn, fk, values):
            return ConstraintViolation(fk.name, FOREIGN_KEY)

    for unique in _named(table.constraints):
        if isinstance(unique, UniqueConstraint):
            if _duplicate_exists(conn, table, unique, values, row_id):
                return ConstraintViolation(unique.name, UNIQUE)

    return ConstraintViolation(None, None)


def identify_delete_violation(
    conn: Connection,
    exc: IntegrityError,
    table: Table,
    row_id: int,
) -> ConstraintViolation:
    """Name the foreign key that kept row ``row_id`` of ``table`` from being deleted."""
    name = driver_constraint_name(exc)
    if name is not None:
        return ConstraintViolation(name, RESTRICT)

    for fk in referencing_keys(table):
        stmt = (
            select(literal(1))
            .select_from(fk.table)
            .where(and_(*[el.parent == row_id for el in fk.elements]))
            .limit(1)
        )
        if conn.execute(stmt).first() is not None:
            return ConstraintViolation(fk.name, RESTRICT)

    return ConstraintViolation(None, None)
