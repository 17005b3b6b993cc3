# invoice_api/errors.py
"""
Domain errors and the translation of store failures into them.

Store failures are classified by constraint identity through
CONSTRAINT_ERRORS, keyed by (constraint name, violation kind): the same
foreign key means a bad request when an invoice points at a missing
customer, but a conflict when that customer is being deleted.
"""

import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Sequence, Tuple, Type

from sqlalchemy.exc import SQLAlchemyError

from invoice_api.db.constraints import (
    CHECK,
    FOREIGN_KEY,
    RESTRICT,
    UNIQUE,
    ConstraintViolation,
    NoRows,
    StoreError,
    referencing_keys,
)
from invoice_api.db.schema import metadata

logger = logging.getLogger(__name__)

INTERNAL_SERVER_ERROR_MSG = "Internal server error"
METHOD_NOT_ALLOWED_MSG = "Method not allowed"
PARSE_ERROR_MSG = "An error occurred while parsing the input JSON"

FIRST_NAME_REQUIRED = "First name is required"
LAST_NAME_REQUIRED = "Last name is required"
PRODUCT_NAME_REQUIRED = "Product name is required"
PRICE_REQUIRED = "Product price is required"
PRICE_INVALID = "Invalid price"
PRICE_NEGATIVE = "price should be a positive number"
AVAILABLE_ITEMS_NEGATIVE = "available_items must be greater than or equal to 0"
INVOICE_NUMBER_REQUIRED = "invoice_number must not be empty"
CUSTOMER_ID_NOT_POSITIVE = "customer_id should be a positive number"
COUNT_NOT_POSITIVE = "count must be greater than 0"
AVAILABLE_ITEMS_OUT_OF_RANGE = "available_items is out of range"
CUSTOMER_ID_OUT_OF_RANGE = "customer_id is out of range"
COUNT_OUT_OF_RANGE = "count is out of range"
INVOICE_DATE_INVALID = "Invalid invoice_date"
FIELD_TOO_LONG = "{field} must be at most {limit} characters"


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(ApiError):
    status_code = 400


class ValidationFailed(BadRequest):
    pass


class InvalidIdentifier(BadRequest):
    pass


class NotFound(ApiError):
    status_code = 404


class MethodNotAllowed(ApiError):
    status_code = 405

    def __init__(self, allowed: Sequence[str], message: str = METHOD_NOT_ALLOWED_MSG):
        super().__init__(message)
        self.allowed = tuple(allowed)


class Conflict(ApiError):
    status_code = 409


class DuplicateKey(Conflict):
    pass


class ReferentialConflict(Conflict):
    pass


class InternalError(ApiError):
    status_code = 500

    def __init__(self, message: str = INTERNAL_SERVER_ERROR_MSG):
        super().__init__(message)


ErrorOutcome = Tuple[Type[ApiError], str]

CONSTRAINT_ERRORS: Dict[Tuple[str, str], ErrorOutcome] = {
    ("invoice_invoice_number_key", UNIQUE): (DuplicateKey, "Invoice number must be unique"),
    ("invoice_customer_id_fkey", FOREIGN_KEY): (BadRequest, "Specified customer does not exist"),
    ("invoice_item_product_id_fkey", FOREIGN_KEY): (NotFound, "The provided product does not exist"),
    ("invoice_item_invoice_id_fkey", FOREIGN_KEY): (NotFound, "The provided invoice does not exist"),
    ("product_price_check", CHECK): (ValidationFailed, PRICE_NEGATIVE),
    ("product_available_items_check", CHECK): (ValidationFailed, AVAILABLE_ITEMS_NEGATIVE),
    ("invoice_item_count_check", CHECK): (ValidationFailed, COUNT_NOT_POSITIVE),
}

# Deleting a referenced row: one entry per foreign key in the schema
for _table in metadata.sorted_tables:
    for _fk in referencing_keys(_table):
        CONSTRAINT_ERRORS[(_fk.name, RESTRICT)] = (
            ReferentialConflict,
            f"cannot delete {_table.name}: {_table.name} is referenced in the {_fk.table.name} table",
        )


def translate(exc: Exception, not_found: str) -> ApiError:
    """
    Map a store failure onto the domain taxonomy.

    ``not_found`` is the message used when the store matched no row.
    Logs the outcome; callers raise the returned error.
    """
    if isinstance(exc, NoRows):
        logger.info("%s (%s)", not_found, exc)
        return NotFound(not_found)

    if isinstance(exc, ConstraintViolation):
        outcome: Optional[ErrorOutcome] = CONSTRAINT_ERRORS.get((exc.constraint, exc.kind))
        if outcome is not None:
            error_cls, message = outcome
            logger.warning("%s: %s", exc, message)
            return error_cls(message)

    logger.error("Unhandled store failure: %s", exc, exc_info=exc)
    return InternalError()


@contextmanager
def translate_errors(not_found: str) -> Iterator[None]:
    """Re-raise store failures inside the block as domain errors."""
    try:
        yield
    except (StoreError, SQLAlchemyError) as e:
        raise translate(e, not_found) from e
