# invoice_api/routing.py
"""
Resolution of request paths into typed operations.

Paths are relative to the API prefix:

    /{entity}                              CollectionOp   GET, POST
    /{entity}/{id}                         ItemOp         GET, PATCH, DELETE
    /invoices/{id}/products                RelationListOp GET
    /invoices/{id}/products/{product_id}   RelationItemOp POST, DELETE
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple, Union

from invoice_api.db.schema import MAX_INT
from invoice_api.errors import InvalidIdentifier, MethodNotAllowed, NotFound

GET = "GET"
POST = "POST"
PATCH = "PATCH"
DELETE = "DELETE"

COLLECTION_METHODS = (GET, POST)
ITEM_METHODS = (GET, PATCH, DELETE)
RELATION_LIST_METHODS = (GET,)
RELATION_ITEM_METHODS = (POST, DELETE)

RELATION_SEGMENT = "products"

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class Entity(str, Enum):
    CUSTOMERS = "customers"
    PRODUCTS = "products"
    INVOICES = "invoices"


@dataclass(frozen=True)
class CollectionOp:
    entity: Entity
    method: str


@dataclass(frozen=True)
class ItemOp:
    entity: Entity
    id: int
    method: str


@dataclass(frozen=True)
class RelationListOp:
    invoice_id: int


@dataclass(frozen=True)
class RelationItemOp:
    invoice_id: int
    product_id: int
    method: str


Route = Union[CollectionOp, ItemOp, RelationListOp, RelationItemOp]


def parse_id(segment: str, label: str) -> int:
    if not _ID_PATTERN.fullmatch(segment):
        raise InvalidIdentifier(f"Invalid {label} ID")
    value = int(segment, 10)
    if abs(value) > MAX_INT:
        raise InvalidIdentifier(f"Invalid {label} ID")
    return value


def _allow(method: str, allowed: Tuple[str, ...]) -> str:
    if method not in allowed:
        raise MethodNotAllowed(allowed)
    return method


def _segments(path: str) -> List[str]:
    return [seg for seg in path.split("/") if seg]


def resolve(method: str, path: str) -> Route:
    """
    Turn ``method`` and ``path`` into a Route.

    Raises NotFound for unknown shapes, InvalidIdentifier for non-numeric
    ids and MethodNotAllowed for known shapes with an unsupported method.
    """
    method = method.upper()
    segments = _segments(path)

    if not segments:
        raise NotFound("Not found")

    try:
        entity = Entity(segments[0])
    except ValueError:
        raise NotFound("Not found") from None

    label = entity.value.rstrip("s")

    if len(segments) == 1:
        return CollectionOp(entity, _allow(method, COLLECTION_METHODS))

    if len(segments) == 2:
        row_id = parse_id(segments[1], label)
        return ItemOp(entity, row_id, _allow(method, ITEM_METHODS))

    if entity is not Entity.INVOICES or segments[2] != RELATION_SEGMENT or len(segments) > 4:
        raise NotFound("Not found")

    invoice_id = parse_id(segments[1], "invoice")

    if len(segments) == 3:
        _allow(method, RELATION_LIST_METHODS)
        return RelationListOp(invoice_id)

    product_id = parse_id(segments[3], "product")
    return RelationItemOp(invoice_id, product_id, _allow(method, RELATION_ITEM_METHODS))
