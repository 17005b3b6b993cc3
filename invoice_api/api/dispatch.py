# invoice_api/api/dispatch.py
"""
Single entry point for every resource route under the API prefix.

The path is resolved once into a typed Route and then handed to the
matching entity handler; status codes are decided here, per operation.
"""

from typing import Any, Callable, Dict, NamedTuple

from fastapi import APIRouter, Body, Depends, Request, Response, status

from invoice_api.api import customers, invoice_items, invoices, products
from invoice_api.api.responses import write_response
from invoice_api.config import API_PREFIX
from invoice_api.db.store import Store, get_store
from invoice_api.routing import (
    DELETE,
    GET,
    PATCH,
    POST,
    CollectionOp,
    Entity,
    ItemOp,
    RelationItemOp,
    RelationListOp,
    Route,
    resolve,
)

router = APIRouter(prefix=API_PREFIX, tags=["resources"])


class ResourceHandlers(NamedTuple):
    list: Callable[..., Any]
    create: Callable[..., Any]
    get: Callable[..., Any]
    update: Callable[..., Any]
    delete: Callable[..., Any]


RESOURCES: Dict[Entity, ResourceHandlers] = {
    Entity.CUSTOMERS: ResourceHandlers(
        customers.list_customers,
        customers.create_customer,
        customers.get_customer,
        customers.update_customer,
        customers.delete_customer,
    ),
    Entity.PRODUCTS: ResourceHandlers(
        products.list_products,
        products.create_product,
        products.get_product,
        products.update_product,
        products.delete_product,
    ),
    Entity.INVOICES: ResourceHandlers(
        invoices.list_invoices,
        invoices.create_invoice,
        invoices.get_invoice,
        invoices.update_invoice,
        invoices.delete_invoice,
    ),
}


def dispatch(route: Route, store: Store, payload: Any = None) -> Response:
    if isinstance(route, CollectionOp):
        handlers = RESOURCES[route.entity]
        if route.method == GET:
            return write_response(status.HTTP_200_OK, handlers.list(store))
        if route.method == POST:
            return write_response(status.HTTP_201_CREATED, handlers.create(store, payload))

    elif isinstance(route, ItemOp):
        handlers = RESOURCES[route.entity]
        if route.method == GET:
            return write_response(status.HTTP_200_OK, handlers.get(store, route.id))
        if route.method == PATCH:
            return write_response(status.HTTP_200_OK, handlers.update(store, route.id, payload))
        if route.method == DELETE:
            handlers.delete(store, route.id)
            return write_response(status.HTTP_204_NO_CONTENT)

    elif isinstance(route, RelationListOp):
        return write_response(
            status.HTTP_200_OK,
            invoice_items.list_invoice_products(store, route.invoice_id),
        )

    elif isinstance(route, RelationItemOp):
        if route.method == POST:
            item = invoice_items.add_product_to_invoice(
                store, route.invoice_id, route.product_id, payload
            )
            return write_response(status.HTTP_201_CREATED, item)
        if route.method == DELETE:
            invoice_items.remove_product_from_invoice(store, route.invoice_id, route.product_id)
            return write_response(status.HTTP_204_NO_CONTENT)

    # resolve() only produces the combinations handled above
    raise AssertionError(f"unroutable operation: {route!r}")


@router.api_route(
    "/{resource_path:path}",
    methods=[GET, POST, "PUT", PATCH, DELETE, "HEAD", "OPTIONS"],
    include_in_schema=False,
)
def handle_resource(
    resource_path: str,
    request: Request,
    payload: Any = Body(None),
    store: Store = Depends(get_store),
) -> Response:
    route = resolve(request.method, resource_path)
    return dispatch(route, store, payload)
