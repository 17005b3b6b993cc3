"""Shared fixtures: a fresh in-memory SQLite store per test and an API client bound to it."""

import pytest
from fastapi.testclient import TestClient

from invoice_api import app
from invoice_api.config import API_PREFIX as API
from invoice_api.db.engine import create_db_engine
from invoice_api.db.schema import metadata
from invoice_api.db.store import Store, get_store


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return Store.from_engine(engine)


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def customer(client):
    res = client.post(f"{API}/customers", json={"first_name": "Jarred", "last_name": "Black"})
    assert res.status_code == 201
    return res.json()


@pytest.fixture
def product(client):
    res = client.post(
        f"{API}/products",
        json={"name": "Mouse", "description": "Wireless", "price": "222", "available_items": 22},
    )
    assert res.status_code == 201
    return res.json()


@pytest.fixture
def invoice(client, customer):
    res = client.post(
        f"{API}/invoices",
        json={"invoice_number": "INV-1", "customer_id": customer["id"]},
    )
    assert res.status_code == 201
    return res.json()
