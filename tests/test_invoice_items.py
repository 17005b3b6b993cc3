"""Invoice line items: upsert semantics, line sums, removal."""

import pytest

from invoice_api.config import API_PREFIX as API


def test_upsert_creates_line(client, invoice, product):
    res = client.post(f"{API}/invoices/{invoice['id']}/products/{product['id']}", json={"count": 5})
    assert res.status_code == 201
    assert res.json() == {
        "id": 1,
        "invoice_id": invoice["id"],
        "product_id": product["id"],
        "count": 5,
    }


def test_repeated_upsert_is_idempotent(client, invoice, product):
    url = f"{API}/invoices/{invoice['id']}/products/{product['id']}"
    first = client.post(url, json={"count": 5}).json()
    second = client.post(url, json={"count": 5}).json()

    assert first == second
    lines = client.get(f"{API}/invoices/{invoice['id']}/products").json()
    assert len(lines) == 1
    assert lines[0]["count"] == 5


def test_upsert_replaces_count(client, invoice, product):
    url = f"{API}/invoices/{invoice['id']}/products/{product['id']}"
    client.post(url, json={"count": 5})
    res = client.post(url, json={"count": 3})
    assert res.status_code == 201
    assert res.json()["count"] == 3


@pytest.mark.parametrize("count", [0, -2])
def test_upsert_rejects_non_positive_count(client, invoice, product, count):
    res = client.post(
        f"{API}/invoices/{invoice['id']}/products/{product['id']}", json={"count": count}
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "count must be greater than 0"


def test_upsert_unknown_product_is_not_found(client, invoice):
    res = client.post(f"{API}/invoices/{invoice['id']}/products/8", json={"count": 1})
    assert res.status_code == 404
    assert res.json()["detail"] == "The provided product does not exist"


def test_upsert_unknown_invoice_is_not_found(client, product):
    res = client.post(f"{API}/invoices/8/products/{product['id']}", json={"count": 1})
    assert res.status_code == 404
    assert res.json()["detail"] == "The provided invoice does not exist"


def test_list_lines_with_sum(client, invoice, product):
    cheap = client.post(f"{API}/products", json={"name": "Pad", "price": "0.10"}).json()
    client.post(f"{API}/invoices/{invoice['id']}/products/{cheap['id']}", json={"count": 3})
    client.post(f"{API}/invoices/{invoice['id']}/products/{product['id']}", json={"count": 2})

    res = client.get(f"{API}/invoices/{invoice['id']}/products")
    assert res.status_code == 200
    assert res.json() == [
        {
            "id": product["id"],
            "name": "Mouse",
            "description": "Wireless",
            "price": "222.00",
            "count": 2,
            "sum": "444.00",
        },
        {
            "id": cheap["id"],
            "name": "Pad",
            "description": None,
            "price": "0.10",
            "count": 3,
            "sum": "0.30",
        },
    ]


def test_list_for_invoice_without_items_is_empty(client, invoice):
    res = client.get(f"{API}/invoices/{invoice['id']}/products")
    assert res.status_code == 200
    assert res.json() == []


def test_list_for_missing_invoice_is_not_found(client):
    res = client.get(f"{API}/invoices/3/products")
    assert res.status_code == 404
    assert res.json()["detail"] == "Invoice not found"


def test_remove_line(client, invoice, product):
    url = f"{API}/invoices/{invoice['id']}/products/{product['id']}"
    client.post(url, json={"count": 1})
    assert client.delete(url).status_code == 204
    assert client.get(f"{API}/invoices/{invoice['id']}/products").json() == []


def test_remove_missing_line_is_not_found(client, invoice, product):
    res = client.delete(f"{API}/invoices/{invoice['id']}/products/{product['id']}")
    assert res.status_code == 404
    assert res.json()["detail"] == "Provided invoice doesn't contain the specified product"


def test_relation_routes_reject_other_methods(client, invoice):
    assert client.patch(f"{API}/invoices/{invoice['id']}/products", json={}).status_code == 405
    res = client.get(f"{API}/invoices/{invoice['id']}/products/1")
    assert res.status_code == 405
    assert res.headers["allow"] == "POST, DELETE"


def test_non_numeric_product_id_is_bad_request(client, invoice):
    res = client.post(f"{API}/invoices/{invoice['id']}/products/abc", json={"count": 1})
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid product ID"


def test_upsert_count_beyond_integer_range_is_rejected(client, invoice, product):
    res = client.post(
        f"{API}/invoices/{invoice['id']}/products/{product['id']}", json={"count": 2**31}
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "count is out of range"


def test_upsert_null_count_is_not_positive(client, invoice, product):
    res = client.post(
        f"{API}/invoices/{invoice['id']}/products/{product['id']}", json={"count": None}
    )
    assert res.status_code == 400
    assert res.json()["detail"] == "count must be greater than 0"
