from __future__ import annotations

import pytest

from tests.conftest import bearer, signup


@pytest.fixture
def category_id(client, auth_headers) -> str:
    resp = client.post("/api/v1/categories", json={"name": "Food"}, headers=auth_headers)
    return resp.get_json()["data"]["id"]


def _expense(client, headers, category_id, **overrides):
    body = {
        "amount": 45.5,
        "description": "Groceries",
        "paymentMethod": "Credit Card",
        "categoryId": category_id,
        "date": "2024-03-10T12:00:00",
    }
    body.update(overrides)
    return client.post("/api/v1/expenses", json=body, headers=headers)


def test_create_expense(client, auth_headers, category_id) -> None:
    resp = _expense(client, auth_headers, category_id)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["amount"] == "45.50"
    assert data["paymentMethod"] == "Credit Card"
    assert data["category"]["id"] == category_id
    assert data["date"].startswith("2024-03-10T12:00:00")


def test_create_expense_defaults_date_to_now(client, auth_headers, category_id) -> None:
    resp = _expense(client, auth_headers, category_id, date=None)

    assert resp.status_code == 201
    assert resp.get_json()["data"]["date"]


def test_amount_must_be_positive(client, auth_headers, category_id) -> None:
    resp = _expense(client, auth_headers, category_id, amount=0)

    assert resp.status_code == 422
    assert "amount" in resp.get_json()["errors"]


@pytest.mark.parametrize(
    "field, value",
    [
        ("amount", "123456789012345678.99"),
        ("description", "d" * 256),
        ("paymentMethod", "p" * 65),
        ("attachmentUrl", "https://example.com/" + "a" * 2048),
    ],
)
def test_values_beyond_column_limits_are_422(client, auth_headers, category_id, field, value) -> None:
    resp = _expense(client, auth_headers, category_id, **{field: value})

    assert resp.status_code == 422
    assert field in resp.get_json()["errors"]
    listed = client.get("/api/v1/expenses", headers=auth_headers).get_json()["data"]
    assert listed == []


def test_largest_amount_that_fits_is_accepted(client, auth_headers, category_id) -> None:
    resp = _expense(client, auth_headers, category_id, amount="9999999999.99")

    assert resp.status_code == 201
    assert resp.get_json()["data"]["amount"] == "9999999999.99"


def test_update_rejects_oversized_amount(client, auth_headers, category_id) -> None:
    eid = _expense(client, auth_headers, category_id).get_json()["data"]["id"]

    resp = client.patch(
        f"/api/v1/expenses/{eid}", json={"amount": "10000000000.00"}, headers=auth_headers
    )

    assert resp.status_code == 422
    assert "amount" in resp.get_json()["errors"]
    got = client.get(f"/api/v1/expenses/{eid}", headers=auth_headers).get_json()["data"]
    assert got["amount"] == "45.50"


def test_missing_fields_are_reported(client, auth_headers) -> None:
    resp = client.post("/api/v1/expenses", json={}, headers=auth_headers)

    assert resp.status_code == 422
    assert {"amount", "description", "paymentMethod", "categoryId"} <= set(resp.get_json()["errors"])


def test_category_of_another_user_is_not_found(client, auth_headers, category_id) -> None:
    other = bearer(signup(client, email="other@x.com").get_json()["data"]["accessToken"])

    resp = _expense(client, other, category_id)

    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Category not found"


def test_list_orders_by_date_and_filters(client, auth_headers, category_id) -> None:
    travel = client.post(
        "/api/v1/categories", json={"name": "Travel"}, headers=auth_headers
    ).get_json()["data"]["id"]
    _expense(client, auth_headers, category_id, amount=10, date="2024-01-05T10:00:00")
    _expense(client, auth_headers, category_id, amount=20, date="2024-02-05T10:00:00")
    _expense(client, auth_headers, travel, amount=300, date="2024-03-05T10:00:00")

    everything = client.get("/api/v1/expenses", headers=auth_headers).get_json()["data"]
    assert [e["amount"] for e in everything] == ["300.00", "20.00", "10.00"]

    by_category = client.get(
        f"/api/v1/expenses?categoryId={category_id}", headers=auth_headers
    ).get_json()["data"]
    assert [e["amount"] for e in by_category] == ["20.00", "10.00"]

    in_range = client.get(
        "/api/v1/expenses?startDate=2024-02-01T00:00:00&endDate=2024-03-31T23:59:59",
        headers=auth_headers,
    ).get_json()["data"]
    assert [e["amount"] for e in in_range] == ["300.00", "20.00"]

    by_amount = client.get(
        "/api/v1/expenses?minAmount=15&maxAmount=100", headers=auth_headers
    ).get_json()["data"]
    assert [e["amount"] for e in by_amount] == ["20.00"]


def test_invalid_filter_range_is_422(client, auth_headers) -> None:
    resp = client.get("/api/v1/expenses?minAmount=50&maxAmount=10", headers=auth_headers)

    assert resp.status_code == 422


def test_expenses_are_scoped_to_owner(client, auth_headers, category_id) -> None:
    eid = _expense(client, auth_headers, category_id).get_json()["data"]["id"]
    other = bearer(signup(client, email="other@x.com").get_json()["data"]["accessToken"])

    assert client.get("/api/v1/expenses", headers=other).get_json()["data"] == []
    assert client.get(f"/api/v1/expenses/{eid}", headers=other).status_code == 404
    assert client.put(f"/api/v1/expenses/{eid}", json={"amount": 1}, headers=other).status_code == 404


def test_update_expense_partially(client, auth_headers, category_id) -> None:
    eid = _expense(client, auth_headers, category_id).get_json()["data"]["id"]
    travel = client.post(
        "/api/v1/categories", json={"name": "Travel"}, headers=auth_headers
    ).get_json()["data"]["id"]

    resp = client.put(
        f"/api/v1/expenses/{eid}",
        json={"amount": 99.99, "categoryId": travel},
        headers=auth_headers,
    )

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["amount"] == "99.99"
    assert data["categoryId"] == travel
    assert data["description"] == "Groceries"


def test_delete_expense(client, auth_headers, category_id) -> None:
    eid = _expense(client, auth_headers, category_id).get_json()["data"]["id"]

    assert client.delete(f"/api/v1/expenses/{eid}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/v1/expenses/{eid}", headers=auth_headers).status_code == 404
