from __future__ import annotations

from datetime import datetime

from models import storage
from services.dashboard import get_dashboard_stats, month_bounds
from tests.conftest import bearer, signup


def _add(client, headers, category_id, amount, date):
    resp = client.post(
        "/api/v1/expenses",
        json={
            "amount": amount,
            "description": f"spent {amount}",
            "paymentMethod": "Cash",
            "categoryId": category_id,
            "date": date,
        },
        headers=headers,
    )
    assert resp.status_code == 201


def _category(client, headers, name):
    return client.post("/api/v1/categories", json={"name": name}, headers=headers).get_json()["data"]["id"]


def test_month_bounds_handles_december() -> None:
    start, end = month_bounds(datetime(2023, 12, 15, 8, 30))

    assert start == datetime(2023, 12, 1)
    assert end == datetime(2023, 12, 31, 23, 59, 59, 999999)


def test_dashboard_for_explicit_period(client, auth_headers) -> None:
    food = _category(client, auth_headers, "Food")
    fun = _category(client, auth_headers, "Fun")
    _add(client, auth_headers, food, 45.5, "2024-03-02T10:00:00")
    _add(client, auth_headers, food, 85, "2024-03-12T10:00:00")
    _add(client, auth_headers, fun, 250, "2024-03-20T10:00:00")
    _add(client, auth_headers, food, 200, "2024-02-15T10:00:00")

    resp = client.get(
        "/api/v1/dashboard?startDate=2024-03-01T00:00:00&endDate=2024-03-31T23:59:59",
        headers=auth_headers,
    )

    assert resp.status_code == 200
    stats = resp.get_json()["data"]
    assert stats["summary"]["totalAmount"] == "380.50"
    assert stats["summary"]["totalCount"] == 3
    assert stats["summary"]["period"] == {
        "start": "2024-03-01T00:00:00",
        "end": "2024-03-31T23:59:59",
    }

    breakdown = {item["category"]["name"]: item for item in stats["categoryBreakdown"]}
    assert breakdown["Fun"]["totalAmount"] == "250.00"
    assert breakdown["Food"]["totalAmount"] == "130.50"
    assert breakdown["Food"]["count"] == 2
    assert [item["category"]["name"] for item in stats["categoryBreakdown"]] == ["Fun", "Food"]

    # recent expenses ignore the period
    assert len(stats["recentExpenses"]) == 4
    assert stats["recentExpenses"][0]["amount"] == "250.00"


def test_dashboard_is_scoped_to_caller(client, auth_headers) -> None:
    food = _category(client, auth_headers, "Food")
    _add(client, auth_headers, food, 10, "2024-03-02T10:00:00")
    other = bearer(signup(client, email="other@x.com").get_json()["data"]["accessToken"])

    stats = client.get(
        "/api/v1/dashboard?startDate=2024-03-01T00:00:00&endDate=2024-03-31T23:59:59",
        headers=other,
    ).get_json()["data"]

    assert stats["summary"] == {
        "totalAmount": "0.00",
        "totalCount": 0,
        "period": {"start": "2024-03-01T00:00:00", "end": "2024-03-31T23:59:59"},
    }
    assert stats["categoryBreakdown"] == []
    assert stats["recentExpenses"] == []


def test_dashboard_defaults_to_current_month(client, auth_headers) -> None:
    user_id = client.get("/api/v1/auth/me", headers=auth_headers).get_json()["data"]["user"]["id"]
    now = datetime(2024, 3, 15, 9, 0)

    stats = get_dashboard_stats(storage.get_session(), user_id, now=now)

    assert stats["summary"]["period"]["start"] == "2024-03-01T00:00:00"
    assert stats["summary"]["period"]["end"] == "2024-03-31T23:59:59.999999"


def test_dashboard_rejects_inverted_period(client, auth_headers) -> None:
    resp = client.get(
        "/api/v1/dashboard?startDate=2024-04-01T00:00:00&endDate=2024-03-01T00:00:00",
        headers=auth_headers,
    )

    assert resp.status_code == 422


def test_dashboard_requires_authentication(client) -> None:
    assert client.get("/api/v1/dashboard").status_code == 401
