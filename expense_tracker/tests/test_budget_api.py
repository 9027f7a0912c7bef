from __future__ import annotations

from decimal import Decimal

import pytest
from flask.testing import FlaskClient

from expense_tracker.services.budget_service import month_bounds, usage_percentage


def _add_expense(client: FlaskClient, headers: dict[str, str], amount: float, day: str) -> None:
    category = client.get("/api/categories", headers=headers).get_json()[0]["id"]
    source = client.get("/api/sources", headers=headers).get_json()[0]["id"]
    response = client.post(
        "/api/expenses",
        json={"title": "x", "amount": amount, "date": day, "category_id": category, "source_id": source},
        headers=headers,
    )
    assert response.status_code == 201


def test_missing_budget_reads_as_zero(client: FlaskClient, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/budget/2025/3", headers=auth_headers)

    assert response.status_code == 200
    assert response.get_json() == {"amount": 0}


def test_save_upserts_by_month(client: FlaskClient, auth_headers: dict[str, str]) -> None:
    first = client.post("/api/budget", json={"year": 2025, "month": 3, "amount": 1000}, headers=auth_headers)
    second = client.post("/api/budget", json={"year": 2025, "month": 3, "amount": 1500}, headers=auth_headers)

    assert first.get_json()["id"] == second.get_json()["id"]
    stored = client.get("/api/budget/2025/3", headers=auth_headers).get_json()
    assert stored["amount"] == 1500.0
    assert client.get("/api/budget/2025/4", headers=auth_headers).get_json() == {"amount": 0}


def test_invalid_month(client: FlaskClient, auth_headers: dict[str, str]) -> None:
    posted = client.post("/api/budget", json={"year": 2025, "month": 13, "amount": 1}, headers=auth_headers)
    fetched = client.get("/api/budget/2025/0", headers=auth_headers)

    assert posted.status_code == 422
    assert fetched.status_code == 422


def test_summary(client: FlaskClient, auth_headers: dict[str, str]) -> None:
    client.post("/api/budget", json={"year": 2025, "month": 3, "amount": 1000}, headers=auth_headers)
    _add_expense(client, auth_headers, 300, "2025-03-01")
    _add_expense(client, auth_headers, 155, "2025-03-31")
    _add_expense(client, auth_headers, 999, "2025-04-01")

    summary = client.get("/api/budget/2025/3/summary", headers=auth_headers).get_json()

    assert summary == {
        "year": 2025,
        "month": 3,
        "budget": 1000.0,
        "spent": 455.0,
        "remaining": 545.0,
        "percentage": 46,
        "over_budget": False,
    }


def test_summary_over_budget_caps_percentage(
    client: FlaskClient, auth_headers: dict[str, str]
) -> None:
    client.post("/api/budget", json={"year": 2025, "month": 2, "amount": 100}, headers=auth_headers)
    _add_expense(client, auth_headers, 250, "2025-02-28")

    summary = client.get("/api/budget/2025/2/summary", headers=auth_headers).get_json()

    assert summary["percentage"] == 100
    assert summary["over_budget"] is True
    assert summary["remaining"] == -150.0


@pytest.mark.parametrize(
    ("spent", "budget", "expected"),
    [
        ("0", "0", 0),
        ("50", "0", 0),
        ("1", "200", 1),
        ("0.5", "100", 1),
        ("0.4", "100", 0),
        ("150", "100", 100),
    ],
)
def test_usage_percentage(spent: str, budget: str, expected: int) -> None:
    assert usage_percentage(Decimal(spent), Decimal(budget)) == expected


def test_month_bounds_handles_leap_years() -> None:
    assert month_bounds(2024, 2)[1].day == 29
    assert month_bounds(2025, 2)[1].day == 28
    assert month_bounds(2025, 12)[1].day == 31


def test_lost_upsert_race_is_a_conflict(
    client: FlaskClient, auth_headers: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    body = {"year": 2025, "month": 5, "amount": 100}
    assert client.post("/api/budget", json=body, headers=auth_headers).status_code in (200, 201)
    # Both writers saw no row for the month
    monkeypatch.setattr("expense_tracker.services.budget_service._find", lambda *_: None)

    response = client.post("/api/budget", json=body, headers=auth_headers)

    assert response.status_code == 409
    assert response.get_json() == {"error": "conflict", "context": {"operation": "budget.save"}}
