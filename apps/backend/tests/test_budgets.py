from __future__ import annotations

import pytest


def _category_id(client, name: str) -> int:
    return next(c["id"] for c in client.get("/api/categories").json() if c["name"] == name)


def _expense(client, category_id: int, amount: float, on: str):
    res = client.post(
        "/api/transactions",
        json={
            "type": "expense",
            "amount": amount,
            "description": "spend",
            "date": on,
            "category_id": category_id,
        },
    )
    assert res.status_code == 201


def _budget(client, category_id: int, amount: float = 1000, **overrides):
    payload = {
        "category_id": category_id,
        "amount": amount,
        "period": "monthly",
        "start_date": "2025-01-01",
        "end_date": "2025-01-31",
    }
    payload.update(overrides)
    return client.post("/api/budgets", json=payload)


def test_budget_summary_basic(client):
    food = _category_id(client, "Food & Dining")
    housing = _category_id(client, "Housing")
    bd = _budget(client, food).json()

    # 1월 지출 120 + 230, 범위 밖/다른 카테고리는 제외
    _expense(client, food, 120, "2025-01-10")
    _expense(client, food, 230, "2025-01-31")
    _expense(client, food, 999, "2025-02-01")
    _expense(client, housing, 500, "2025-01-15")

    res = client.get(f"/api/budgets/{bd['id']}/summary")
    assert res.status_code == 200
    s = res.json()
    assert s["budget_id"] == bd["id"]
    assert s["planned"] == 1000
    assert s["spent"] == 350
    assert s["remaining"] == 650
    assert s["percentage"] == pytest.approx(35.0)
    assert s["execution_rate"] == pytest.approx(35.0)
    assert s["is_over_budget"] is False


def test_budget_summary_over_budget(client):
    food = _category_id(client, "Food & Dining")
    bd = _budget(client, food, amount=100).json()
    _expense(client, food, 150, "2025-01-05")

    s = client.get(f"/api/budgets/{bd['id']}/summary").json()
    assert s["spent"] == 150
    assert s["remaining"] == 0
    assert s["percentage"] == 100
    assert s["execution_rate"] == pytest.approx(150.0)
    assert s["is_over_budget"] is True


def test_budget_validation(client):
    food = _category_id(client, "Food & Dining")
    assert _budget(client, food, amount=0).status_code == 422
    assert _budget(client, food, start_date="2025-02-01").status_code == 422
    assert _budget(client, food, period="weekly").status_code == 422
    # 예산은 지출 카테고리 전용
    assert _budget(client, _category_id(client, "Salary")).status_code == 400


def test_budget_crud(client):
    food = _category_id(client, "Food & Dining")
    bd = _budget(client, food).json()
    assert bd["period"] == "monthly"

    assert [b["id"] for b in client.get("/api/budgets").json()] == [bd["id"]]
    assert client.get(f"/api/budgets/{bd['id']}").json()["amount"] == 1000

    res = client.patch(f"/api/budgets/{bd['id']}", json={"amount": 1500, "period": "custom"})
    assert res.status_code == 200
    assert res.json()["amount"] == 1500
    assert res.json()["period"] == "custom"

    assert client.patch(f"/api/budgets/{bd['id']}", json={"end_date": "2024-12-31"}).status_code == 400

    res = client.put(
        f"/api/budgets/{bd['id']}",
        json={
            "category_id": _category_id(client, "Housing"),
            "amount": 900,
            "period": "quarterly",
            "start_date": "2025-01-01",
            "end_date": "2025-03-31",
        },
    )
    assert res.status_code == 200
    assert res.json()["period"] == "quarterly"

    assert client.delete(f"/api/budgets/{bd['id']}").status_code == 204
    assert client.get(f"/api/budgets/{bd['id']}").status_code == 404
    assert client.get(f"/api/budgets/{bd['id']}/summary").status_code == 404
