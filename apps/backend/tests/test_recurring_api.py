from __future__ import annotations

from datetime import timedelta

from app.core.deps import get_current_user
from app.main import app
from app.utils.dates import today_local


def _category_id(client, name: str) -> int:
    res = client.get("/api/categories")
    assert res.status_code == 200
    return next(c["id"] for c in res.json() if c["name"] == name)


def _create_rule(client, **overrides):
    payload = {
        "type": "expense",
        "amount": 50,
        "description": "Gym",
        "category_id": _category_id(client, "Health"),
        "frequency": "weekly",
        "start_date": "2024-01-01",
        "day_of_week": 1,
    }
    payload.update(overrides)
    return client.post("/api/recurring-transactions", json=payload)


def test_create_and_get_recurring(client):
    res = _create_rule(client)
    assert res.status_code == 201
    body = res.json()
    assert body["frequency"] == "weekly"
    assert body["day_of_week"] == 1
    assert body["day_of_month"] is None
    assert body["last_processed_date"] is None
    assert body["is_active"] is True

    got = client.get(f"/api/recurring-transactions/{body['id']}")
    assert got.status_code == 200
    assert got.json()["description"] == "Gym"

    listed = client.get("/api/recurring-transactions")
    assert [r["id"] for r in listed.json()] == [body["id"]]


def test_create_validation_errors(client):
    # weekly 인데 요일 없음
    assert _create_rule(client, day_of_week=None).status_code == 422
    # monthly 인데 일자 없음
    assert _create_rule(client, frequency="monthly", day_of_week=None).status_code == 422
    assert _create_rule(client, amount=0).status_code == 422
    assert _create_rule(client, amount=-5).status_code == 422
    assert _create_rule(client, day_of_week=7).status_code == 422
    assert _create_rule(client, frequency="monthly", day_of_month=32).status_code == 422
    assert _create_rule(client, end_date="2023-12-31").status_code == 422
    assert _create_rule(client, frequency="hourly").status_code == 422


def test_irrelevant_anchor_is_dropped(client):
    res = _create_rule(client, frequency="monthly", day_of_month=15, day_of_week=3)
    assert res.status_code == 201
    assert res.json()["day_of_week"] is None
    assert res.json()["day_of_month"] == 15


def test_category_type_must_match(client):
    salary = _category_id(client, "Salary")
    res = _create_rule(client, category_id=salary)
    assert res.status_code == 400


def test_patch_validates_merged_state(client):
    rule = _create_rule(client).json()

    # weekly -> monthly 전환 시 day_of_month 필요
    res = client.patch(f"/api/recurring-transactions/{rule['id']}", json={"frequency": "monthly"})
    assert res.status_code == 400

    res = client.patch(
        f"/api/recurring-transactions/{rule['id']}",
        json={"frequency": "monthly", "day_of_month": 5},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["frequency"] == "monthly"
    assert body["day_of_month"] == 5
    assert body["day_of_week"] is None

    res = client.patch(f"/api/recurring-transactions/{rule['id']}", json={"end_date": "2023-06-01"})
    assert res.status_code == 400


def test_patch_rejects_unknown_fields_and_last_processed(client):
    rule = _create_rule(client).json()
    res = client.patch(
        f"/api/recurring-transactions/{rule['id']}",
        json={"last_processed_date": "2024-01-08"},
    )
    assert res.status_code == 422


def test_put_replaces_definition(client):
    rule = _create_rule(client).json()
    res = client.put(
        f"/api/recurring-transactions/{rule['id']}",
        json={
            "type": "income",
            "amount": 3000,
            "description": "Salary",
            "category_id": _category_id(client, "Salary"),
            "frequency": "monthly",
            "start_date": "2024-01-01",
            "day_of_month": 25,
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["type"] == "income"
    assert body["day_of_week"] is None
    assert body["day_of_month"] == 25


def test_delete_keeps_generated_transactions(client):
    rule = _create_rule(client).json()
    res = client.post("/api/recurring-transactions/process", params={"run_date": "2024-01-08"})
    assert res.json()["processed"] == 1

    assert client.delete(f"/api/recurring-transactions/{rule['id']}").status_code == 204
    assert client.get(f"/api/recurring-transactions/{rule['id']}").status_code == 404

    txns = client.get("/api/transactions").json()
    assert len(txns) == 1
    assert txns[0]["source_recurring_id"] is None


def test_preview_lists_matching_dates(client):
    rule = _create_rule(client).json()
    res = client.get(
        f"/api/recurring-transactions/{rule['id']}/preview",
        params={"start": "2024-01-01", "end": "2024-01-31"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["recurring_id"] == rule["id"]
    assert body["dates"] == ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22", "2024-01-29"]


def test_preview_window_limits(client):
    rule = _create_rule(client).json()
    res = client.get(
        f"/api/recurring-transactions/{rule['id']}/preview",
        params={"start": "2024-02-01", "end": "2024-01-01"},
    )
    assert res.status_code == 400
    res = client.get(
        f"/api/recurring-transactions/{rule['id']}/preview",
        params={"start": "2020-01-01", "end": "2024-01-01"},
    )
    assert res.status_code == 400


def test_process_endpoint_is_idempotent(client):
    rule = _create_rule(client).json()

    first = client.post("/api/recurring-transactions/process", params={"run_date": "2024-01-08"})
    assert first.status_code == 200
    assert first.json() == {"run_date": "2024-01-08", "processed": 1}

    again = client.post("/api/recurring-transactions/process", params={"run_date": "2024-01-08"})
    assert again.json()["processed"] == 0

    # 화요일: weekly(월) 규칙은 해당 없음
    tuesday = client.post("/api/recurring-transactions/process", params={"run_date": "2024-01-09"})
    assert tuesday.json()["processed"] == 0

    txns = client.get("/api/transactions").json()
    assert len(txns) == 1
    assert txns[0]["date"] == "2024-01-08"
    assert txns[0]["amount"] == 50
    assert txns[0]["source_recurring_id"] == rule["id"]

    got = client.get(f"/api/recurring-transactions/{rule['id']}").json()
    assert got["last_processed_date"] == "2024-01-08"


def test_process_rejects_future_run_date(client):
    future = (today_local() + timedelta(days=1)).isoformat()
    res = client.post("/api/recurring-transactions/process", params={"run_date": future})
    assert res.status_code == 400


def test_process_defaults_to_today(client):
    today = today_local()
    _create_rule(client, frequency="daily", day_of_week=None, start_date=today.isoformat())
    res = client.post("/api/recurring-transactions/process")
    assert res.status_code == 200
    assert res.json() == {"run_date": today.isoformat(), "processed": 1}


def test_other_users_rule_is_forbidden(client, other_user):
    rule = _create_rule(client).json()
    app.dependency_overrides[get_current_user] = lambda: other_user
    try:
        assert client.get(f"/api/recurring-transactions/{rule['id']}").status_code == 403
        assert client.delete(f"/api/recurring-transactions/{rule['id']}").status_code == 403
        assert client.get("/api/recurring-transactions").json() == []
        # 다른 사용자의 처리 요청은 본인 정의만 대상
        res = client.post("/api/recurring-transactions/process", params={"run_date": "2024-01-08"})
        assert res.json()["processed"] == 0
    finally:
        app.dependency_overrides.pop(get_current_user, None)


def test_missing_rule_is_404(client):
    assert client.get("/api/recurring-transactions/9999").status_code == 404
    assert client.patch("/api/recurring-transactions/9999", json={"amount": 10}).status_code == 404
