from __future__ import annotations

from app.core.deps import get_current_user
from app.main import app


def test_list_includes_shared_defaults(client):
    res = client.get("/api/categories")
    assert res.status_code == 200
    items = res.json()
    assert len(items) == 13
    assert all(c["is_shared"] for c in items)
    names = {c["name"] for c in items}
    assert {"Housing", "Salary", "Other Income"} <= names

    incomes = client.get("/api/categories", params={"type": "income"}).json()
    assert {c["name"] for c in incomes} == {"Salary", "Investment", "Gifts", "Other Income"}


def test_create_update_delete_own_category(client):
    res = client.post("/api/categories", json={"name": "  Pets ", "type": "expense", "color": "#123456"})
    assert res.status_code == 201
    cat = res.json()
    assert cat["name"] == "Pets"
    assert cat["is_shared"] is False

    res = client.patch(f"/api/categories/{cat['id']}", json={"icon": "ri-bear-smile-line"})
    assert res.status_code == 200
    assert res.json()["icon"] == "ri-bear-smile-line"

    assert client.delete(f"/api/categories/{cat['id']}").status_code == 204
    assert all(c["id"] != cat["id"] for c in client.get("/api/categories").json())


def test_blank_name_rejected(client):
    assert client.post("/api/categories", json={"name": "   ", "type": "expense"}).status_code == 422


def test_shared_category_is_read_only(client):
    housing = next(c for c in client.get("/api/categories").json() if c["name"] == "Housing")
    assert client.patch(f"/api/categories/{housing['id']}", json={"name": "Rent"}).status_code == 403
    assert client.delete(f"/api/categories/{housing['id']}").status_code == 403


def test_other_users_category_hidden_and_forbidden(client, other_user):
    mine = client.post("/api/categories", json={"name": "Hobby", "type": "expense"}).json()

    app.dependency_overrides[get_current_user] = lambda: other_user
    try:
        names = {c["name"] for c in client.get("/api/categories").json()}
        assert "Hobby" not in names
        assert client.delete(f"/api/categories/{mine['id']}").status_code == 403
    finally:
        app.dependency_overrides.pop(get_current_user, None)


def test_delete_refused_while_referenced(client):
    cat = client.post("/api/categories", json={"name": "Coffee", "type": "expense"}).json()
    res = client.post(
        "/api/transactions",
        json={
            "type": "expense",
            "amount": 4.5,
            "description": "Latte",
            "date": "2024-01-08",
            "category_id": cat["id"],
        },
    )
    assert res.status_code == 201

    assert client.delete(f"/api/categories/{cat['id']}").status_code == 409
    # 사용 중에는 유형 변경도 불가
    assert client.patch(f"/api/categories/{cat['id']}", json={"type": "income"}).status_code == 409


def test_missing_category_404(client):
    assert client.patch("/api/categories/9999", json={"name": "x"}).status_code == 404
