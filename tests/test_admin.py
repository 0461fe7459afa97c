import logging

import pytest

from budget_api.models.admin_log import AdminLog
from budget_api.models.budget import Budget
from budget_api.models.category import Category
from budget_api.models.goal import Goal
from budget_api.models.transaction import Transaction
from budget_api.models.user import User
from budget_api.services import admin_service as admin_service_module
from tests.utils import auth_headers

ADMIN_ENDPOINTS = [
    ("get", "/api/admin/users", None),
    ("patch", "/api/admin/users/bob/admin", {"isAdmin": True}),
    ("patch", "/api/admin/users/bob/disable", {"isDisabled": True}),
    ("delete", "/api/admin/users/bob", None),
    ("post", "/api/admin/users/bob/reset-password", {}),
    ("get", "/api/admin/logs?limit=10", None),
    ("get", "/api/admin/stats", None),
]


def _call(client, method, path, body, headers):
    if body is None:
        return getattr(client, method)(path, headers=headers)
    return client.request(method.upper(), path, json=body, headers=headers)


@pytest.fixture
def setup(make_user, make_admin):
    make_admin("root")
    make_user("bob")
    return auth_headers("root")


def _logs(db, action=None):
    db.expire_all()
    query = db.query(AdminLog)
    if action:
        query = query.filter(AdminLog.action == action)
    return query.all()


@pytest.mark.parametrize("method,path,body", ADMIN_ENDPOINTS)
def test_admin_routes_require_token(client, setup, method, path, body):
    assert _call(client, method, path, body, {}).status_code == 401


@pytest.mark.parametrize("method,path,body", ADMIN_ENDPOINTS)
def test_admin_routes_forbid_regular_users(client, setup, db, method, path, body):
    resp = _call(client, method, path, body, auth_headers("bob"))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Admin access required"}
    assert _logs(db) == []


def test_unknown_user_with_valid_token(client, setup):
    resp = client.get("/api/admin/stats", headers=auth_headers("ghost"))
    assert resp.status_code == 401
    assert resp.json() == {"error": "User not found"}


def test_disabled_admin_is_forbidden(client, setup, db):
    user = db.get(User, "root")
    user.is_disabled = True
    db.commit()
    resp = client.get("/api/admin/stats", headers=auth_headers("root"))
    assert resp.status_code == 403
    assert resp.json() == {"error": "Account is disabled"}


def test_grant_and_revoke_admin(client, setup, db):
    resp = client.patch("/api/admin/users/bob/admin", json={"isAdmin": True}, headers=setup)
    assert resp.status_code == 200
    assert resp.json()["isAdmin"] is True
    assert client.get("/api/admin/stats", headers=auth_headers("bob")).status_code == 200

    [made] = _logs(db, "made_admin")
    assert (made.admin_id, made.target_user_id, made.target_user_email) == ("root", "bob", "bob@example.com")

    resp = client.patch("/api/admin/users/bob/admin", json={"isAdmin": False}, headers=setup)
    assert resp.json()["isAdmin"] is False
    assert len(_logs(db, "removed_admin")) == 1
    assert len(_logs(db)) == 2


def test_disable_blocks_admin_gate(client, setup, db):
    client.patch("/api/admin/users/bob/admin", json={"isAdmin": True}, headers=setup)
    resp = client.patch("/api/admin/users/bob/disable", json={"isDisabled": True}, headers=setup)
    assert resp.status_code == 200
    assert resp.json()["isDisabled"] is True
    assert len(_logs(db, "disabled_account")) == 1
    assert client.get("/api/admin/users", headers=auth_headers("bob")).status_code == 403

    client.patch("/api/admin/users/bob/disable", json={"isDisabled": False}, headers=setup)
    assert len(_logs(db, "enabled_account")) == 1
    assert client.get("/api/admin/users", headers=auth_headers("bob")).status_code == 200


def test_delete_cascades_but_keeps_history(client, setup, db):
    bob = auth_headers("bob")
    client.post("/api/transactions", json={"amount": "5", "type": "expense", "description": "x", "date": "2026-10-01T00:00:00"}, headers=bob)
    client.post("/api/budgets", json={"name": "b", "amount": "5", "period": "weekly", "startDate": "2026-10-01T00:00:00"}, headers=bob)
    client.post("/api/goals", json={"name": "g", "targetAmount": "5"}, headers=bob)
    client.patch("/api/admin/users/bob/disable", json={"isDisabled": True}, headers=setup)

    resp = client.delete("/api/admin/users/bob", headers=setup)
    assert resp.status_code == 200

    db.expire_all()
    assert db.get(User, "bob") is None
    for model in (Category, Transaction, Budget, Goal):
        assert db.query(model).filter(model.user_id == "bob").count() == 0
    # root's own data is untouched
    assert db.query(Category).filter(Category.user_id == "root").count() == 7

    [deleted] = _logs(db, "deleted_account")
    assert deleted.target_user_id == "bob"
    assert deleted.target_user_email == "bob@example.com"
    assert len(_logs(db, "disabled_account")) == 1


def test_delete_missing_user_is_404(client, setup, db):
    assert client.delete("/api/admin/users/nobody", headers=setup).status_code == 404
    assert _logs(db) == []


def test_admin_cannot_remove_themselves(client, setup, db):
    assert client.delete("/api/admin/users/root", headers=setup).status_code == 400
    assert client.patch("/api/admin/users/root/disable", json={"isDisabled": True}, headers=setup).status_code == 400
    assert client.patch("/api/admin/users/root/admin", json={"isAdmin": False}, headers=setup).status_code == 400
    assert _logs(db) == []


def test_reset_password_link(client, setup, identity, db):
    resp = client.post("/api/admin/users/bob/reset-password", json={}, headers=setup)
    assert resp.status_code == 200
    assert resp.json() == {"link": "https://auth.example.com/reset?email=bob@example.com", "email": "bob@example.com"}
    assert identity.reset_requests == ["bob@example.com"]
    assert len(_logs(db, "reset_password")) == 1


def test_reset_password_provider_failure(client, setup, identity, db):
    identity.fail_reset = True
    resp = client.post("/api/admin/users/bob/reset-password", json={}, headers=setup)
    assert resp.status_code == 502
    assert _logs(db) == []


def test_log_failure_does_not_undo_mutation(client, setup, db, monkeypatch, caplog):
    # admin_id is NOT NULL, so this entry can never be written
    real = admin_service_module.AdminLog
    monkeypatch.setattr(admin_service_module, "AdminLog", lambda **kw: real(**{**kw, "admin_id": None}))

    with caplog.at_level(logging.ERROR, logger="budget_api.services.admin_service"):
        resp = client.patch("/api/admin/users/bob/admin", json={"isAdmin": True}, headers=setup)

    assert resp.status_code == 200
    assert resp.json()["isAdmin"] is True
    db.expire_all()
    assert db.get(User, "bob").is_admin is True
    assert _logs(db) == []
    assert "Failed to write admin log" in caplog.text


def test_list_users_and_stats(client, setup, make_user):
    make_user("carol")
    client.patch("/api/admin/users/carol/disable", json={"isDisabled": True}, headers=setup)
    client.post(
        "/api/transactions",
        json={"amount": "5", "type": "expense", "description": "x", "date": "2026-10-01T00:00:00"},
        headers=auth_headers("bob"),
    )

    users = client.get("/api/admin/users", headers=setup).json()
    assert {u["id"] for u in users} == {"root", "bob", "carol"}

    stats = client.get("/api/admin/stats", headers=setup).json()
    assert stats == {"totalUsers": 3, "activeUsers": 2, "totalTransactions": 1, "totalBudgets": 0}


def test_logs_are_newest_first_and_limited(client, setup):
    for flag in (True, False, True):
        client.patch("/api/admin/users/bob/admin", json={"isAdmin": flag}, headers=setup)

    logs = client.get("/api/admin/logs", headers=setup).json()
    assert [l["action"] for l in logs] == ["made_admin", "removed_admin", "made_admin"]
    assert len(client.get("/api/admin/logs?limit=2", headers=setup).json()) == 2
    assert client.get("/api/admin/logs?limit=0", headers=setup).status_code == 400


def test_missing_target_is_404(client, setup):
    assert client.patch("/api/admin/users/nobody/admin", json={"isAdmin": True}, headers=setup).status_code == 404
    assert client.post("/api/admin/users/nobody/reset-password", json={}, headers=setup).status_code == 404
