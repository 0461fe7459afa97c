from budget_api.models.transaction import Transaction
from budget_api.services.identity import DevelopmentFallbackProvider
from budget_api.main import app
from tests.utils import auth_headers, unsigned_token

TX = {"amount": "12.50", "type": "expense", "description": "Coffee", "date": "2026-10-01T09:00:00"}


def test_missing_token_is_rejected(client):
    resp = client.get("/api/categories")
    assert resp.status_code == 401
    assert resp.json() == {"error": "No authentication token provided"}


def test_non_bearer_header_is_rejected(client):
    resp = client.get("/api/categories", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert resp.status_code == 401


def test_empty_bearer_token_is_rejected(client):
    resp = client.get("/api/categories", headers={"Authorization": "Bearer "})
    assert resp.status_code == 401


def test_invalid_token_is_rejected(client):
    resp = client.get("/api/categories", headers={"Authorization": "Bearer forged"})
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid authentication token"}


def test_valid_token_reaches_route(client, make_user):
    make_user("alice")
    resp = client.get("/api/categories", headers=auth_headers("alice"))
    assert resp.status_code == 200
    assert len(resp.json()) == 7


def test_rejected_request_does_not_write(client, make_user, db):
    make_user("alice")
    for headers in ({}, {"Authorization": "Bearer forged"}):
        resp = client.post("/api/transactions", json=TX, headers=headers)
        assert resp.status_code == 401
    assert db.query(Transaction).count() == 0


def test_unverified_token_rejected_without_fallback(client, make_user):
    make_user("alice")
    resp = client.get("/api/categories", headers={"Authorization": "Bearer " + unsigned_token({"user_id": "alice"})})
    assert resp.status_code == 401


def test_development_fallback_accepts_unverified_token(client, identity, make_user):
    make_user("alice")
    app.state.identity = DevelopmentFallbackProvider(identity)
    resp = client.get("/api/categories", headers={"Authorization": "Bearer " + unsigned_token({"user_id": "alice"})})
    assert resp.status_code == 200
    assert all(c["userId"] == "alice" for c in resp.json())


def test_me_returns_caller(client, make_user):
    make_user("alice", displayName="Alice", photoURL="https://img.example.com/a.png")
    resp = client.get("/api/users/me", headers=auth_headers("alice"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "alice"
    assert body["displayName"] == "Alice"
    assert body["photoURL"] == "https://img.example.com/a.png"
    assert body["isAdmin"] is False


def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"
