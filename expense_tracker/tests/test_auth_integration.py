from __future__ import annotations

from flask.testing import FlaskClient
from sqlalchemy import select

from expense_tracker.app import create_app
from expense_tracker.infrastructure.container import Container
from expense_tracker.infrastructure.db import SessionFactory
from expense_tracker.infrastructure.db.models import AdminCredential, AuditLog, AuthToken


def _count(model) -> int:
    with SessionFactory() as session:
        return len(session.scalars(select(model)).all())


def test_login_protected_logout_flow(client: FlaskClient, admin_password: str) -> None:
    login = client.post("/api/auth/login", json={"password": admin_password})
    assert login.status_code == 200
    token = login.get_json()["token"]
    headers = {"X-Auth-Token": token}

    assert client.get("/api/categories", headers=headers).status_code == 200
    assert _count(AuthToken) == 1

    logout = client.post("/api/auth/logout", headers=headers)
    assert logout.status_code == 200

    rejected = client.get("/api/categories", headers=headers)
    assert rejected.status_code == 401
    assert rejected.get_json()["code"] == "INVALID_TOKEN"
    assert _count(AuthToken) == 0


def test_web_client_paths(client: FlaskClient, admin_password: str) -> None:
    login = client.post("/api/login", json={"password": admin_password})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.get_json()['token']}"}

    changed = client.post(
        "/api/change-password",
        json={"currentPassword": admin_password, "newPassword": "battery-staple"},
        headers=headers,
    )
    assert changed.status_code == 200

    assert client.post("/api/logout", headers=headers).status_code == 200
    assert client.get("/api/auth/status", headers=headers).get_json()["authenticated"] is False
    assert client.post("/api/login", json={"password": "battery-staple"}).status_code == 200


def test_protected_endpoint_without_token(client: FlaskClient) -> None:
    response = client.get("/api/expenses")

    assert response.status_code == 401
    assert response.get_json()["code"] == "NO_TOKEN"


def test_wrong_password_is_rejected_and_audited(client: FlaskClient) -> None:
    response = client.post("/api/auth/login", json={"password": "nope"})

    assert response.status_code == 401
    assert response.get_json()["code"] == "INVALID_CREDENTIALS"
    with SessionFactory() as session:
        actions = [row.action for row in session.scalars(select(AuditLog)).all()]
    assert actions == ["login_failed"]


def test_tokens_survive_restart(client: FlaskClient, admin_password: str) -> None:
    a = client.post("/api/auth/login", json={"password": admin_password}).get_json()["token"]
    b = client.post("/api/auth/login", json={"password": admin_password}).get_json()["token"]
    client.post("/api/auth/logout", headers={"X-Auth-Token": a})

    restarted = create_app(Container()).test_client()

    assert restarted.get("/api/categories", headers={"X-Auth-Token": b}).status_code == 200
    assert restarted.get("/api/categories", headers={"X-Auth-Token": a}).status_code == 401


def test_token_issued_by_another_instance_is_accepted(
    client: FlaskClient, admin_password: str
) -> None:
    other = create_app(Container()).test_client()
    token = other.post("/api/auth/login", json={"password": admin_password}).get_json()["token"]

    status = client.get("/api/auth/status", headers={"X-Auth-Token": token})

    assert status.get_json()["authenticated"] is True


def test_change_password_persists_without_restart(
    client: FlaskClient, auth_headers: dict[str, str], admin_password: str
) -> None:
    before = _stored_hash()

    response = client.post(
        "/api/auth/change-password",
        json={"current_password": admin_password, "new_password": "battery-staple"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert _stored_hash() != before
    assert client.post("/api/auth/login", json={"password": "battery-staple"}).status_code == 200
    old = client.post("/api/auth/login", json={"password": admin_password})
    assert old.status_code == 401

    # A restart keeps the changed credential rather than re-seeding from config
    restarted = create_app(Container()).test_client()
    assert restarted.post("/api/auth/login", json={"password": "battery-staple"}).status_code == 200


def test_change_password_with_wrong_current(
    client: FlaskClient, auth_headers: dict[str, str], admin_password: str
) -> None:
    response = client.post(
        "/api/auth/change-password",
        json={"current_password": "wrong", "new_password": "battery-staple"},
        headers=auth_headers,
    )

    assert response.status_code == 401
    assert client.post("/api/auth/login", json={"password": admin_password}).status_code == 200


def test_change_password_validation(
    client: FlaskClient, auth_headers: dict[str, str], admin_password: str
) -> None:
    response = client.post(
        "/api/auth/change-password",
        json={"current_password": admin_password, "new_password": "abc"},
        headers=auth_headers,
    )

    assert response.status_code == 422
    assert response.get_json()["context"]["fields"] == ["new_password"]


def _stored_hash() -> str:
    with SessionFactory() as session:
        return session.get(AdminCredential, 1).password_hash


def test_security_headers_present(client: FlaskClient) -> None:
    response = client.get("/api/health/simple")

    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
