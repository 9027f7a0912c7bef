from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from flask import Flask

from expense_tracker.application.services.auth_gate import AuthGate
from expense_tracker.application.services.credential_service import CredentialService
from expense_tracker.application.services.token_store import TokenStore
from expense_tracker.domain.auth.exceptions import InvalidCredentialsError
from expense_tracker.infrastructure.audit import AuditTrail
from expense_tracker.interfaces.http.auth_guard import AUTH_GATE_EXTENSION
from expense_tracker.interfaces.http.controllers.auth_controller import AuthController
from expense_tracker.shared.middleware.error_handler import configure_error_handling
from expense_tracker.tests.fakes import (
    DeterministicHasher,
    InMemoryCredentialRepository,
    InMemoryTokenMirror,
)


@pytest.fixture()
def audit() -> MagicMock:
    return MagicMock(spec=AuditTrail)


@pytest.fixture()
def tokens() -> TokenStore:
    return TokenStore(InMemoryTokenMirror())


@pytest.fixture()
def flask_app(tokens: TokenStore, audit: MagicMock) -> Flask:
    service = CredentialService(
        tokens=tokens,
        credentials=InMemoryCredentialRepository("hashed:secret"),
        password_hasher=DeterministicHasher(),
    )
    app = Flask(__name__)
    configure_error_handling(app)
    app.extensions[AUTH_GATE_EXTENSION] = AuthGate(tokens)
    app.register_blueprint(AuthController(credential_service=service, audit=audit).as_blueprint())
    return app


def test_login_returns_token(flask_app: Flask, tokens: TokenStore) -> None:
    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"password": "secret"})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["success"] is True
    assert tokens.is_valid(payload["token"])


def test_login_wrong_password_returns_401_with_reason(flask_app: Flask) -> None:
    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"password": "wrong"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials", "code": "INVALID_CREDENTIALS"}


def test_login_invalid_payload_returns_422(flask_app: Flask) -> None:
    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={})

    assert response.status_code == 422
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["context"]["fields"] == ["password"]


def test_login_failure_is_audited(flask_app: Flask, audit: MagicMock) -> None:
    with flask_app.test_client() as client:
        client.post("/api/auth/login", json={"password": "wrong"})

    call = audit.record.call_args
    assert call.kwargs["success"] is False
    assert call.kwargs["details"] == {"error": InvalidCredentialsError.default_code}


def test_status_reports_authentication(flask_app: Flask, tokens: TokenStore) -> None:
    token = tokens.issue().value

    with flask_app.test_client() as client:
        anonymous = client.get("/api/auth/status")
        authed = client.get("/api/auth/status", headers={"Authorization": f"Bearer {token}"})

    assert anonymous.get_json() == {"authenticated": False, "message": "Not authenticated"}
    assert authed.get_json() == {"authenticated": True, "message": "Authenticated"}


def test_logout_without_token_still_succeeds(flask_app: Flask) -> None:
    with flask_app.test_client() as client:
        response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.get_json()["success"] is True


def test_change_password_requires_token(flask_app: Flask) -> None:
    with flask_app.test_client() as client:
        missing = client.post("/api/auth/change-password", json={})
        invalid = client.post(
            "/api/auth/change-password", json={}, headers={"X-Auth-Token": "bogus"}
        )

    assert missing.status_code == 401
    assert missing.get_json() == {
        "error": "unauthorized",
        "code": "NO_TOKEN",
        "message": "Please log in to access this resource.",
    }
    assert invalid.status_code == 401
    assert invalid.get_json()["code"] == "INVALID_TOKEN"
    assert invalid.get_json()["message"] == "Please log in again."


def test_change_password_accepts_camel_case_fields(flask_app: Flask, tokens: TokenStore) -> None:
    token = tokens.issue().value

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/change-password",
            json={"currentPassword": "secret", "newPassword": "brand-new"},
            headers={"X-Auth-Token": token},
        )
        relogin = client.post("/api/auth/login", json={"password": "brand-new"})

    assert response.status_code == 200
    assert relogin.status_code == 200
