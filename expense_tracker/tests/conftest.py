from __future__ import annotations

import os
import tempfile

# Settings are read once at import time, so the environment must be in place first
_TMP_DIR = tempfile.mkdtemp(prefix="expense-tracker-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["APP_ENV"] = "test"
os.environ["TOKEN_SWEEPER_ENABLED"] = "false"
os.environ["ENABLE_RATE_LIMIT"] = "false"
os.environ["ADMIN_PASSWORD"] = "correct-horse"
os.environ.pop("ADMIN_PASSWORD_HASH", None)

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from expense_tracker.app import create_app  # noqa: E402
from expense_tracker.infrastructure.container import Container  # noqa: E402
from expense_tracker.infrastructure.db import ENGINE, Base, init_db  # noqa: E402
from expense_tracker.infrastructure.db import models  # noqa: E402,F401

ADMIN_PASSWORD = "correct-horse"


@pytest.fixture()
def reset_database():
    Base.metadata.drop_all(bind=ENGINE)
    init_db()
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def container(reset_database) -> Container:
    return Container()


@pytest.fixture()
def app(container: Container) -> Flask:
    return create_app(container)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture()
def auth_headers(client: FlaskClient) -> dict[str, str]:
    response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"X-Auth-Token": response.get_json()["token"]}


@pytest.fixture()
def admin_password() -> str:
    return ADMIN_PASSWORD
