from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from expense_tracker.app import create_app
from expense_tracker.infrastructure.container import Container
from expense_tracker.infrastructure.db import ENGINE, SessionFactory, build_engine
from expense_tracker.infrastructure.db.models import AuditLog, AuthToken
from expense_tracker.shared.config.settings import DatabaseConfig


def _count(factory, model) -> int:
    with factory() as session:
        return int(session.scalar(select(func.count()).select_from(model)) or 0)


def test_container_on_its_own_database_keeps_everything_there(
    reset_database, admin_password: str
) -> None:
    engine = build_engine(DatabaseConfig(url="sqlite:///:memory:"))
    container = Container(engine=engine)
    client = create_app(container).test_client()

    assert client.post("/api/login", json={"password": "wrong"}).status_code == 401
    assert client.post("/api/login", json={"password": admin_password}).status_code == 200

    health = client.get("/api/health").get_json()
    assert health["database"] == "ok"
    assert health["tables"]["categories"] == 6

    assert _count(container.session_factory, AuditLog) == 2
    assert _count(container.session_factory, AuthToken) == 1
    assert _count(SessionFactory, AuditLog) == 0
    assert _count(SessionFactory, AuthToken) == 0


def test_engine_is_taken_from_a_sessionmaker() -> None:
    engine = build_engine(DatabaseConfig(url="sqlite:///:memory:"))

    assert Container(session_factory=sessionmaker(bind=engine)).engine is engine
    assert Container().engine is ENGINE
