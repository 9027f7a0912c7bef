from __future__ import annotations

import json

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from expense_tracker.infrastructure.audit import AuditAction, AuditTrail
from expense_tracker.infrastructure.db import SessionFactory
from expense_tracker.infrastructure.db.models import AuditLog


class _BrokenSession:
    def add(self, _row) -> None:
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    def rollback(self) -> None:
        pass

    def commit(self) -> None:  # pragma: no cover
        raise AssertionError("commit after failed add")

    def close(self) -> None:
        pass


def test_record_stores_redacted_details(reset_database) -> None:
    AuditTrail(SessionFactory).record(
        AuditAction.PASSWORD_CHANGE_FAILED,
        ip_address="10.0.0.7",
        details={"error": "invalid_credentials", "new_password": "hunter22"},
        success=False,
    )

    with SessionFactory() as session:
        row = session.scalars(select(AuditLog)).one()
    details = json.loads(row.details_json)
    assert row.action == "password_change_failed"
    assert row.ip_address == "10.0.0.7"
    assert row.success is False
    assert details["error"] == "invalid_credentials"
    assert details["new_password"] != "hunter22"
    assert "request_id" in details


def test_record_survives_storage_failure() -> None:
    AuditTrail(_BrokenSession).record(AuditAction.LOGOUT, ip_address="127.0.0.1")
