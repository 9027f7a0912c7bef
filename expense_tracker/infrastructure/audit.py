# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Audit trail for credential events.

Every event goes to the log. The ``audit_logs`` row is written in its own
short session so that a failed insert never rolls back, or fails, the
request that produced it.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sqlalchemy.orm import Session

from expense_tracker.domain.auth.exceptions import StorageUnavailableError
from expense_tracker.infrastructure.db.models import AuditLog
from expense_tracker.infrastructure.unit_of_work import storage_scope
from expense_tracker.shared.logging import get_correlation_id, logger
from expense_tracker.shared.logging.sensitive_filter import REDACTED


class AuditAction(str, Enum):
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_CHANGE_FAILED = "password_change_failed"


_SECRET_KEY_PARTS = ("password", "token", "hash", "secret")
_DETAILS_LIMIT = 2048


def _redact(details: Mapping[str, Any]) -> dict[str, Any]:
    return {
        key: REDACTED if any(part in key.lower() for part in _SECRET_KEY_PARTS) else value
        for key, value in details.items()
    }


class AuditTrail:
    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def record(
        self,
        action: AuditAction,
        *,
        ip_address: str | None = None,
        details: Mapping[str, Any] | None = None,
        success: bool = True,
    ) -> None:
        safe = _redact(details or {})
        line = f"audit.{action.value}: ip={ip_address or '-'} success={int(success)}"
        if safe:
            line += f" details={safe}"
        logger.log("INFO" if success else "WARNING", line)

        payload = dict(safe, request_id=get_correlation_id())
        try:
            with storage_scope(self._session_factory, "audit.record") as session:
                session.add(
                    AuditLog(
                        timestamp=datetime.now(UTC),
                        action=action.value,
                        ip_address=ip_address,
                        success=success,
                        details_json=json.dumps(payload, default=str)[:_DETAILS_LIMIT],
                    )
                )
        except StorageUnavailableError:
            logger.warning(f"audit.{action.value}: row not stored")


__all__ = ["AuditAction", "AuditTrail"]
