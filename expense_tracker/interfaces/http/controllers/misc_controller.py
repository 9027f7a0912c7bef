# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from flask import Blueprint, jsonify
from sqlalchemy.orm import Session

from expense_tracker.application.services.token_store import TokenStore
from expense_tracker.infrastructure.health import check_database, database_backend, table_counts
from expense_tracker.shared.config import AppConfig
from expense_tracker.shared.logging import logger


def _now() -> str:
    return datetime.now(UTC).isoformat()


class MiscController:
    def __init__(
        self,
        *,
        tokens: TokenStore,
        session_factory: Callable[[], Session],
        config: AppConfig,
    ) -> None:
        self._tokens = tokens
        self._session_factory = session_factory
        self._config = config

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/api/health/simple", view_func=self.health_simple, methods=["GET"])
        bp.add_url_rule("/api/health/db", view_func=self.health_db, methods=["GET"])
        return bp

    def health(self):
        config = self._config
        environment: dict[str, object] = {
            "app_env": config.app_env,
            "credential_seed_configured": bool(
                config.auth.admin_password_hash or config.auth.admin_password
            ),
            "token_sweeper_enabled": config.auth.sweeper_enabled,
        }
        status: dict[str, object] = {
            "ok": True,
            "timestamp": _now(),
            "environment": environment,
            "auth": {"active_tokens": self._tokens.active_count},
        }
        db = self._session_factory()
        try:
            status["tables"] = table_counts(db)
            environment["database"] = database_backend(db)
            status["database"] = "ok"
        except Exception as exc:
            logger.error(f"health: database check failed ({type(exc).__name__})")
            status["ok"] = False
            status["database"] = "error"
        finally:
            db.close()
        return jsonify(status), 200 if status["ok"] else 503

    def health_simple(self):
        return jsonify({"ok": True, "timestamp": _now()})

    def health_db(self):
        try:
            check_database(self._session_factory)
        except Exception as exc:
            logger.error(f"health.db: database unreachable ({type(exc).__name__})")
            return jsonify({"ok": False, "database": "error"}), 503
        return jsonify({"ok": True, "database": "ok"})


__all__ = ["MiscController"]
