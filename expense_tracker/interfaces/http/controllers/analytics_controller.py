# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from flask import Blueprint, jsonify, request
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.unit_of_work import storage_scope
from expense_tracker.interfaces.http.auth_guard import auth_required
from expense_tracker.services.analytics_service import monthly_totals
from expense_tracker.shared.errors import ValidationError


def _year_arg() -> int:
    raw = (request.args.get("year") or "").strip()
    if not raw:
        return date.today().year
    if not raw.isdigit() or not 1970 <= int(raw) <= 9999:
        raise ValidationError(
            context={"fields": ["year"], "errors": [{"field": "year", "type": "int_parsing"}]}
        )
    return int(raw)


class AnalyticsController:
    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")
        bp.add_url_rule("/monthly", view_func=self.monthly, methods=["GET"])
        return bp

    @auth_required
    def monthly(self):
        year = _year_arg()
        with storage_scope(self._session_factory, "analytics.monthly") as db:
            return jsonify(monthly_totals(db, year))


__all__ = ["AnalyticsController"]
