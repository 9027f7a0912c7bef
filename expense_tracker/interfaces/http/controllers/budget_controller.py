# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.unit_of_work import storage_scope
from expense_tracker.interfaces.http.auth_guard import auth_required
from expense_tracker.interfaces.http.dto.budget import BudgetRequestDTO
from expense_tracker.services.budget_service import budget_summary, get_budget, upsert_budget
from expense_tracker.shared.errors.validation import raise_validation_error


class BudgetController:
    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("budget", __name__, url_prefix="/api/budget")
        bp.add_url_rule("", view_func=self.save, methods=["POST"])
        bp.add_url_rule("/<int:year>/<int:month>", view_func=self.get, methods=["GET"])
        bp.add_url_rule(
            "/<int:year>/<int:month>/summary", view_func=self.summary, methods=["GET"]
        )
        return bp

    @auth_required
    def get(self, year: int, month: int):
        with storage_scope(self._session_factory, "budget.get") as db:
            return jsonify(get_budget(db, year, month))

    @auth_required
    def save(self):
        try:
            dto = BudgetRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        with storage_scope(self._session_factory, "budget.save") as db:
            result = upsert_budget(db, **dto.model_dump())
        return jsonify(result)

    @auth_required
    def summary(self, year: int, month: int):
        with storage_scope(self._session_factory, "budget.summary") as db:
            return jsonify(budget_summary(db, year, month))


__all__ = ["BudgetController"]
