# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from time import perf_counter

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.unit_of_work import storage_scope
from expense_tracker.interfaces.http.auth_guard import auth_required
from expense_tracker.interfaces.http.dto.expenses import ExpenseFilterDTO, ExpenseRequestDTO
from expense_tracker.services.expenses_service import (
    create_expense,
    delete_expense,
    list_expenses,
    update_expense,
)
from expense_tracker.shared.errors.validation import raise_validation_error
from expense_tracker.shared.logging import logger


def _parse_body() -> ExpenseRequestDTO:
    try:
        return ExpenseRequestDTO.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


class ExpensesController:
    def __init__(self, *, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("expenses", __name__, url_prefix="/api")
        bp.add_url_rule("/expenses", view_func=self.list_expenses, methods=["GET"])
        bp.add_url_rule("/expenses", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/expenses/<int:expense_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/expenses/<int:expense_id>", view_func=self.delete, methods=["DELETE"])
        return bp

    @auth_required
    def list_expenses(self):
        t0 = perf_counter()
        try:
            filters = ExpenseFilterDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        with storage_scope(self._session_factory, "expenses.list") as db:
            items = list_expenses(db, **filters.model_dump())
        dt = (perf_counter() - t0) * 1000
        logger.info(f"expenses.list: ok (n={len(items)}, dt_ms={dt:.0f})")
        return jsonify(items)

    @auth_required
    def create(self):
        dto = _parse_body()
        with storage_scope(self._session_factory, "expenses.create") as db:
            result = create_expense(db, **dto.model_dump())
        return jsonify(result), 201

    @auth_required
    def update(self, expense_id: int):
        dto = _parse_body()
        with storage_scope(self._session_factory, "expenses.update") as db:
            result = update_expense(db, expense_id, **dto.model_dump())
        return jsonify(result)

    @auth_required
    def delete(self, expense_id: int):
        with storage_scope(self._session_factory, "expenses.delete") as db:
            delete_expense(db, expense_id)
        return jsonify({"success": True})


__all__ = ["ExpensesController"]
