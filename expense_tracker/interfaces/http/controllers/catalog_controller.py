# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from flask import Blueprint, jsonify, request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.unit_of_work import storage_scope
from expense_tracker.interfaces.http.auth_guard import auth_required
from expense_tracker.interfaces.http.dto.catalog import CatalogItemDTO
from expense_tracker.services.catalog_service import (
    CatalogModel,
    create_item,
    delete_item,
    entity_name,
    list_items,
    update_item,
)
from expense_tracker.shared.errors.validation import raise_validation_error


class CatalogController:
    """CRUD endpoints for one catalog table (categories or sources)."""

    def __init__(
        self,
        *,
        model: CatalogModel,
        url_prefix: str,
        session_factory: Callable[[], Session],
    ) -> None:
        self._model = model
        self._url_prefix = url_prefix
        self._session_factory = session_factory
        self._entity = entity_name(model)

    def as_blueprint(self) -> Blueprint:
        name = self._url_prefix.strip("/").replace("/", "_")
        bp = Blueprint(name, __name__, url_prefix=self._url_prefix)
        bp.add_url_rule("", view_func=self.list_items, methods=["GET"])
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("/<int:item_id>", view_func=self.update, methods=["PUT"])
        bp.add_url_rule("/<int:item_id>", view_func=self.delete, methods=["DELETE"])
        return bp

    def _parse_body(self) -> CatalogItemDTO:
        try:
            return CatalogItemDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

    @auth_required
    def list_items(self):
        with storage_scope(self._session_factory, f"{self._entity}.list") as db:
            return jsonify(list_items(db, self._model))

    @auth_required
    def create(self):
        dto = self._parse_body()
        with storage_scope(self._session_factory, f"{self._entity}.create") as db:
            result = create_item(db, self._model, **dto.model_dump())
        return jsonify(result), 201

    @auth_required
    def update(self, item_id: int):
        dto = self._parse_body()
        with storage_scope(self._session_factory, f"{self._entity}.update") as db:
            result = update_item(db, self._model, item_id, **dto.model_dump())
        return jsonify(result)

    @auth_required
    def delete(self, item_id: int):
        with storage_scope(self._session_factory, f"{self._entity}.delete") as db:
            delete_item(db, self._model, item_id)
        return jsonify({"success": True})


__all__ = ["CatalogController"]
