# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from expense_tracker.application.services.auth_gate import extract_token
from expense_tracker.application.services.credential_service import CredentialService
from expense_tracker.infrastructure.audit import AuditAction, AuditTrail
from expense_tracker.interfaces.http.auth_guard import auth_required
from expense_tracker.interfaces.http.dto.auth import (
    AuthStatusDTO,
    ChangePasswordRequestDTO,
    LoginRequestDTO,
    LoginSuccessDTO,
    SuccessDTO,
)
from expense_tracker.shared.errors import AppError
from expense_tracker.shared.errors.validation import raise_validation_error
from expense_tracker.shared.logging import logger
from expense_tracker.shared.middleware.rate_limit import rate_limit
from expense_tracker.shared.middleware.request_logger import client_ip


class AuthController:
    def __init__(self, *, credential_service: CredentialService, audit: AuditTrail) -> None:
        self._credentials = credential_service
        self._audit = audit

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()
        try:
            token = self._credentials.login(dto.password)
        except AppError as exc:
            self._audit.record(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        self._audit.record(AuditAction.LOGIN_SUCCESS, ip_address=ip_address, success=True)
        return jsonify(LoginSuccessDTO(token=token).model_dump()), 200

    def logout(self) -> tuple[Response, int]:
        token = extract_token(request.headers)
        self._credentials.logout(token)

        self._audit.record(AuditAction.LOGOUT, ip_address=client_ip(), success=True)
        logger.info(f"auth.logout: ok had_token={int(bool(token))}")
        payload = SuccessDTO(message="Logged out successfully").model_dump()
        return jsonify(payload), 200

    def status(self) -> tuple[Response, int]:
        token = extract_token(request.headers)
        authenticated = self._credentials.is_authenticated(token)
        message = "Authenticated" if authenticated else "Not authenticated"
        return jsonify(AuthStatusDTO(authenticated=authenticated, message=message).model_dump()), 200

    @auth_required
    @rate_limit(limit=5, window_seconds=60.0)
    def change_password(self) -> tuple[Response, int]:
        try:
            dto = ChangePasswordRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()
        try:
            self._credentials.change_password(dto.current_password, dto.new_password)
        except AppError as exc:
            self._audit.record(
                AuditAction.PASSWORD_CHANGE_FAILED,
                ip_address=ip_address,
                details={"error": exc.code},
                success=False,
            )
            raise

        self._audit.record(AuditAction.PASSWORD_CHANGED, ip_address=ip_address, success=True)
        payload = SuccessDTO(message="Password changed successfully").model_dump()
        return jsonify(payload), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        # The web client posts to /api/login etc.; /api/auth/* serves the same endpoints
        for prefix in ("", "/auth"):
            bp.add_url_rule(f"{prefix}/login", "login", view_func=self.login, methods=["POST"])
            bp.add_url_rule(f"{prefix}/logout", "logout", view_func=self.logout, methods=["POST"])
            bp.add_url_rule(
                f"{prefix}/change-password",
                "change_password",
                view_func=self.change_password,
                methods=["POST"],
            )
        bp.add_url_rule("/auth/status", "status", view_func=self.status, methods=["GET"])
        return bp


__all__ = ["AuthController"]
