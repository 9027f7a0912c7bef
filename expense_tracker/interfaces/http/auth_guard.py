# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import wraps

from flask import current_app, g, jsonify, request

from expense_tracker.application.services.auth_gate import AuthGate
from expense_tracker.domain.auth.entities import ReasonCode
from expense_tracker.shared.logging import logger

AUTH_GATE_EXTENSION = "auth_gate"

_MESSAGES = {
    ReasonCode.NO_TOKEN: "Please log in to access this resource.",
    ReasonCode.INVALID_TOKEN: "Please log in again.",
}


def current_gate() -> AuthGate:
    return current_app.extensions[AUTH_GATE_EXTENSION]


def auth_required(f):
    @wraps(f)
    def inner(*a, **kw):
        decision = current_gate().authorize(request)
        if not decision.admitted:
            reason = decision.reason or ReasonCode.INVALID_TOKEN
            g.auth_outcome = reason.value
            logger.warning(
                f"auth.gate: rejected {reason.value} on {request.method} {request.path} "
                f"from {request.headers.get('X-Forwarded-For', request.remote_addr)}"
            )
            payload = {
                "error": "unauthorized",
                "code": reason.value,
                "message": _MESSAGES.get(reason, _MESSAGES[ReasonCode.INVALID_TOKEN]),
            }
            return jsonify(payload), 401

        g.auth_outcome = "ADMITTED"
        g.auth_token = decision.token
        logger.debug(f"auth.gate: admitted {request.method} {request.path}")
        return f(*a, **kw)

    return inner


__all__ = ["AUTH_GATE_EXTENSION", "auth_required", "current_gate"]
