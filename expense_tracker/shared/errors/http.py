# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from http import HTTPStatus

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from expense_tracker.shared.config import load_config
from expense_tracker.shared.logging import logger

from .base import AppError

_NON_WORD = re.compile(r"[^a-z0-9]+")


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def http_error_code(exc: HTTPException) -> str:
    """``Method Not Allowed`` -> ``method_not_allowed``."""

    return _NON_WORD.sub("_", (exc.name or "http_error").lower()).strip("_")


def register_error_handler(
    app: Flask, *, default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
) -> None:
    debug_mode = load_config().debug_logging

    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        logger.warning(
            f"Handled application error {exc.code} ({int(exc.status)}) "
            f"on {request.method} {request.path}"
        )
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        if exc.code is not None and exc.code < 400:
            # Routing redirects (trailing slash) keep their Location header
            return exc.get_response()
        response = jsonify({"error": http_error_code(exc)})
        if exc.code == HTTPStatus.METHOD_NOT_ALLOWED and exc.valid_methods:
            response.headers["Allow"] = ", ".join(exc.valid_methods)
        return response, exc.code or default_status

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"body_size={len(request.get_data(cache=True))}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")

        return jsonify({"error": "internal_error"}), default_status
