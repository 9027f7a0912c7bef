# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import re
import secrets
import time

from flask import Flask, Request, Response, g, request

from expense_tracker.shared.config import load_config
from expense_tracker.shared.logging import (
    clear_correlation_id,
    get_correlation_id,
    logger,
    set_correlation_id,
)

REQUEST_ID_HEADER = "X-Request-ID"

_SECRET_HEADERS = frozenset({"authorization", "cookie", "x-auth-token"})
# Client supplied ids are echoed back; anything else is replaced
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9_\-.]{1,64}$")
# Polled by load balancers; logged at debug only
_QUIET_PATHS = frozenset({"/api/health/simple"})


def client_ip(req: Request | None = None) -> str:
    req = req if req is not None else request
    forwarded = req.headers.get("X-Forwarded-For", "").split(",")[0].strip()
    return forwarded or req.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def _header_summary() -> dict[str, str]:
    return {
        key: _fingerprint(value) if key.lower() in _SECRET_HEADERS else value
        for key, value in request.headers.items()
    }


def _request_id() -> str:
    supplied = request.headers.get(REQUEST_ID_HEADER, "")
    return supplied if _REQUEST_ID_RE.match(supplied) else secrets.token_hex(6)


def configure_request_logging(app: Flask) -> None:
    """Correlation ids and one log line per request/response pair.

    Auth header values never reach the log; in debug mode they appear as a
    short sha256 fingerprint so two requests can be matched to one token.
    """

    debug_mode = load_config().debug_logging

    @app.before_request
    def _before_request() -> None:
        set_correlation_id(_request_id())
        g.request_started = time.perf_counter()

        level = "DEBUG" if request.path in _QUIET_PATHS else "INFO"
        if debug_mode:
            logger.log(
                level,
                f"-> {request.method} {request.full_path.rstrip('?')} from {client_ip()} "
                f"headers={_header_summary()} body_size={request.content_length or 0}",
            )
        else:
            logger.log(level, f"-> {request.method} {request.path} from {client_ip()}")

    @app.after_request
    def _after_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        response.headers[REQUEST_ID_HEADER] = get_correlation_id()

        level = "DEBUG" if request.path in _QUIET_PATHS else "INFO"
        if response.status_code >= 500:
            level = "ERROR"
        logger.log(
            level,
            f"<- {request.method} {request.path} status={response.status_code} "
            f"duration={elapsed_ms:.1f}ms auth={g.get('auth_outcome', '-')}",
        )
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request error: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "client_ip", "configure_request_logging"]
