# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from expense_tracker.application.services.token_store import TokenStore
from expense_tracker.domain.auth.entities import AuthDecision, ReasonCode
from expense_tracker.shared.logging import logger

TOKEN_HEADER = "X-Auth-Token"
AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "bearer "


class HeaderCarrier(Protocol):
    @property
    def headers(self) -> Mapping[str, str]: ...


def extract_token(headers: Mapping[str, str]) -> str | None:
    """Return the presented token, preferring ``X-Auth-Token`` over a bearer header."""

    custom = (headers.get(TOKEN_HEADER) or "").strip()
    if custom:
        return custom

    authorization = (headers.get(AUTHORIZATION_HEADER) or "").strip()
    if authorization.lower().startswith(BEARER_PREFIX):
        bearer = authorization[len(BEARER_PREFIX):].strip()
        return bearer or None
    return None


class AuthGate:
    def __init__(self, tokens: TokenStore) -> None:
        self._tokens = tokens

    def authorize(self, request: HeaderCarrier) -> AuthDecision:
        token = extract_token(request.headers)
        if token is None:
            return AuthDecision.reject(ReasonCode.NO_TOKEN)

        try:
            valid = self._tokens.is_valid(token)
        except Exception:
            logger.exception(f"auth.gate: validation raised tok={token[:8]}…")
            valid = False

        if not valid:
            return AuthDecision.reject(ReasonCode.INVALID_TOKEN)
        return AuthDecision.admit(token)


__all__ = ["AuthGate", "HeaderCarrier", "TOKEN_HEADER", "extract_token"]
