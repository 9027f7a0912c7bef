# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum


class ReasonCode(str, Enum):
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


@dataclass(slots=True, frozen=True)
class Token:
    """One authenticated session. ``expires_at`` of ``None`` means never."""

    value: str
    issued_at: datetime
    expires_at: datetime | None = None

    def is_expired(self, now: datetime, max_age: timedelta | None = None) -> bool:
        if self.expires_at is not None and self.expires_at <= now:
            return True
        if max_age is not None and now - self.issued_at > max_age:
            return True
        return False

    @property
    def preview(self) -> str:
        return f"{self.value[:8]}…"


@dataclass(slots=True, frozen=True)
class AuthDecision:
    admitted: bool
    reason: ReasonCode | None = None
    token: str | None = None

    @classmethod
    def admit(cls, token: str) -> AuthDecision:
        return cls(admitted=True, token=token)

    @classmethod
    def reject(cls, reason: ReasonCode) -> AuthDecision:
        return cls(admitted=False, reason=reason)
