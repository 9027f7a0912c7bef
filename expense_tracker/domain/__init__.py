# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth import (
    AuthDecision,
    CredentialRepository,
    PasswordHasher,
    ReasonCode,
    Token,
    TokenMirror,
)

__all__ = [
    "AuthDecision",
    "CredentialRepository",
    "PasswordHasher",
    "ReasonCode",
    "Token",
    "TokenMirror",
]
