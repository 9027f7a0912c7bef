# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import AuthDecision, ReasonCode, Token
from .exceptions import (
    CredentialChangeConflictError,
    CredentialNotConfiguredError,
    InvalidCredentialsError,
    StorageUnavailableError,
)
from .repositories import CredentialRepository, PasswordHasher, TokenMirror

__all__ = [
    "AuthDecision",
    "CredentialChangeConflictError",
    "CredentialNotConfiguredError",
    "CredentialRepository",
    "InvalidCredentialsError",
    "PasswordHasher",
    "ReasonCode",
    "StorageUnavailableError",
    "Token",
    "TokenMirror",
]
