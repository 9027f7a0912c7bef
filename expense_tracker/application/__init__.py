# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.auth_gate import AuthGate, extract_token
from .services.credential_service import CredentialService
from .services.token_store import TokenStore
from .services.token_sweeper import TokenSweeper

__all__ = [
    "AuthGate",
    "CredentialService",
    "TokenStore",
    "TokenSweeper",
    "extract_token",
]
