# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading

from expense_tracker.application.services.token_store import TokenStore
from expense_tracker.domain.auth.exceptions import (
    CredentialChangeConflictError,
    CredentialNotConfiguredError,
    InvalidCredentialsError,
)
from expense_tracker.domain.auth.repositories import CredentialRepository, PasswordHasher
from expense_tracker.shared.logging import logger


class CredentialService:
    def __init__(
        self,
        *,
        tokens: TokenStore,
        credentials: CredentialRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._tokens = tokens
        self._credentials = credentials
        self._password_hasher = password_hasher
        self._change_lock = threading.Lock()

    def _stored_hash(self) -> str:
        stored = self._credentials.get_hash()
        if not stored:
            logger.error("auth.credential: no administrator credential configured")
            raise CredentialNotConfiguredError()
        return stored

    def login(self, password: str) -> str:
        stored = self._stored_hash()
        if not self._password_hasher.verify(password, stored):
            raise InvalidCredentialsError()

        token = self._tokens.issue()
        logger.info(f"auth.login: ok tok={token.preview} active={self._tokens.active_count}")
        return token.value

    def logout(self, token: str | None) -> None:
        if token:
            self._tokens.revoke(token)

    def is_authenticated(self, token: str | None) -> bool:
        return self._tokens.is_valid(token)

    def change_password(self, current: str, new: str) -> None:
        with self._change_lock:
            stored = self._stored_hash()
            if not self._password_hasher.verify(current, stored):
                raise InvalidCredentialsError()

            new_hash = self._password_hasher.hash(new)
            if not self._credentials.replace_hash(stored, new_hash):
                logger.warning("auth.change_password: credential changed concurrently")
                raise CredentialChangeConflictError()

        logger.info("auth.change_password: ok")


__all__ = ["CredentialService"]
