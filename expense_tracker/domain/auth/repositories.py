# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import Token


class TokenMirror(Protocol):
    """Durable write-through copy of the in-memory token index.

    Implementations raise ``StorageUnavailableError`` when the backing store
    cannot be reached.
    """

    def find(self, value: str) -> Token | None: ...
    def add(self, token: Token) -> None: ...
    def delete(self, value: str) -> None: ...
    def list_active(self, now: datetime) -> list[Token]: ...
    def purge_expired(self, now: datetime, issued_before: datetime | None = None) -> int: ...


class CredentialRepository(Protocol):
    def get_hash(self) -> str | None: ...
    def initialize(self, password_hash: str) -> bool: ...
    def replace_hash(self, expected_hash: str, new_hash: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
