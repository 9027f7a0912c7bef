# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Process-wide registry of valid session tokens.

The in-memory index answers every validity check. The durable mirror is a
write-through copy used to recover the index after a restart, and as a
fallback when a token issued by another process instance is presented.
Mirror failures are logged and never block issue, validation or revocation.
"""

from __future__ import annotations

import secrets
import threading
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from expense_tracker.domain.auth.entities import Token
from expense_tracker.domain.auth.exceptions import StorageUnavailableError
from expense_tracker.domain.auth.repositories import TokenMirror
from expense_tracker.shared.logging import logger

TOKEN_BYTES = 32


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenStore:
    def __init__(
        self,
        mirror: TokenMirror,
        *,
        max_age: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
        token_bytes: int = TOKEN_BYTES,
    ) -> None:
        self._mirror = mirror
        self._max_age = max_age
        self._clock = clock
        self._token_bytes = token_bytes
        self._index: dict[str, Token] = {}
        # Tombstones: value -> True once the mirror delete is confirmed. Confirmed
        # ones are only kept while a mirror lookup that predates the delete is running
        self._revoked: dict[str, bool] = {}
        self._lookups_in_flight = 0
        self._lock = threading.Lock()

    @property
    def max_age(self) -> timedelta | None:
        return self._max_age

    @property
    def active_count(self) -> int:
        return len(self._index)

    @property
    def pending_revocations(self) -> int:
        return len(self._revoked)

    def issue(self) -> Token:
        token = Token(value=secrets.token_urlsafe(self._token_bytes), issued_at=self._clock())
        self._index[token.value] = token

        try:
            self._mirror.add(token)
            logger.info(
                f"tokens.issue: ok tok={token.preview} persisted=1 active={self.active_count}"
            )
        except StorageUnavailableError:
            logger.warning(
                f"tokens.issue: mirror write failed, memory only tok={token.preview} "
                f"active={self.active_count}"
            )
        return token

    def is_valid(self, value: str | None) -> bool:
        if not value:
            return False

        now = self._clock()
        token = self._index.get(value)
        if token is not None:
            if not token.is_expired(now, self._max_age):
                return True
            self._index.pop(value, None)
            logger.info(f"tokens.validate: expired in memory tok={value[:8]}…")
            return False

        if value in self._revoked:
            return False

        with self._lock:
            self._lookups_in_flight += 1
        try:
            try:
                token = self._mirror.find(value)
            except StorageUnavailableError:
                logger.warning(f"tokens.validate: mirror lookup failed tok={value[:8]}…")
                return False

            if token is None or token.is_expired(now, self._max_age):
                return False

            with self._lock:
                # A revoke may have completed while the mirror lookup was in flight
                if value in self._revoked:
                    return False
                self._index.setdefault(value, token)
            logger.info(f"tokens.validate: restored from mirror tok={token.preview}")
            return True
        finally:
            self._end_lookup()

    def revoke(self, value: str) -> bool:
        with self._lock:
            was_present = self._index.pop(value, None) is not None
            self._revoked[value] = False

        try:
            self._mirror.delete(value)
        except StorageUnavailableError:
            logger.warning(
                f"tokens.revoke: mirror delete failed, memory only tok={value[:8]}… "
                f"active={self.active_count}"
            )
            return was_present

        self._confirm_revocation(value)
        logger.info(
            f"tokens.revoke: ok tok={value[:8]}… present={int(was_present)} "
            f"active={self.active_count}"
        )
        return was_present

    def sweep_expired(self, max_age: timedelta | None = None) -> int:
        max_age = max_age if max_age is not None else self._max_age
        now = self._clock()

        with self._lock:
            expired = [
                value
                for value, token in list(self._index.items())
                if token.is_expired(now, max_age)
            ]
            for value in expired:
                self._index.pop(value, None)

        purged = 0
        try:
            purged = self._mirror.purge_expired(
                now, issued_before=now - max_age if max_age is not None else None
            )
        except StorageUnavailableError:
            logger.warning("tokens.sweep: mirror purge failed, memory swept only")

        self._retry_pending_revocations()

        if expired or purged:
            logger.info(
                f"tokens.sweep: removed memory={len(expired)} mirror={purged} "
                f"active={self.active_count}"
            )
        return len(expired)

    def restore_from_durable_store(self) -> int:
        now = self._clock()
        try:
            tokens = self._mirror.list_active(now)
        except StorageUnavailableError:
            logger.error("tokens.restore: mirror unavailable, starting with empty index")
            return 0

        restored = 0
        with self._lock:
            for token in tokens:
                if token.value in self._revoked or token.is_expired(now, self._max_age):
                    continue
                if token.value not in self._index:
                    self._index[token.value] = token
                    restored += 1

        logger.info(f"tokens.restore: loaded {restored} tokens, active={self.active_count}")
        return restored

    def _end_lookup(self) -> None:
        with self._lock:
            self._lookups_in_flight -= 1
            if not self._lookups_in_flight:
                self._drop_confirmed()

    def _confirm_revocation(self, value: str) -> None:
        with self._lock:
            if self._lookups_in_flight:
                self._revoked[value] = True
            else:
                self._revoked.pop(value, None)

    def _drop_confirmed(self) -> None:
        # Caller holds the lock
        for value in [value for value, done in self._revoked.items() if done]:
            del self._revoked[value]

    def _retry_pending_revocations(self) -> None:
        with self._lock:
            if not self._lookups_in_flight:
                self._drop_confirmed()
            pending = [value for value, done in self._revoked.items() if not done]

        for value in pending:
            try:
                self._mirror.delete(value)
            except StorageUnavailableError:
                logger.warning(f"tokens.sweep: revoked token still in mirror tok={value[:8]}…")
                continue
            self._confirm_revocation(value)


__all__ = ["TOKEN_BYTES", "TokenStore"]
