from __future__ import annotations

from datetime import UTC, datetime, timedelta

from expense_tracker.domain.auth.entities import Token
from expense_tracker.domain.auth.exceptions import StorageUnavailableError
from expense_tracker.domain.auth.repositories import (
    CredentialRepository,
    PasswordHasher,
    TokenMirror,
)


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryTokenMirror(TokenMirror):
    def __init__(self) -> None:
        self.rows: dict[str, Token] = {}
        self.failing = False
        self.find_calls = 0

    def _check(self, operation: str) -> None:
        if self.failing:
            raise StorageUnavailableError(operation)

    def find(self, value: str) -> Token | None:
        self.find_calls += 1
        self._check("tokens.find")
        return self.rows.get(value)

    def add(self, token: Token) -> None:
        self._check("tokens.add")
        self.rows[token.value] = token

    def delete(self, value: str) -> None:
        self._check("tokens.delete")
        self.rows.pop(value, None)

    def list_active(self, now: datetime) -> list[Token]:
        self._check("tokens.list_active")
        return [t for t in self.rows.values() if t.expires_at is None or t.expires_at > now]

    def purge_expired(self, now: datetime, issued_before: datetime | None = None) -> int:
        self._check("tokens.purge_expired")
        doomed = [
            value
            for value, t in self.rows.items()
            if (t.expires_at is not None and t.expires_at <= now)
            or (issued_before is not None and t.issued_at < issued_before)
        ]
        for value in doomed:
            del self.rows[value]
        return len(doomed)


class InMemoryCredentialRepository(CredentialRepository):
    def __init__(self, password_hash: str | None = None) -> None:
        self.password_hash = password_hash
        self.replace_calls = 0

    def get_hash(self) -> str | None:
        return self.password_hash

    def initialize(self, password_hash: str) -> bool:
        if self.password_hash is not None:
            return False
        self.password_hash = password_hash
        return True

    def replace_hash(self, expected_hash: str, new_hash: str) -> bool:
        self.replace_calls += 1
        if self.password_hash != expected_hash:
            return False
        self.password_hash = new_hash
        return True


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"
