# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from expense_tracker.domain.auth.entities import Token
from expense_tracker.domain.auth.repositories import TokenMirror
from expense_tracker.infrastructure.db.models import AuthToken
from expense_tracker.infrastructure.unit_of_work import storage_scope


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _to_domain(row: AuthToken) -> Token:
    return Token(
        value=row.token,
        issued_at=_as_utc(row.created_at),
        expires_at=_as_utc(row.expires_at),
    )


class SqlAlchemyTokenMirror(TokenMirror):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find(self, value: str) -> Token | None:
        with storage_scope(self._session_factory, "tokens.find") as session:
            row = session.scalars(select(AuthToken).where(AuthToken.token == value)).first()
            return _to_domain(row) if row else None

    def add(self, token: Token) -> None:
        with storage_scope(self._session_factory, "tokens.add") as session:
            session.add(
                AuthToken(
                    token=token.value,
                    created_at=token.issued_at,
                    expires_at=token.expires_at,
                )
            )

    def delete(self, value: str) -> None:
        with storage_scope(self._session_factory, "tokens.delete") as session:
            session.execute(delete(AuthToken).where(AuthToken.token == value))

    def list_active(self, now: datetime) -> list[Token]:
        with storage_scope(self._session_factory, "tokens.list_active") as session:
            rows = session.scalars(
                select(AuthToken)
                .where(or_(AuthToken.expires_at.is_(None), AuthToken.expires_at > now))
                .order_by(AuthToken.created_at.asc())
            ).all()
            return [_to_domain(row) for row in rows]

    def purge_expired(self, now: datetime, issued_before: datetime | None = None) -> int:
        condition = AuthToken.expires_at <= now
        if issued_before is not None:
            condition = or_(condition, AuthToken.created_at < issued_before)
        with storage_scope(self._session_factory, "tokens.purge_expired") as session:
            result = session.execute(delete(AuthToken).where(condition))
            return int(result.rowcount or 0)
