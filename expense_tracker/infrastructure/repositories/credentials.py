# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from expense_tracker.domain.auth.repositories import CredentialRepository
from expense_tracker.infrastructure.db.models import CREDENTIAL_ROW_ID, AdminCredential
from expense_tracker.infrastructure.unit_of_work import storage_scope
from expense_tracker.shared.errors import ConflictError


class SqlAlchemyCredentialRepository(CredentialRepository):
    """Single-row store for the administrator password hash."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def get_hash(self) -> str | None:
        with storage_scope(self._session_factory, "credential.get") as session:
            row = session.get(AdminCredential, CREDENTIAL_ROW_ID)
            return row.password_hash if row else None

    def initialize(self, password_hash: str) -> bool:
        try:
            with storage_scope(self._session_factory, "credential.initialize") as session:
                if session.get(AdminCredential, CREDENTIAL_ROW_ID) is not None:
                    return False
                session.add(AdminCredential(id=CREDENTIAL_ROW_ID, password_hash=password_hash))
        except ConflictError:
            # Another worker seeded the row between the check and the insert
            return False
        return True

    def replace_hash(self, expected_hash: str, new_hash: str) -> bool:
        # Compare-and-swap in a single UPDATE: a concurrent change makes rowcount 0
        with storage_scope(self._session_factory, "credential.replace") as session:
            result = session.execute(
                update(AdminCredential)
                .where(
                    AdminCredential.id == CREDENTIAL_ROW_ID,
                    AdminCredential.password_hash == expected_hash,
                )
                .values(password_hash=new_hash, updated_at=datetime.now(UTC))
            )
            return result.rowcount == 1
