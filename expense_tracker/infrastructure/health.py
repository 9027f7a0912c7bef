# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.db.models import AuthToken, Budget, Category, Expense, Source

_COUNTED_TABLES = {
    "expenses": Expense,
    "categories": Category,
    "sources": Source,
    "budgets": Budget,
    "auth_tokens": AuthToken,
}


def check_database(session_factory: Callable[[], Session]) -> bool:
    with session_factory() as db:
        db.execute(text("SELECT 1"))
    return True


def table_counts(db: Session) -> dict[str, int]:
    return {
        name: int(db.scalar(select(func.count()).select_from(model)) or 0)
        for name, model in _COUNTED_TABLES.items()
    }


def database_backend(db: Session) -> str:
    return db.get_bind().dialect.name


__all__ = ["check_database", "database_backend", "table_counts"]
