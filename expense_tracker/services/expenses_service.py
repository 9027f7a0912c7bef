# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from expense_tracker.infrastructure.db.models import Category, Expense, Source
from expense_tracker.services.catalog_service import serialize_item
from expense_tracker.shared.errors import NotFoundError, ReferenceNotFoundError
from expense_tracker.shared.logging import logger


def serialize_expense(e: Expense) -> dict:
    return {
        "id": e.id,
        "title": e.title,
        "description": e.description,
        "amount": float(e.amount),
        "date": e.date.isoformat(),
        "category_id": e.category_id,
        "source_id": e.source_id,
        "category": serialize_item(e.category) if e.category else None,
        "source": serialize_item(e.source) if e.source else None,
        "created_at": e.created_at.isoformat() if e.created_at else None,
        "updated_at": e.updated_at.isoformat() if e.updated_at else None,
    }


def _resolve_refs(db: Session, category_id: int, source_id: int) -> tuple[Category, Source]:
    category = db.get(Category, category_id)
    if category is None:
        raise ReferenceNotFoundError("category_id", category_id)
    source = db.get(Source, source_id)
    if source is None:
        raise ReferenceNotFoundError("source_id", source_id)
    return category, source


def _get_or_404(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if expense is None:
        raise NotFoundError("expense", expense_id)
    return expense


def list_expenses(
    db: Session,
    *,
    start_date: date | None = None,
    end_date: date | None = None,
    category_id: int | None = None,
    source_id: int | None = None,
) -> list[dict]:
    stmt = select(Expense).options(joinedload(Expense.category), joinedload(Expense.source))
    # The date range applies only when both bounds are given
    if start_date is not None and end_date is not None:
        stmt = stmt.where(Expense.date >= start_date, Expense.date <= end_date)
    if category_id is not None:
        stmt = stmt.where(Expense.category_id == category_id)
    if source_id is not None:
        stmt = stmt.where(Expense.source_id == source_id)
    stmt = stmt.order_by(Expense.date.desc(), Expense.id.desc())

    return [serialize_expense(e) for e in db.scalars(stmt).unique().all()]


def create_expense(
    db: Session,
    *,
    title: str,
    description: str | None,
    amount: Decimal,
    date: date,
    category_id: int,
    source_id: int,
) -> dict:
    category, source = _resolve_refs(db, category_id, source_id)
    expense = Expense(
        title=title,
        description=description,
        amount=amount,
        date=date,
        category=category,
        source=source,
    )
    db.add(expense)
    db.flush()
    logger.info(f"expense.create: ok (id={expense.id}, amount={amount}, date={date.isoformat()})")
    return serialize_expense(expense)


def update_expense(
    db: Session,
    expense_id: int,
    *,
    title: str,
    description: str | None,
    amount: Decimal,
    date: date,
    category_id: int,
    source_id: int,
) -> dict:
    expense = _get_or_404(db, expense_id)
    category, source = _resolve_refs(db, category_id, source_id)
    expense.title = title
    expense.description = description
    expense.amount = amount
    expense.date = date
    expense.category = category
    expense.source = source
    db.flush()
    logger.info(f"expense.update: ok (id={expense_id})")
    return serialize_expense(expense)


def delete_expense(db: Session, expense_id: int) -> None:
    expense = _get_or_404(db, expense_id)
    db.delete(expense)
    db.flush()
    logger.info(f"expense.delete: ok (id={expense_id})")


__all__ = [
    "create_expense",
    "delete_expense",
    "list_expenses",
    "serialize_expense",
    "update_expense",
]
