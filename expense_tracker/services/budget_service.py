# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.db.models import Budget, Expense
from expense_tracker.shared.errors import ValidationError
from expense_tracker.shared.logging import logger


def _check_period(year: int, month: int) -> None:
    if not 1 <= month <= 12 or not 1970 <= year <= 9999:
        raise ValidationError(
            context={
                "fields": ["month" if not 1 <= month <= 12 else "year"],
                "errors": [{"field": "period", "type": "out_of_range"}],
            }
        )


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def serialize_budget(b: Budget) -> dict:
    return {
        "id": b.id,
        "year": b.year,
        "month": b.month,
        "amount": float(b.amount),
        "updated_at": b.updated_at.isoformat() if b.updated_at else None,
    }


def _find(db: Session, year: int, month: int) -> Budget | None:
    return db.scalars(select(Budget).where(Budget.year == year, Budget.month == month)).first()


def get_budget(db: Session, year: int, month: int) -> dict:
    _check_period(year, month)
    row = _find(db, year, month)
    return serialize_budget(row) if row else {"amount": 0}


def upsert_budget(db: Session, *, year: int, month: int, amount: Decimal) -> dict:
    _check_period(year, month)
    row = _find(db, year, month)
    if row is None:
        row = Budget(year=year, month=month, amount=amount)
        db.add(row)
        op = "created"
    else:
        row.amount = amount
        op = "updated"
    db.flush()
    logger.info(f"budget.upsert: {op} (year={year}, month={month}, amount={amount})")
    return serialize_budget(row)


def spent_in_month(db: Session, year: int, month: int) -> Decimal:
    start, end = month_bounds(year, month)
    total = db.scalar(
        select(func.coalesce(func.sum(Expense.amount), 0)).where(
            Expense.date >= start, Expense.date <= end
        )
    )
    return Decimal(str(total or 0))


def usage_percentage(spent: Decimal, budget: Decimal) -> int:
    """Rounded share of the budget used, capped at 100; 0 when no budget is set."""

    if budget <= 0:
        return 0
    pct = (spent / budget * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return min(int(pct), 100)


def budget_summary(db: Session, year: int, month: int) -> dict:
    _check_period(year, month)
    row = _find(db, year, month)
    budget = Decimal(row.amount) if row else Decimal(0)
    spent = spent_in_month(db, year, month)
    return {
        "year": year,
        "month": month,
        "budget": float(budget),
        "spent": float(spent),
        "remaining": float(budget - spent),
        "percentage": usage_percentage(spent, budget),
        "over_budget": budget > 0 and spent > budget,
    }


__all__ = [
    "budget_summary",
    "get_budget",
    "month_bounds",
    "serialize_budget",
    "spent_in_month",
    "upsert_budget",
    "usage_percentage",
]
