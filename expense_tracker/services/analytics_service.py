# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from expense_tracker.infrastructure.db.models import Category, Expense


def monthly_totals(db: Session, year: int) -> list[dict]:
    rows = db.execute(
        select(Expense.date, Expense.amount, Category.name)
        .join(Category, Expense.category_id == Category.id)
        .where(Expense.date >= date(year, 1, 1), Expense.date <= date(year, 12, 31))
    ).all()

    totals: list[Decimal] = [Decimal(0)] * 12
    by_category: list[dict[str, Decimal]] = [defaultdict(Decimal) for _ in range(12)]
    for day, amount, category in rows:
        idx = day.month - 1
        amount = Decimal(str(amount))
        totals[idx] += amount
        by_category[idx][category] += amount

    return [
        {
            "month": idx + 1,
            "total": float(totals[idx]),
            "categories": {name: float(v) for name, v in sorted(by_category[idx].items())},
        }
        for idx in range(12)
    ]


__all__ = ["monthly_totals"]
