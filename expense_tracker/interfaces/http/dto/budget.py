from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class BudgetRequestDTO(BaseModel):
    year: int = Field(ge=1970, le=9999)
    month: int = Field(ge=1, le=12)
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
