from __future__ import annotations

from datetime import date as date_type
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ExpenseRequestDTO(BaseModel):
    title: str = Field(min_length=1, max_length=128)
    description: str | None = Field(None, max_length=2000)
    amount: Decimal = Field(gt=0, max_digits=14, decimal_places=2)
    date: date_type
    category_id: int = Field(validation_alias=AliasChoices("category_id", "categoryId"))
    source_id: int = Field(validation_alias=AliasChoices("source_id", "sourceId"))

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title cannot be empty")
        return value


class ExpenseFilterDTO(BaseModel):
    start_date: date_type | None = Field(None, validation_alias=AliasChoices("start_date", "startDate"))
    end_date: date_type | None = Field(None, validation_alias=AliasChoices("end_date", "endDate"))
    category_id: int | None = Field(None, validation_alias=AliasChoices("category_id", "categoryId"))
    source_id: int | None = Field(None, validation_alias=AliasChoices("source_id", "sourceId"))
