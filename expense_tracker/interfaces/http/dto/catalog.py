from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{3}([0-9a-fA-F]{3})?$")


class CatalogItemDTO(BaseModel):
    """Payload shared by categories and sources."""

    name: str = Field(min_length=1, max_length=64)
    color: str | None = Field(None, max_length=16)
    icon: str | None = Field(None, max_length=16)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name cannot be empty")
        return value

    @field_validator("color")
    @classmethod
    def validate_color(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if not _COLOR_RE.match(value):
            raise ValueError("Color must be a hex value like #EF4444")
        return value
