# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _field_path(loc: tuple[Any, ...]) -> str:
    # Model-level validators report an empty loc
    return ".".join(str(part) for part in loc) or "body"


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into ``{"fields": [...], "errors": [...]}``."""

    details: list[dict[str, Any]] = []
    for error in exc.errors(include_url=False, include_input=False):
        entry: dict[str, Any] = {
            "field": _field_path(tuple(error.get("loc", ()))),
            "type": error.get("type", "value_error"),
            "message": error.get("msg", ""),
        }
        if error.get("ctx"):
            entry["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        details.append(entry)

    return {
        "fields": sorted({entry["field"] for entry in details}),
        "errors": details,
    }


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
