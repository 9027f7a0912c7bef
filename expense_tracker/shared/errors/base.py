# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Business rule violation. Subclasses set ``default_code`` and ``default_status``."""

    default_code = "domain_error"
    default_status = HTTPStatus.BAD_REQUEST

    def __init__(
        self,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code or self.default_code,
            status=status or self.default_status,
            context=context,
        )


class InfrastructureError(AppError):
    """A backing service (database, filesystem) failed underneath a request."""

    def __init__(
        self,
        code: str = "infrastructure_error",
        *,
        status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(code=code, status=status, context=context)


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class NotFoundError(AppError):
    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(
            code=f"{entity}_not_found",
            status=HTTPStatus.NOT_FOUND,
            context={"id": entity_id},
        )


class ReferenceNotFoundError(AppError):
    def __init__(self, field: str, entity_id: int) -> None:
        super().__init__(
            code="reference_not_found",
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context={"field": field, "id": entity_id},
        )


class EntityInUseError(AppError):
    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(
            code=f"{entity}_in_use",
            status=HTTPStatus.CONFLICT,
            context={"id": entity_id},
        )


class DuplicateNameError(AppError):
    def __init__(self, entity: str, name: str) -> None:
        super().__init__(
            code=f"duplicate_{entity}",
            status=HTTPStatus.CONFLICT,
            context={"name": name},
        )


class ConflictError(AppError):
    """A write lost a race against a unique constraint."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code="conflict",
            status=HTTPStatus.CONFLICT,
            context={"operation": operation},
        )
