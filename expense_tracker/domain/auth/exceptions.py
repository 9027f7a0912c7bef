# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from expense_tracker.shared.errors.base import DomainError, InfrastructureError

from .entities import ReasonCode


class InvalidCredentialsError(DomainError):
    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["code"] = ReasonCode.INVALID_CREDENTIALS.value
        return payload


class CredentialChangeConflictError(DomainError):
    default_code = "credential_changed_concurrently"
    default_status = HTTPStatus.CONFLICT


class CredentialNotConfiguredError(InfrastructureError):
    def __init__(self) -> None:
        super().__init__(code="credential_not_configured")


class StorageUnavailableError(InfrastructureError):
    def __init__(self, operation: str) -> None:
        super().__init__(
            code="storage_unavailable",
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            context={"operation": operation},
        )
        self.operation = operation

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["code"] = ReasonCode.STORAGE_UNAVAILABLE.value
        return payload
