from .base import (
    AppError,
    ConflictError,
    DomainError,
    DuplicateNameError,
    EntityInUseError,
    InfrastructureError,
    NotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "ConflictError",
    "DomainError",
    "DuplicateNameError",
    "EntityInUseError",
    "InfrastructureError",
    "NotFoundError",
    "ReferenceNotFoundError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
