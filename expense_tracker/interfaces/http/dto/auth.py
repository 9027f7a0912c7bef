from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field, field_validator


class LoginRequestDTO(BaseModel):
    password: str = Field(min_length=1, max_length=256)


class ChangePasswordRequestDTO(BaseModel):
    current_password: str = Field(
        min_length=1,
        max_length=256,
        validation_alias=AliasChoices("current_password", "currentPassword"),
    )
    new_password: str = Field(
        min_length=6,
        max_length=256,
        validation_alias=AliasChoices("new_password", "newPassword"),
    )

    @field_validator("new_password")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Password cannot be blank")
        return value


class LoginSuccessDTO(BaseModel):
    success: bool = True
    token: str


class AuthStatusDTO(BaseModel):
    authenticated: bool
    message: str


class SuccessDTO(BaseModel):
    success: bool = True
    message: str | None = None
