# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_ENV = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)

_INSECURE_SECRETS = frozenset({"", "dev", "development", "test", "changeme"})


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///expenses.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _ENV


class AuthConfig(BaseSettings):
    # Seed for the credential row, used only while the row is missing
    admin_password_hash: str | None = Field(None, alias="ADMIN_PASSWORD_HASH")
    admin_password: str | None = Field(None, alias="ADMIN_PASSWORD")

    # Seconds; tokens carry no expiry of their own, the sweeper ages them out
    token_max_age: int = Field(7 * 24 * 60 * 60, ge=60, alias="TOKEN_MAX_AGE")
    sweep_interval: float = Field(60 * 60, ge=1.0, alias="TOKEN_SWEEP_INTERVAL")
    sweeper_enabled: bool = Field(True, alias="TOKEN_SWEEPER_ENABLED")

    model_config = _ENV


class SecurityConfig(BaseSettings):
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, gt=0, alias="RL_WINDOW")

    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _ENV

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    # Sections are settings classes of their own so their aliases read the environment
    database: DatabaseConfig = Field(default_factory=lambda: DatabaseConfig())  # type: ignore[call-arg]
    auth: AuthConfig = Field(default_factory=lambda: AuthConfig())  # type: ignore[call-arg]
    security: SecurityConfig = Field(default_factory=lambda: SecurityConfig())  # type: ignore[call-arg]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _refuse_insecure_production(self) -> "AppConfig":
        # Runs before logging is configured, hence stderr
        if self.is_production() and self.secret_key.strip().lower() in _INSECURE_SECRETS:
            print(
                "\nCRITICAL: refusing to start with an insecure SECRET_KEY in production.\n"
                "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)
        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def security_warnings(self) -> list[str]:
        """Deployment smells worth a warning in production; empty elsewhere."""

        if not self.is_production():
            return []

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("CORS allows any origin (ALLOWED_ORIGINS=*)")
        if not self.security.enable_hsts:
            warnings.append("HSTS is disabled")
        if not self.security.enable_rate_limit:
            warnings.append("login rate limiting is disabled")
        if self.auth.admin_password:
            warnings.append("ADMIN_PASSWORD is set in plaintext, prefer ADMIN_PASSWORD_HASH")
        return warnings


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "AuthConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
