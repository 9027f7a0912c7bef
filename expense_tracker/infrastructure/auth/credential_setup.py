# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from expense_tracker.domain.auth.repositories import CredentialRepository, PasswordHasher
from expense_tracker.shared.config.settings import AuthConfig
from expense_tracker.shared.logging import logger


class CredentialSetupError(Exception):
    pass


def _looks_like_werkzeug_hash(value: str) -> bool:
    method, _, rest = value.partition("$")
    return bool(rest) and method.split(":", 1)[0] in ("scrypt", "pbkdf2")


def seed_admin_credential(
    credentials: CredentialRepository,
    password_hasher: PasswordHasher,
    config: AuthConfig,
) -> bool:
    """Write the configured administrator credential when none is stored yet.

    ``ADMIN_PASSWORD_HASH`` wins over ``ADMIN_PASSWORD``. Once a credential row
    exists the configuration is ignored: the row is changed only through the
    change-password endpoint.
    """

    if credentials.get_hash():
        logger.info("credential_setup: credential already stored, configuration ignored")
        return False

    if config.admin_password_hash:
        if not _looks_like_werkzeug_hash(config.admin_password_hash):
            raise CredentialSetupError(
                "ADMIN_PASSWORD_HASH must be a werkzeug scrypt or pbkdf2 hash"
            )
        password_hash = config.admin_password_hash
        source = "ADMIN_PASSWORD_HASH"
    elif config.admin_password:
        password_hash = password_hasher.hash(config.admin_password)
        source = "ADMIN_PASSWORD"
    else:
        logger.warning(
            "credential_setup: no ADMIN_PASSWORD_HASH or ADMIN_PASSWORD configured, "
            "login is disabled until a credential is stored"
        )
        return False

    created = credentials.initialize(password_hash)
    if created:
        logger.info(f"credential_setup: credential seeded from {source}")
    return created


__all__ = ["CredentialSetupError", "seed_admin_credential"]
