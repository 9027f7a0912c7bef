from __future__ import annotations

import pytest

from expense_tracker.application.services.password_hashing import WerkzeugPasswordHasher
from expense_tracker.infrastructure.auth.credential_setup import (
    CredentialSetupError,
    seed_admin_credential,
)
from expense_tracker.shared.config.settings import AuthConfig
from expense_tracker.tests.fakes import DeterministicHasher, InMemoryCredentialRepository


def _config(**overrides: object) -> AuthConfig:
    values = {"ADMIN_PASSWORD": None, "ADMIN_PASSWORD_HASH": None, **overrides}
    return AuthConfig(**values)  # type: ignore[arg-type]


def test_seeds_from_plaintext_password() -> None:
    repo = InMemoryCredentialRepository()

    assert seed_admin_credential(repo, DeterministicHasher(), _config(ADMIN_PASSWORD="pw"))
    assert repo.password_hash == "hashed:pw"


def test_hash_wins_over_plaintext() -> None:
    repo = InMemoryCredentialRepository()
    hashed = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000").hash("from-hash")

    seed_admin_credential(
        repo,
        DeterministicHasher(),
        _config(ADMIN_PASSWORD="pw", ADMIN_PASSWORD_HASH=hashed),
    )

    assert repo.password_hash == hashed


def test_existing_credential_is_never_overwritten() -> None:
    repo = InMemoryCredentialRepository("hashed:changed-at-runtime")

    assert not seed_admin_credential(repo, DeterministicHasher(), _config(ADMIN_PASSWORD="pw"))
    assert repo.password_hash == "hashed:changed-at-runtime"


def test_nothing_configured_leaves_store_empty() -> None:
    repo = InMemoryCredentialRepository()

    assert not seed_admin_credential(repo, DeterministicHasher(), _config())
    assert repo.password_hash is None


def test_foreign_hash_format_is_refused() -> None:
    repo = InMemoryCredentialRepository()
    bcrypt_hash = "$2b$10$abcdefghijklmnopqrstuuABCDEFGHIJKLMNOPQRSTUVWXYZ01234"

    with pytest.raises(CredentialSetupError):
        seed_admin_credential(
            repo, DeterministicHasher(), _config(ADMIN_PASSWORD_HASH=bcrypt_hash)
        )


def test_werkzeug_hasher_round_trip() -> None:
    hasher = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000")
    hashed = hasher.hash("s3cret")

    assert hashed != "s3cret"
    assert hasher.verify("s3cret", hashed)
    assert not hasher.verify("other", hashed)
    assert not hasher.verify("s3cret", "")
    assert not hasher.verify("s3cret", "not-a-hash")
