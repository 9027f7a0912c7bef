from __future__ import annotations

from expense_tracker.shared.logging.sensitive_filter import sanitize_message, sanitize_record


def test_redacts_bearer_and_custom_header_tokens() -> None:
    token = "Zq0u3mX7pQ9vY2kL5nB8cR1tW4eA6sD0fG3hJ7kL9zx"

    assert token not in sanitize_message(f"Authorization: Bearer {token}")
    assert token not in sanitize_message(f"x-auth-token={token}")
    assert token not in sanitize_message(f"token: {token}")


def test_redacts_passwords_and_werkzeug_hashes() -> None:
    hashed = "scrypt:32768:8:1$Q1xw9bXb4dFZt3qS$" + "ab" * 32

    assert "hunter22" not in sanitize_message("password=hunter22")
    out = sanitize_message(f"stored {hashed}")
    assert "ab" * 32 not in out
    assert "***REDACTED***" in out


def test_leaves_token_previews_alone() -> None:
    assert sanitize_message("tokens.issue: ok tok=abcd1234…") == "tokens.issue: ok tok=abcd1234…"


def test_sanitize_record_rewrites_message_in_place() -> None:
    record = {"message": "password: supersecret"}

    assert sanitize_record(record) is True
    assert "supersecret" not in record["message"]
