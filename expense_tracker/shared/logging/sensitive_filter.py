# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

REDACTED = "***REDACTED***"

# key = value / "key": "value" forms; group 1 keeps the key, group 3 the closing quote
_KEY_VALUE = r"(['\"]?{key}['\"]?\s*[:=]\s*['\"]?)({value})(['\"]?)"

_SENSITIVE_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    # Session tokens travel in either header; values are 43 chars of base64url
    (re.compile(r"(bearer\s+)([A-Za-z0-9_\-.]{20,})", re.IGNORECASE), rf"\1{REDACTED}"),
    (
        re.compile(
            _KEY_VALUE.format(key=r"(?:x-auth-token|auth[_-]?token|token)", value=r"[A-Za-z0-9_\-.]{20,}"),
            re.IGNORECASE,
        ),
        rf"\1{REDACTED}\3",
    ),
    # Plaintext passwords in request bodies and seed settings
    (
        re.compile(
            _KEY_VALUE.format(
                key=r"(?:current_|new_|admin_)?password(?:[_-]?hash)?", value=r"[^'\"\s,}]{6,}"
            ),
            re.IGNORECASE,
        ),
        rf"\1{REDACTED}\3",
    ),
    # werkzeug hashes: method$salt$digest
    (re.compile(r"((?:scrypt|pbkdf2):[^$\s]+\$)[^$\s]+\$[0-9a-f]{32,}"), rf"\1{REDACTED}"),
    (
        re.compile(_KEY_VALUE.format(key=r"secret[_-]?key", value=r"[^'\"\s]{8,}"), re.IGNORECASE),
        rf"\1{REDACTED}\3",
    ),
    # Server DSNs carry the database password
    (
        re.compile(r"((?:postgres(?:ql)?|mysql)(?:\+\w+)?://[^:/@\s]+:)[^@\s]+@"),
        rf"\1{REDACTED}@",
    ),
    (
        re.compile(r"(authorization\s*:\s*['\"]?)(?!bearer\s)([^'\"\s]{10,})", re.IGNORECASE),
        rf"\1{REDACTED}",
    ),
]


def sanitize_message(message: str) -> str:
    for pattern, replacement in _SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter: rewrites ``record["message"]`` and never drops the record."""

    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True


__all__ = ["REDACTED", "sanitize_message", "sanitize_record"]
