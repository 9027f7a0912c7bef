# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask

from expense_tracker.shared.errors import register_error_handler


def configure_error_handling(app: Flask) -> None:
    """JSON bodies for every error, including routing errors raised by werkzeug."""

    register_error_handler(app)
    # Category and source icons are emoji; keep them readable in responses
    app.json.ensure_ascii = False  # type: ignore[attr-defined]
    app.json.sort_keys = False  # type: ignore[attr-defined]
