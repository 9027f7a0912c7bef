# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import atexit
import os

from flask import Flask
from flask_cors import CORS

from expense_tracker.infrastructure.auth.credential_setup import seed_admin_credential
from expense_tracker.infrastructure.container import Container, container as default_container
from expense_tracker.infrastructure.db import init_db
from expense_tracker.infrastructure.unit_of_work import unit_of_work_scope
from expense_tracker.interfaces.http.auth_guard import AUTH_GATE_EXTENSION
from expense_tracker.services.catalog_service import seed_defaults
from expense_tracker.shared.logging import logger, setup_logging
from expense_tracker.shared.middleware.error_handler import configure_error_handling
from expense_tracker.shared.middleware.request_logger import configure_request_logging


def _seed_catalog(container: Container) -> None:
    with unit_of_work_scope(container.session_factory) as db:
        created = seed_defaults(db)
    if any(created.values()):
        logger.info(f"seed: default catalog created {created}")


def _start_sweeper(container: Container) -> None:
    if not container.config.auth.sweeper_enabled:
        logger.info("tokens.sweeper: disabled by configuration")
        return
    container.token_sweeper.start()
    atexit.register(container.token_sweeper.stop)


def create_app(container: Container | None = None) -> Flask:
    container = container or default_container
    config = container.config

    init_db(container.engine)
    setup_logging(debug_mode=config.debug_logging)
    for warning in config.security_warnings():
        logger.warning(f"config: {warning}")

    seed_admin_credential(
        container.credential_repository, container.password_hasher, config.auth
    )
    _seed_catalog(container)
    container.token_store.restore_from_durable_store()
    _start_sweeper(container)

    app = Flask(__name__)
    configure_error_handling(app)
    configure_request_logging(app)

    app.config.update(SECRET_KEY=config.secret_key)
    app.extensions[AUTH_GATE_EXTENSION] = container.auth_gate

    CORS(
        app,
        resources={r"/api/*": {"origins": config.security.allowed_origins}},
        expose_headers=["X-Request-ID"],
        allow_headers=["Content-Type", "Authorization", "X-Auth-Token", "X-Request-ID"],
    )
    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.expenses_controller.as_blueprint())
    app.register_blueprint(container.categories_controller.as_blueprint())
    app.register_blueprint(container.sources_controller.as_blueprint())
    app.register_blueprint(container.budget_controller.as_blueprint())
    app.register_blueprint(container.analytics_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cache-Control", "no-store")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(
        f"Flask app initialized (env={config.app_env}, "
        f"tokens={container.token_store.active_count})"
    )
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=int(os.environ.get("PORT", "3000")), debug=True)
