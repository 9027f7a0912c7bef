# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from expense_tracker.application.services.auth_gate import AuthGate
from expense_tracker.application.services.credential_service import CredentialService
from expense_tracker.application.services.password_hashing import WerkzeugPasswordHasher
from expense_tracker.application.services.token_store import TokenStore
from expense_tracker.application.services.token_sweeper import TokenSweeper
from expense_tracker.infrastructure.audit import AuditTrail
from expense_tracker.infrastructure.db import ENGINE, SessionFactory
from expense_tracker.infrastructure.db.models import Category, Source
from expense_tracker.infrastructure.repositories.auth_tokens import SqlAlchemyTokenMirror
from expense_tracker.infrastructure.repositories.credentials import SqlAlchemyCredentialRepository
from expense_tracker.interfaces.http.controllers.analytics_controller import AnalyticsController
from expense_tracker.interfaces.http.controllers.auth_controller import AuthController
from expense_tracker.interfaces.http.controllers.budget_controller import BudgetController
from expense_tracker.interfaces.http.controllers.catalog_controller import CatalogController
from expense_tracker.interfaces.http.controllers.expenses_controller import ExpensesController
from expense_tracker.interfaces.http.controllers.misc_controller import MiscController
from expense_tracker.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
        session_factory: Callable[[], Session] | None = None,
    ) -> None:
        # An engine alone gets its own sessionmaker; a sessionmaker lends its bind
        self.config = config or load_config()
        if session_factory is None:
            session_factory = (
                sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
                if engine is not None
                else SessionFactory
            )
        if engine is None:
            bind = getattr(session_factory, "kw", {}).get("bind")
            engine = bind if isinstance(bind, Engine) else ENGINE
        self.engine = engine
        self.session_factory = session_factory

    @cached_property
    def audit_trail(self) -> AuditTrail:
        return AuditTrail(self.session_factory)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_mirror(self) -> SqlAlchemyTokenMirror:
        return SqlAlchemyTokenMirror(self.session_factory)

    @cached_property
    def credential_repository(self) -> SqlAlchemyCredentialRepository:
        return SqlAlchemyCredentialRepository(self.session_factory)

    @cached_property
    def token_store(self) -> TokenStore:
        return TokenStore(
            self.token_mirror,
            max_age=timedelta(seconds=self.config.auth.token_max_age),
        )

    @cached_property
    def token_sweeper(self) -> TokenSweeper:
        return TokenSweeper(self.token_store, interval_seconds=self.config.auth.sweep_interval)

    @cached_property
    def auth_gate(self) -> AuthGate:
        return AuthGate(self.token_store)

    @cached_property
    def credential_service(self) -> CredentialService:
        return CredentialService(
            tokens=self.token_store,
            credentials=self.credential_repository,
            password_hasher=self.password_hasher,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(credential_service=self.credential_service, audit=self.audit_trail)

    @cached_property
    def expenses_controller(self) -> ExpensesController:
        return ExpensesController(session_factory=self.session_factory)

    @cached_property
    def categories_controller(self) -> CatalogController:
        return CatalogController(
            model=Category, url_prefix="/api/categories", session_factory=self.session_factory
        )

    @cached_property
    def sources_controller(self) -> CatalogController:
        return CatalogController(
            model=Source, url_prefix="/api/sources", session_factory=self.session_factory
        )

    @cached_property
    def budget_controller(self) -> BudgetController:
        return BudgetController(session_factory=self.session_factory)

    @cached_property
    def analytics_controller(self) -> AnalyticsController:
        return AnalyticsController(session_factory=self.session_factory)

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(
            tokens=self.token_store, session_factory=self.session_factory, config=self.config
        )


container = Container()
