# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from sqlalchemy.pool import StaticPool

from expense_tracker.shared.config import load_config
from expense_tracker.shared.config.settings import DatabaseConfig
from expense_tracker.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _engine_options(config: DatabaseConfig) -> dict[str, Any]:
    url = make_url(config.url)
    if url.get_backend_name() != "sqlite":
        return {
            "pool_pre_ping": True,
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
        }

    # Request threads and the sweeper thread share connections
    options: dict[str, Any] = {
        "connect_args": {"check_same_thread": False, "timeout": config.pool_timeout},
    }
    if url.database in (None, "", ":memory:"):
        # One connection, otherwise every checkout sees a fresh empty database
        options["poolclass"] = StaticPool
    return options


def build_engine(config: DatabaseConfig) -> Engine:
    engine = create_engine(config.url, echo=False, **_engine_options(config))
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine


def _apply_sqlite_pragmas(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        # ON DELETE RESTRICT on expense references depends on this
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=30000")
    except Exception:
        logger.exception("db: failed to apply SQLite pragmas")
    finally:
        cursor.close()


ENGINE: Engine = build_engine(load_config().database)

# Each repository call and each request handler opens its own short session
SessionFactory = sessionmaker(bind=ENGINE, autoflush=False, expire_on_commit=False)


def init_db(engine: Engine = ENGINE) -> None:
    # Registers the mapped tables on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"db: schema ensured on {engine.dialect.name}")
