# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from expense_tracker.domain.auth.exceptions import StorageUnavailableError
from expense_tracker.shared.errors import ConflictError
from expense_tracker.shared.logging import logger


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    """SQLAlchemy-backed unit of work: commit on success, rollback on error."""

    session_factory: Callable[[], Session]
    _session: Session | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        logger.debug("uow: session opened")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.warning(f"uow: rollback due to {exc_type.__name__}")
                self._session.rollback()
            else:
                self._session.commit()
                logger.debug("uow: committed")
        except Exception:
            logger.exception("uow: exception while finalising")
            self._session.rollback()
            raise
        finally:
            self._session.close()
            self._session = None

    @property
    def session(self) -> Session:
        if self._session is None:
            raise RuntimeError("UnitOfWork session accessed before entering context")
        return self._session


@contextmanager
def unit_of_work_scope(factory: Callable[[], Session]) -> Iterator[Session]:
    with SqlAlchemyUnitOfWork(factory) as uow:
        yield uow.session


@contextmanager
def storage_scope(factory: Callable[[], Session], operation: str) -> Iterator[Session]:
    """Like ``unit_of_work_scope`` but reports driver failures as ``StorageUnavailableError``.

    Unique and foreign-key violations are the caller's conflict, not an outage,
    and surface as ``ConflictError`` (409).
    """

    try:
        with unit_of_work_scope(factory) as session:
            yield session
    except IntegrityError as exc:
        logger.warning(f"storage: {operation} rejected by a constraint")
        raise ConflictError(operation) from exc
    except OperationalError as exc:
        logger.warning(f"storage: {operation} failed, database unreachable")
        raise StorageUnavailableError(operation) from exc
    except SQLAlchemyError as exc:
        logger.error(f"storage: {operation} failed with {type(exc).__name__}")
        raise StorageUnavailableError(operation) from exc


__all__ = ["SqlAlchemyUnitOfWork", "storage_scope", "unit_of_work_scope"]
