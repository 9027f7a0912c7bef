# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
from datetime import timedelta

from expense_tracker.application.services.token_store import TokenStore
from expense_tracker.shared.logging import logger


class TokenSweeper:
    """Daemon thread calling ``TokenStore.sweep_expired`` on a fixed interval."""

    def __init__(
        self,
        store: TokenStore,
        *,
        interval_seconds: float,
        max_age: timedelta | None = None,
    ) -> None:
        self._store = store
        self._interval = max(1.0, float(interval_seconds))
        self._max_age = max_age
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="token-sweeper", daemon=True)
        self._thread.start()
        logger.info(f"tokens.sweeper: started interval={self._interval:.0f}s")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout)
            logger.info("tokens.sweeper: stopped")

    def run_once(self) -> int:
        return self._store.sweep_expired(self._max_age)

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                self.run_once()
            except Exception:
                logger.exception("tokens.sweeper: sweep failed")


__all__ = ["TokenSweeper"]
