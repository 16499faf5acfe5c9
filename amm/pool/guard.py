"""Single-entry guard serializing pool operations."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

from amm.errors import Locked

logger = structlog.get_logger()


class EntryGuard:
    """Serializes operations and refuses re-entry.

    Other threads block until the running operation finishes. The thread
    already inside an operation gets Locked if it tries to start another
    one, e.g. from a ledger callback.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    @contextmanager
    def reading(self) -> Iterator[None]:
        """Hold the lock for a read; the running thread may read mid-operation."""
        with self._lock:
            yield

    @contextmanager
    def enter(self, operation: str) -> Iterator[None]:
        with self._lock:
            if self._entered:
                logger.warning("reentrant_call_refused", operation=operation)
                raise Locked(f"{operation} called while another pool operation is running")
            self._entered = True
            try:
                yield
            finally:
                self._entered = False
