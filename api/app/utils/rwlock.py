"""Reader/writer lock with poisoning."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class LockPoisonedError(RuntimeError):
    """Raised when acquiring a lock whose last writer failed mid-update."""


class RWLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers so a steady stream of reads cannot
    starve a write. If an exception escapes a :meth:`write` block the lock is
    poisoned and every later acquisition raises :class:`LockPoisonedError`.
    The lock is not reentrant.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._waiting_writers:
                self._cond.wait()
            if self._poisoned:
                raise LockPoisonedError("lock poisoned by a failed writer")
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._waiting_writers -= 1
            if self._poisoned:
                # readers parked behind us must re-check
                self._cond.notify_all()
                raise LockPoisonedError("lock poisoned by a failed writer")
            self._writer = True

    def release_write(self, poison: bool = False) -> None:
        with self._cond:
            self._writer = False
            if poison:
                self._poisoned = True
            self._cond.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold shared access for the duration of the block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold exclusive access; poison the lock if the block raises."""
        self.acquire_write()
        try:
            yield
        except BaseException:
            self.release_write(poison=True)
            raise
        self.release_write()
