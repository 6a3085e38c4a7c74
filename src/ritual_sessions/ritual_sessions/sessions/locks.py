from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from ..core.exceptions import ConcurrentTransitionError
from .model import SessionKey


class TransitionLocks:
    """Single-writer lock per session key.

    Acquisition never waits: a second caller for a key that is mid-transition
    fails fast with ConcurrentTransitionError instead of queueing behind it.
    """

    def __init__(self):
        self._locks: Dict[SessionKey, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: SessionKey) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: SessionKey) -> Iterator[None]:
        lock = self._lock_for(key)
        if not lock.acquire(blocking=False):
            raise ConcurrentTransitionError(f"Session {key} is being updated by another operator")
        try:
            yield
        finally:
            lock.release()

    def is_held(self, key: SessionKey) -> bool:
        return self._lock_for(key).locked()
