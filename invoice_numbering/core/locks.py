"""Per-key mutual exclusion for counter increments."""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Optional


class KeyedLockArena:
    """
    Hands out one lock per key and forgets it once nobody holds or waits on it.

    Callers on different keys never block each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable, timeout: Optional[float] = None):
        """
        Hold the lock for ``key`` for the duration of the block.

        Raises:
            TimeoutError: If the lock was not acquired within ``timeout`` seconds
        """
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._users[key] = self._users.get(key, 0) + 1

        try:
            acquired = lock.acquire(timeout=-1 if timeout is None else timeout)
            if not acquired:
                raise TimeoutError(f"Timed out waiting for lock on {key!r}")
            try:
                yield
            finally:
                lock.release()
        finally:
            with self._guard:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
