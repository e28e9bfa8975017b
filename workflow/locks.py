"""
Per-entity locks.

Multi-step workflow operations hold the lock of every record they
mutate. Locks are always taken in the order of KIND_ORDER
(submission before user), so two operations can never wait on
each other in a cycle.
"""

import threading
from contextlib import contextmanager
from typing import Iterator

SUBMISSION = "submission"
USER = "user"
SYNC = "sync"
EVENT = "event"
SLOT = "slot"

KIND_ORDER = {SUBMISSION: 0, USER: 1, SYNC: 2, EVENT: 3, SLOT: 4}

Key = tuple[str, int]


class _Entry:
    """A lock and the number of threads holding or waiting for it."""

    def __init__(self):
        self.lock = threading.RLock()
        self.users = 0


class KeyedLocks:
    """
    Reentrant lock per (kind, id), created on first use.

    An entry is dropped as soon as no thread holds or waits for it,
    so the table only contains keys that are in use.
    """

    def __init__(self):
        self._locks: dict[Key, _Entry] = {}
        self._guard = threading.Lock()

    def _acquire(self, key: Key) -> None:
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
        entry.lock.acquire()

    def _release(self, key: Key) -> None:
        with self._guard:
            entry = self._locks[key]
            entry.lock.release()
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    def in_use(self) -> int:
        """Number of keys currently held or waited on."""
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, *keys: Key) -> Iterator[None]:
        """Acquire the locks for all keys in canonical order."""
        ordered = sorted(set(keys), key=lambda k: (KIND_ORDER[k[0]], k[1]))
        acquired = []
        try:
            for key in ordered:
                self._acquire(key)
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._release(key)

    def submission(self, submission_id: int):
        return self.hold((SUBMISSION, submission_id))

    def user(self, user_id: int):
        return self.hold((USER, user_id))
