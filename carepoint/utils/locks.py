# /carepoint/utils/locks.py
import threading
from contextlib import contextmanager


class KeyedLock:
    """Per-key mutual exclusion within one process.

    Serializes read-then-write sequences (e.g. slot check then create) for
    requests served by the same process. It does not coordinate between
    processes or hosts.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}
        self._users = {}

    @contextmanager
    def hold(self, *keys):
        # Sorted so two callers asking for overlapping keys cannot deadlock.
        ordered = sorted(set(keys))
        acquired = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                lock.acquire()
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
                self._checkin(key)

    def _checkout(self, key):
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key):
        with self._guard:
            remaining = self._users.get(key, 0) - 1
            if remaining <= 0:
                self._users.pop(key, None)
                self._locks.pop(key, None)
            else:
                self._users[key] = remaining
