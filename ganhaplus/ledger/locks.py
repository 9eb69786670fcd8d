"""
Per-user mutual exclusion for check-then-act sequences (window check + balance mutation).
"""
import threading
from collections.abc import Iterator
from contextlib import contextmanager


class UserLocks:
    """Registry of one lock per user id. Entries are dropped when no holder or waiter remains."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}  # user_id -> [lock, holders+waiters]

    @contextmanager
    def hold(self, user_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.get(user_id)
            if entry is None:
                entry = self._locks[user_id] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(user_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


default_user_locks = UserLocks()
