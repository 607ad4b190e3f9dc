"""
Shared work queue: an immutable ordered list plus one atomic claim cursor.
"""

from __future__ import annotations

import threading
from typing import Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class WorkQueue(Generic[T]):
    """
    Hands out items in input order, each exactly once, to concurrent workers.

    The claim-and-advance step runs under a lock and contains no await, so
    it is atomic for asyncio tasks and threads alike. Callers need no
    locking of their own.
    """

    def __init__(self, items: Iterable[T]) -> None:
        self._items: tuple[T, ...] = tuple(items)
        self._cursor = 0
        self._lock = threading.Lock()

    def claim_next(self) -> Optional[T]:
        """Return the next unclaimed item, or None once every item is claimed."""
        with self._lock:
            if self._cursor >= len(self._items):
                return None
            item = self._items[self._cursor]
            self._cursor += 1
            return item

    @property
    def claimed(self) -> int:
        return self._cursor

    @property
    def remaining(self) -> int:
        return len(self._items) - self._cursor

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._items)

    def __len__(self) -> int:
        return len(self._items)
