"""One ``threading.Lock`` per key, created on first use.

Used wherever a load-check-modify-save cycle on one record must not
interleave with another on the same record: stock per product id,
orders per order number.
"""

from __future__ import annotations

import threading


class KeyedLocks:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def for_key(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock
