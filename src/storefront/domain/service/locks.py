"""Per-key mutual exclusion.

One lock per order id and one per product id; unrelated keys never contend.
Acquisition is bounded so a stuck holder surfaces as ``ResourceBusy``
instead of hanging a request.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from storefront.domain.exceptions import ResourceBusy

DEFAULT_LOCK_TIMEOUT = 10.0


class KeyedLocks:

    def __init__(self, name: str, timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        self._name = name
        self._timeout = timeout
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._lock_for(key)
        if not lock.acquire(timeout=self._timeout):
            raise ResourceBusy(
                f"Timed out after {self._timeout}s waiting for {self._name} '{key}'"
            )
        try:
            yield
        finally:
            lock.release()
