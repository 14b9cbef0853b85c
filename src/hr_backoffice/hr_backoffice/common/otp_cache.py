from __future__ import annotations

import hmac
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass(frozen=True)
class _Entry:
    value: str
    expires_at: float


class ExpiringCodeCache:
    """Process-wide single-use code store (admin login OTPs).

    A code is valid until its TTL elapses or it is verified once, whichever
    comes first.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: str, ttl: float) -> None:
        with self._lock:
            self._entries[str(key)] = _Entry(value=str(value), expires_at=self._clock() + float(ttl))

    def verify_and_consume(self, key: str, value: str) -> bool:
        with self._lock:
            entry = self._entries.get(str(key))
            if entry is None:
                return False
            if self._clock() > entry.expires_at:
                del self._entries[str(key)]
                return False
            if not hmac.compare_digest(entry.value, str(value)):
                return False
            del self._entries[str(key)]
            return True
