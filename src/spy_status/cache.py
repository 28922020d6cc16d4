"""Short-lived cache of rendered replies."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class _Entry:
    value: Any
    stored_at: float


class ReplyCache(Generic[T]):
    """Best-effort reply cache keyed by the sorted set of requested names.

    Two requests racing inside the window may both miss and both fetch.
    """

    def __init__(
        self,
        expire: timedelta = timedelta(seconds=8),
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._expire = expire.total_seconds()
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def key_for(names: Iterable[str], mode: str = "status") -> str:
        return f"{mode}:{','.join(sorted(names))}"

    def is_fresh(self, stored_at: float) -> bool:
        return self._clock() - stored_at < self._expire

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self.is_fresh(entry.stored_at):
                del self._entries[key]
                return None
            return entry.value

    def put(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
