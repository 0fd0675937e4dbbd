"""In-process cache of module documents with a staleness window."""

import threading
import time
from dataclasses import dataclass
from typing import Callable

from api_module_agent.parser.base import ModuleDocument

DEFAULT_STALE_MS = 5 * 60 * 1000


@dataclass(frozen=True)
class CacheEntry:
    data: ModuleDocument
    timestamp: float


class ModuleCache:
    """Holds at most one entry per module id. Entries are replaced, never mutated.

    `clock` returns seconds; it defaults to time.monotonic and is injectable for tests.
    """

    def __init__(self, stale_ms: int = DEFAULT_STALE_MS, clock: Callable[[], float] = time.monotonic):
        self.stale_ms = stale_ms
        self.clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def lookup(self, module_id: str) -> CacheEntry | None:
        """Return the entry for module_id if it is younger than the staleness window."""
        with self._lock:
            entry = self._entries.get(module_id)
        if entry is None:
            return None
        if (self.clock() - entry.timestamp) * 1000 >= self.stale_ms:
            return None
        return entry

    def peek(self, module_id: str) -> CacheEntry | None:
        """Return the entry for module_id regardless of age."""
        with self._lock:
            return self._entries.get(module_id)

    def store(self, module_id: str, data: ModuleDocument) -> CacheEntry:
        entry = CacheEntry(data=data, timestamp=self.clock())
        with self._lock:
            self._entries[module_id] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, module_id: str) -> bool:
        with self._lock:
            return module_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
