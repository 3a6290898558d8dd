from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryKey:
    """Cache key for a GET request: resource path plus normalized query params."""

    path: str
    params: tuple[tuple[str, str], ...] = ()

    @classmethod
    def build(cls, path: str, params: Optional[Mapping[str, Any]] = None) -> "QueryKey":
        items = tuple(sorted((str(k), str(v)) for k, v in (params or {}).items() if v is not None))
        return cls(path=path, params=items)

    def belongs_to(self, path: str) -> bool:
        return self.path == path or self.path.startswith(path.rstrip("/") + "/")


class QueryCache:
    """Process-wide cache of GET results.

    Entries live until the application invalidates their resource path; nothing
    here expires or invalidates on its own.
    """

    def __init__(self):
        self._entries: dict[QueryKey, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: QueryKey) -> tuple[bool, Any]:
        with self._lock:
            if key in self._entries:
                return True, self._entries[key]
            return False, None

    def put(self, key: QueryKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def invalidate(self, path: str) -> int:
        """Drop every entry under ``path`` (``/api/students`` also drops ``/api/students/3``)."""
        with self._lock:
            stale = [k for k in self._entries if k.belongs_to(path)]
            for k in stale:
                del self._entries[k]
        if stale:
            logger.debug("cache invalidated path=%s entries=%d", path, len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
