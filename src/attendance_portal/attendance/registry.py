from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .model import AttendanceScope
from .workspace import AttendanceWorkspace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    scope: AttendanceScope
    year_of_study: str
    workspace: AttendanceWorkspace


class WorkspaceRegistry:
    """One live workspace per browser session (``owner``).

    Putting a workspace for a different scope closes the previous one, so
    pending marks never carry over to another group or day.
    """

    def __init__(self):
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, owner: str, scope: AttendanceScope, year_of_study: str) -> Optional[AttendanceWorkspace]:
        with self._lock:
            entry = self._entries.get(owner)
        if entry and entry.scope == scope and entry.year_of_study == year_of_study and not entry.workspace.closed:
            return entry.workspace
        return None

    def current(self, owner: str) -> Optional[AttendanceWorkspace]:
        with self._lock:
            entry = self._entries.get(owner)
        return entry.workspace if entry else None

    def put(self, owner: str, year_of_study: str, workspace: AttendanceWorkspace) -> None:
        """Store ``workspace`` for ``owner``.

        Workspaces of other owners from an earlier day are closed and dropped.
        """
        with self._lock:
            previous = self._entries.get(owner)
            self._entries[owner] = _Entry(scope=workspace.scope, year_of_study=year_of_study, workspace=workspace)
            stale = [
                (o, e)
                for o, e in self._entries.items()
                if o != owner and e.scope.date < workspace.scope.date
            ]
            for o, _ in stale:
                del self._entries[o]
        if previous and previous.workspace is not workspace:
            self._close(owner, previous)
        for o, entry in stale:
            self._close(o, entry)
        if stale:
            logger.info("evicted %d workspaces from earlier days", len(stale))

    def discard(self, owner: str) -> None:
        with self._lock:
            previous = self._entries.pop(owner, None)
        if previous:
            self._close(owner, previous)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def _close(owner: str, entry: _Entry) -> None:
        dropped = len(entry.workspace.pending)
        if dropped:
            logger.info("closing workspace owner=%s scope=%s with %d unsaved marks", owner, entry.scope, dropped)
        entry.workspace.close()
