"""Reconciliation of saved and staged attendance for one marking session.

A workspace holds two maps for a single scope (course, academic year, date):

- committed: student id -> status already persisted by the backend
- pending: student id -> status staged by the user, not yet saved

A student id is in at most one of them. ``save`` sends all pending marks as
one batch; on success they move from the pending map to the committed map
and the owner is asked to reload the committed map from the backend.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_MARKED_BY
from ..core.enums import AttendanceStatus, SaveOutcome, WorkspaceEventKind
from ..core.exceptions import (
    ApiError,
    DuplicateMarkError,
    SaveInProgressError,
    SaveTransportError,
    UnknownStudentError,
    ValidationError,
)
from ..students.model import Student
from .model import AttendanceRecord, AttendanceScope, AttendanceStats, SaveResult, WorkspaceEvent
from .repository import AttendanceCommandRepository

logger = logging.getLogger(__name__)

Listener = Callable[[WorkspaceEvent], None]


class AttendanceWorkspace:
    def __init__(
        self,
        scope: AttendanceScope,
        roster: Sequence[Student],
        committed: Iterable[AttendanceRecord] = (),
        *,
        commands: AttendanceCommandRepository,
        marked_by: str = DEFAULT_MARKED_BY,
        clock: Callable = now_local,
    ):
        self._scope = scope
        self._roster = {s.student_id: s for s in roster}
        self._commands = commands
        self._marked_by = marked_by
        self._clock = clock

        self._committed: dict[int, AttendanceStatus] = {}
        self._pending: dict[int, AttendanceStatus] = {}
        self._listeners: list[Listener] = []
        self._closed = False

        # guards the two maps; never held across a network call
        self._state_lock = threading.RLock()
        # held for the whole duration of a save
        self._save_lock = threading.Lock()

        self._replace_committed(committed)
        self._stats = self._compute_stats()

    @property
    def scope(self) -> AttendanceScope:
        return self._scope

    @property
    def roster(self) -> list[Student]:
        return list(self._roster.values())

    @property
    def stats(self) -> AttendanceStats:
        return self._stats

    @property
    def pending(self) -> dict[int, AttendanceStatus]:
        with self._state_lock:
            return dict(self._pending)

    @property
    def committed(self) -> dict[int, AttendanceStatus]:
        with self._state_lock:
            return dict(self._committed)

    @property
    def is_saving(self) -> bool:
        return self._save_lock.locked()

    @property
    def closed(self) -> bool:
        return self._closed

    def status_of(self, student_id: int) -> AttendanceStatus:
        with self._state_lock:
            if student_id in self._pending:
                return self._pending[student_id]
            return self._committed.get(student_id, AttendanceStatus.NOT_MARKED)

    def is_marked(self, student_id: int) -> bool:
        with self._state_lock:
            return student_id in self._pending or student_id in self._committed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for change events; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load_committed(self, records: Iterable[AttendanceRecord]) -> None:
        """Rebuild the committed map from freshly fetched records."""
        with self._state_lock:
            self._ensure_open()
            self._replace_committed(records)
            # a student saved elsewhere meanwhile is no longer stageable
            for student_id in [sid for sid in self._pending if sid in self._committed]:
                del self._pending[student_id]
            stats = self._recompute()
        self._publish(WorkspaceEventKind.CHANGED, stats)

    def mark(self, student_id: int, status: AttendanceStatus) -> None:
        status = AttendanceStatus(status)
        if status == AttendanceStatus.NOT_MARKED:
            raise ValidationError("Attendance must be present, absent or late")

        with self._state_lock:
            self._ensure_open()
            if student_id not in self._roster:
                raise UnknownStudentError("Student is not in the selected group")
            if self.is_marked(student_id):
                raise DuplicateMarkError("Attendance already marked for this student today")
            self._pending[student_id] = status
            stats = self._recompute()
        self._publish(WorkspaceEventKind.CHANGED, stats)

    def mark_all_unmarked_present(self) -> int:
        """Stage ``present`` for every roster student without a mark; returns how many were staged."""
        with self._state_lock:
            self._ensure_open()
            staged = 0
            for student_id in self._roster:
                if not self.is_marked(student_id):
                    self._pending[student_id] = AttendanceStatus.PRESENT
                    staged += 1
            stats = self._recompute()
        self._publish(WorkspaceEventKind.CHANGED, stats)
        return staged

    def save(self) -> SaveResult:
        """Submit all pending marks as one batch.

        Raises SaveInProgressError when another save on this workspace has not
        finished, and SaveTransportError when the batch request fails; in the
        latter case the pending marks are untouched.
        """
        if not self._save_lock.acquire(blocking=False):
            raise SaveInProgressError("Attendance is already being saved, please wait")

        try:
            with self._state_lock:
                self._ensure_open()
                batch = dict(self._pending)

            if not batch:
                return SaveResult(outcome=SaveOutcome.NOTHING_TO_SAVE)

            marked_at = self._clock()
            records = [
                AttendanceRecord(
                    student_id=student_id,
                    course_id=self._scope.course_id,
                    academic_year_id=self._scope.academic_year_id,
                    date=self._scope.date,
                    status=status,
                    marked_by=self._marked_by,
                    marked_at=marked_at,
                )
                for student_id, status in batch.items()
            ]

            try:
                result = self._commands.create_batch(records)
            except ApiError as e:
                logger.warning("attendance save failed scope=%s pending=%d: %s", self._scope, len(batch), e)
                raise SaveTransportError(str(e)) from e

            with self._state_lock:
                if self._closed:
                    logger.info("attendance save finished after workspace closed, result discarded scope=%s", self._scope)
                    return SaveResult(
                        outcome=SaveOutcome.DISCARDED,
                        success_count=result.success_count,
                        error_count=result.error_count,
                    )
                # marks staged while the request was in flight stay pending;
                # saved ones count as committed until the refresh replaces them
                for student_id, status in batch.items():
                    self._pending.pop(student_id, None)
                    self._committed[student_id] = status
                stats = self._recompute()

            logger.info(
                "attendance saved scope=%s success=%d errors=%d",
                self._scope, result.success_count, result.error_count,
            )
            self._publish(WorkspaceEventKind.REFRESH_REQUESTED, stats)

            outcome = SaveOutcome.PARTIAL if result.error_count else SaveOutcome.SAVED
            return SaveResult(outcome=outcome, success_count=result.success_count, error_count=result.error_count)
        finally:
            self._save_lock.release()

    def close(self) -> None:
        """Tear down; a save still in flight will discard its result."""
        with self._state_lock:
            self._closed = True
        self._listeners.clear()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ValidationError("This attendance session has been closed, please reload the group")

    def _replace_committed(self, records: Iterable[AttendanceRecord]) -> None:
        committed: dict[int, AttendanceStatus] = {}
        for r in records:
            if not r.in_scope(self._scope) or r.student_id not in self._roster:
                continue
            committed[r.student_id] = r.status
        self._committed = committed

    def _compute_stats(self) -> AttendanceStats:
        return AttendanceStats.from_statuses(
            list(self._committed.values()) + list(self._pending.values())
        )

    def _recompute(self) -> AttendanceStats:
        self._stats = self._compute_stats()
        return self._stats

    def _publish(self, kind: WorkspaceEventKind, stats: Optional[AttendanceStats] = None) -> None:
        event = WorkspaceEvent(kind=kind, scope=self._scope, stats=stats or self._stats)
        for listener in list(self._listeners):
            listener(event)
