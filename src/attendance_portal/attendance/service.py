from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import today_local
from ..common.formatting import initials, status_css, status_label
from ..core.constants import DEFAULT_MARKED_BY
from ..core.enums import WorkspaceEventKind
from ..core.exceptions import ApiError
from ..students.model import StudentFilter
from ..students.repository import StudentRepository
from .model import AttendanceScope, WorkspaceEvent
from .registry import WorkspaceRegistry
from .repository import AttendanceRepository
from .workspace import AttendanceWorkspace

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: daily attendance marking for a course group."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        registry: Optional[WorkspaceRegistry] = None,
        marked_by: str = DEFAULT_MARKED_BY,
        today: Callable[[], date] = today_local,
    ):
        self._attendance = attendance
        self._students = students
        self._registry = registry or WorkspaceRegistry()
        self._marked_by = marked_by
        self._today = today

    def today(self) -> date:
        return self._today()

    def scope_for_today(self, *, course_id: int, academic_year_id: int) -> AttendanceScope:
        return AttendanceScope(course_id=int(course_id), academic_year_id=int(academic_year_id), date=self.today())

    def open_workspace(
        self,
        *,
        owner: str,
        course_id: int,
        academic_year_id: int,
        year_of_study: str,
    ) -> AttendanceWorkspace:
        """Return the owner's workspace for this group today, creating a fresh one if the scope changed."""
        scope = self.scope_for_today(course_id=course_id, academic_year_id=academic_year_id)
        existing = self._registry.get(owner, scope, year_of_study)
        if existing:
            return existing

        roster = self._students.list(
            StudentFilter(course_id=scope.course_id, academic_year_id=scope.academic_year_id, year_of_study=year_of_study)
        )
        committed = self._attendance.fetch_for_scope(scope)
        workspace = AttendanceWorkspace(
            scope,
            [s for s in roster if s.is_active],
            committed,
            commands=self._attendance,
            marked_by=self._marked_by,
        )
        workspace.subscribe(lambda event: self._on_event(workspace, event))
        self._registry.put(owner, year_of_study, workspace)
        logger.debug("workspace opened owner=%s scope=%s roster=%d", owner, scope, len(workspace.roster))
        return workspace

    def current_workspace(self, owner: str) -> Optional[AttendanceWorkspace]:
        return self._registry.current(owner)

    def close_workspace(self, owner: str) -> None:
        self._registry.discard(owner)

    def refresh_committed(self, workspace: AttendanceWorkspace) -> None:
        self._attendance.invalidate()
        workspace.load_committed(self._attendance.fetch_for_scope(workspace.scope))

    def rows(self, workspace: AttendanceWorkspace) -> list[dict]:
        out = []
        for student in workspace.roster:
            status = workspace.status_of(student.student_id)
            out.append(
                {
                    "student_id": student.student_id,
                    "name": student.name,
                    "initials": initials(student.name),
                    "roll_number": student.roll_number,
                    "status": status.value,
                    "status_label": status_label(status),
                    "css_class": status_css(status),
                    "marked": workspace.is_marked(student.student_id),
                }
            )
        return out

    def _on_event(self, workspace: AttendanceWorkspace, event: WorkspaceEvent) -> None:
        if event.kind != WorkspaceEventKind.REFRESH_REQUESTED or workspace.closed:
            return
        try:
            self.refresh_committed(workspace)
        except ApiError as e:
            # the save itself went through; the next page load fetches again
            logger.warning("could not refresh attendance after save scope=%s: %s", workspace.scope, e)
