from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.formatting import attendance_percentage
from ..core.enums import AttendanceStatus, SaveOutcome, WorkspaceEventKind
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceScope:
    """The (course, academic year, date) triple one marking session covers."""

    course_id: int
    academic_year_id: int
    date: date

    def to_params(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "courseId": self.course_id,
            "academicYearId": self.academic_year_id,
        }


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one scope.

    Unique per (student_id, course_id, academic_year_id, date).
    """

    student_id: int
    course_id: int
    academic_year_id: int
    date: date
    status: AttendanceStatus
    marked_by: str
    marked_at: Optional[datetime] = None
    record_id: Optional[int] = None
    student: Optional[Student] = None

    def in_scope(self, scope: AttendanceScope) -> bool:
        return (
            self.course_id == scope.course_id
            and self.academic_year_id == scope.academic_year_id
            and self.date == scope.date
        )

    def to_payload(self) -> dict:
        return {
            "studentId": self.student_id,
            "courseId": self.course_id,
            "academicYearId": self.academic_year_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "markedBy": self.marked_by,
        }


@dataclass(frozen=True)
class BatchResult:
    success_count: int
    error_count: int


@dataclass(frozen=True)
class AttendanceStats:
    present: int = 0
    absent: int = 0
    late: int = 0

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "AttendanceStats":
        present = absent = late = 0
        for st in statuses:
            if st == AttendanceStatus.PRESENT:
                present += 1
            elif st == AttendanceStatus.ABSENT:
                absent += 1
            elif st == AttendanceStatus.LATE:
                late += 1
        return cls(present=present, absent=absent, late=late)

    @property
    def total(self) -> int:
        return self.present + self.absent + self.late

    @property
    def percentage(self) -> int:
        # unmarked students are not part of the denominator
        return attendance_percentage(self.present, self.total)

    def as_dict(self) -> dict:
        return {
            "present": self.present,
            "absent": self.absent,
            "late": self.late,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class SaveResult:
    outcome: SaveOutcome
    success_count: int = 0
    error_count: int = 0

    @property
    def message(self) -> str:
        if self.outcome == SaveOutcome.NOTHING_TO_SAVE:
            return "No new attendance records to save"
        if self.outcome == SaveOutcome.DISCARDED:
            return "The attendance session was closed before the save finished"
        return f"{self.success_count} attendance records saved. {self.error_count} errors."


@dataclass(frozen=True)
class WorkspaceEvent:
    kind: WorkspaceEventKind
    scope: AttendanceScope
    stats: AttendanceStats
