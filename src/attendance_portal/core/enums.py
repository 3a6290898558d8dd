from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for page permissions."""

    ADMIN = "admin"
    FACULTY = "faculty"
    HOD = "hod"


class AttendanceStatus(str, Enum):
    """Attendance status as stored by the backend.

    NOT_MARKED never leaves the portal: it is what a student without any
    committed or pending mark reports.
    """

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    NOT_MARKED = "not-marked"


class ReportType(str, Enum):
    DAY_WISE = "day-wise"
    SUMMARY = "summary"


class SaveOutcome(str, Enum):
    NOTHING_TO_SAVE = "nothing-to-save"
    SAVED = "saved"
    PARTIAL = "partial"
    DISCARDED = "discarded"


class WorkspaceEventKind(str, Enum):
    CHANGED = "changed"
    REFRESH_REQUESTED = "refresh-requested"
