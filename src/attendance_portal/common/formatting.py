from __future__ import annotations

from ..core.enums import AttendanceStatus

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Present",
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.LATE: "Late",
    AttendanceStatus.NOT_MARKED: "Not Marked",
}

STATUS_CSS = {
    AttendanceStatus.PRESENT: "bg-success",
    AttendanceStatus.ABSENT: "bg-danger",
    AttendanceStatus.LATE: "bg-warning text-dark",
    AttendanceStatus.NOT_MARKED: "bg-secondary",
}


def initials(name: str) -> str:
    """Up to two leading letters of a display name (``Asha Rao`` -> ``AR``)."""
    return "".join(word[0].upper() for word in name.split() if word)[:2]


def status_label(status: AttendanceStatus) -> str:
    return STATUS_LABELS.get(status, status.value)


def status_css(status: AttendanceStatus) -> str:
    return STATUS_CSS.get(status, "bg-secondary")


def attendance_percentage(present: int, total: int) -> int:
    """Percentage of ``present`` in ``total`` rounded half up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (present * 200 + total) // (2 * total)
