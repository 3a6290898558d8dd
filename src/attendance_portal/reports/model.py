from __future__ import annotations

from dataclasses import dataclass

from ..attendance.model import AttendanceRecord


@dataclass(frozen=True)
class ReportSummary:
    total_students: int
    total_classes: int
    present: int
    absent: int
    late: int
    attendance_percentage: int


@dataclass(frozen=True)
class Report:
    """Read-model for the reports page and CSV export."""

    title: str
    period: str
    summary: ReportSummary
    details: list[AttendanceRecord]
