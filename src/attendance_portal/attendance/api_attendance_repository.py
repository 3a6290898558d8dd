from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_optional_date, parse_optional_datetime
from ..core.enums import AttendanceStatus
from ..students.api_student_repository import to_student
from .model import AttendanceRecord, AttendanceScope, AttendanceStats, BatchResult
from .repository import AttendanceRepository

ATTENDANCE_PATH = "/api/attendance"


def to_record(row: dict[str, Any]) -> AttendanceRecord:
    student = row.get("student")
    return AttendanceRecord(
        student_id=int(row["studentId"]),
        course_id=int(row["courseId"]),
        academic_year_id=int(row["academicYearId"]),
        date=parse_optional_date(row["date"]),
        status=AttendanceStatus(row["status"]),
        marked_by=row.get("markedBy") or "",
        marked_at=parse_optional_datetime(row.get("markedAt")),
        record_id=int(row["id"]) if row.get("id") is not None else None,
        student=to_student(student) if student else None,
    )


class ApiAttendanceRepository(AttendanceRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def fetch_for_scope(self, scope: AttendanceScope) -> Sequence[AttendanceRecord]:
        rows = self._client.get(ATTENDANCE_PATH, scope.to_params()) or []
        return [to_record(r) for r in rows]

    def fetch_range(
        self,
        *,
        course_id: int,
        academic_year_id: int,
        date_from: date,
        date_to: date,
    ) -> Sequence[AttendanceRecord]:
        rows = self._client.get(
            ATTENDANCE_PATH,
            {
                "courseId": int(course_id),
                "academicYearId": int(academic_year_id),
                "dateFrom": date_from.isoformat(),
                "dateTo": date_to.isoformat(),
            },
            use_cache=False,
        ) or []
        return [to_record(r) for r in rows]

    def fetch_stats(self) -> Optional[AttendanceStats]:
        body = self._client.get(f"{ATTENDANCE_PATH}/stats")
        if not body:
            return None
        return AttendanceStats(
            present=int(body.get("present") or 0),
            absent=int(body.get("absent") or 0),
            late=int(body.get("late") or 0),
        )

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        return to_record(self._client.post(ATTENDANCE_PATH, record.to_payload()))

    def create_batch(self, records: Sequence[AttendanceRecord]) -> BatchResult:
        body = self._client.post(
            f"{ATTENDANCE_PATH}/bulk",
            {"attendanceRecords": [r.to_payload() for r in records]},
        ) or {}
        return BatchResult(
            success_count=int(body.get("success") or 0),
            error_count=int(body.get("errors") or 0),
        )

    def invalidate(self) -> None:
        self._client.invalidate(ATTENDANCE_PATH)
