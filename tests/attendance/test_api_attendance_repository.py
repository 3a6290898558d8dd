from __future__ import annotations

from datetime import datetime

from attendance_portal.api.client import ApiClient
from attendance_portal.attendance.api_attendance_repository import ApiAttendanceRepository
from attendance_portal.core.enums import AttendanceStatus


def _repo(session):
    return ApiAttendanceRepository(ApiClient("http://api.test", session=session))


def test_create_posts_single_record_and_maps_reply(http_session, http_response, make_record, today):
    session = http_session(
        http_response(
            201,
            {
                "id": 55,
                "studentId": 2,
                "courseId": 1,
                "academicYearId": 1,
                "date": "2026-10-18T00:00:00.000Z",
                "status": "late",
                "markedBy": "faculty",
                "markedAt": "2026-10-18T09:05:00Z",
            },
        )
    )

    saved = _repo(session).create(make_record(2, AttendanceStatus.LATE))

    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", "http://api.test/api/attendance")
    assert kwargs["json"] == {
        "studentId": 2,
        "courseId": 1,
        "academicYearId": 1,
        "date": today.isoformat(),
        "status": "late",
        "markedBy": "faculty",
    }
    assert saved.record_id == 55
    assert saved.date == today
    assert saved.status == AttendanceStatus.LATE
    assert saved.marked_at.replace(tzinfo=None) == datetime(2026, 10, 18, 9, 5)


def test_create_batch_reads_success_and_error_counts(http_session, http_response, make_record):
    session = http_session(http_response(200, {"success": 2, "errors": 1}))

    result = _repo(session).create_batch(
        [make_record(sid, AttendanceStatus.PRESENT) for sid in (1, 2, 3)]
    )

    method, url, kwargs = session.calls[0]
    assert url == "http://api.test/api/attendance/bulk"
    assert [r["studentId"] for r in kwargs["json"]["attendanceRecords"]] == [1, 2, 3]
    assert (result.success_count, result.error_count) == (2, 1)


def test_fetch_for_scope_is_cached_until_invalidated(http_session, http_response, scope):
    session = http_session(http_response(body=[]), http_response(body=[]))
    repo = _repo(session)

    repo.fetch_for_scope(scope)
    repo.fetch_for_scope(scope)
    repo.invalidate()
    repo.fetch_for_scope(scope)

    assert len(session.calls) == 2
    assert session.calls[0][2]["params"] == {"date": "2026-10-18", "courseId": 1, "academicYearId": 1}
