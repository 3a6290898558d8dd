from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from attendance_portal.attendance.model import AttendanceStats
from attendance_portal.attendance.workspace import AttendanceWorkspace
from attendance_portal.core.enums import AttendanceStatus, SaveOutcome, WorkspaceEventKind
from attendance_portal.core.exceptions import (
    ApiError,
    DuplicateMarkError,
    SaveInProgressError,
    SaveTransportError,
    UnknownStudentError,
    ValidationError,
)

MARKED_AT = datetime(2026, 10, 18, 9, 30)


@pytest.fixture
def workspace(scope, roster, attendance_repo):
    return AttendanceWorkspace(scope, roster, commands=attendance_repo, clock=lambda: MARKED_AT)


def test_percentage_rounds_half_up():
    assert AttendanceStats(present=5, absent=2, late=1).percentage == 63
    assert AttendanceStats(present=1, absent=2).percentage == 33
    assert AttendanceStats(present=1, absent=1).percentage == 50


def test_percentage_is_zero_without_marks(workspace):
    assert workspace.stats == AttendanceStats()
    assert workspace.stats.percentage == 0


def test_committed_records_are_loaded_and_filtered(scope, roster, attendance_repo, make_record):
    committed = [
        make_record(1, AttendanceStatus.PRESENT),
        make_record(2, AttendanceStatus.ABSENT, on=date(2026, 10, 17)),
        make_record(99, AttendanceStatus.PRESENT),
    ]
    ws = AttendanceWorkspace(scope, roster, committed, commands=attendance_repo)

    assert ws.committed == {1: AttendanceStatus.PRESENT}
    assert ws.status_of(2) == AttendanceStatus.NOT_MARKED
    assert ws.stats.as_dict() == {"present": 1, "absent": 0, "late": 0, "percentage": 100}


def test_mark_stages_a_status(workspace):
    workspace.mark(2, AttendanceStatus.LATE)

    assert workspace.pending == {2: AttendanceStatus.LATE}
    assert workspace.status_of(2) == AttendanceStatus.LATE
    assert workspace.is_marked(2)
    assert workspace.stats.late == 1


def test_mark_rejects_already_committed_student(scope, roster, attendance_repo, make_record):
    ws = AttendanceWorkspace(scope, roster, [make_record(1, AttendanceStatus.PRESENT)], commands=attendance_repo)

    with pytest.raises(DuplicateMarkError, match="already marked"):
        ws.mark(1, AttendanceStatus.ABSENT)

    assert ws.pending == {}
    assert ws.status_of(1) == AttendanceStatus.PRESENT


def test_mark_rejects_second_pending_mark(workspace):
    workspace.mark(3, AttendanceStatus.ABSENT)

    with pytest.raises(DuplicateMarkError):
        workspace.mark(3, AttendanceStatus.PRESENT)

    assert workspace.pending == {3: AttendanceStatus.ABSENT}


def test_mark_rejects_student_outside_roster(workspace):
    with pytest.raises(UnknownStudentError):
        workspace.mark(42, AttendanceStatus.PRESENT)


def test_mark_rejects_not_marked_status(workspace):
    with pytest.raises(ValidationError):
        workspace.mark(1, AttendanceStatus.NOT_MARKED)


def test_mark_all_only_touches_unmarked_and_is_idempotent(scope, roster, attendance_repo, make_record):
    ws = AttendanceWorkspace(scope, roster, [make_record(1, AttendanceStatus.ABSENT)], commands=attendance_repo)
    ws.mark(2, AttendanceStatus.LATE)

    assert ws.mark_all_unmarked_present() == 1
    assert ws.mark_all_unmarked_present() == 0
    assert ws.pending == {2: AttendanceStatus.LATE, 3: AttendanceStatus.PRESENT}
    assert ws.status_of(1) == AttendanceStatus.ABSENT


def test_save_with_nothing_pending_does_not_call_backend(workspace, attendance_repo):
    result = workspace.save()

    assert result.outcome == SaveOutcome.NOTHING_TO_SAVE
    assert result.message == "No new attendance records to save"
    assert attendance_repo.batches == []


def test_save_sends_one_batch_and_clears_pending(workspace, attendance_repo, scope):
    workspace.mark(1, AttendanceStatus.PRESENT)
    workspace.mark(2, AttendanceStatus.ABSENT)

    result = workspace.save()

    assert result.outcome == SaveOutcome.SAVED
    assert result.message == "2 attendance records saved. 0 errors."
    assert workspace.pending == {}

    [batch] = attendance_repo.batches
    assert {(r.student_id, r.status) for r in batch} == {(1, AttendanceStatus.PRESENT), (2, AttendanceStatus.ABSENT)}
    assert all(r.in_scope(scope) and r.marked_by == "faculty" and r.marked_at == MARKED_AT for r in batch)


def test_partial_batch_reports_errors(workspace, attendance_repo):
    attendance_repo.error_count = 1
    workspace.mark_all_unmarked_present()

    result = workspace.save()

    assert result.outcome == SaveOutcome.PARTIAL
    assert result.message == "2 attendance records saved. 1 errors."
    assert workspace.pending == {}


def test_transport_failure_keeps_pending_for_retry(workspace, attendance_repo):
    attendance_repo.fail_with = ApiError("Could not reach the attendance service")
    workspace.mark(1, AttendanceStatus.PRESENT)

    with pytest.raises(SaveTransportError):
        workspace.save()

    assert workspace.pending == {1: AttendanceStatus.PRESENT}
    assert not workspace.is_saving

    attendance_repo.fail_with = None
    assert workspace.save().outcome == SaveOutcome.SAVED


def test_save_publishes_refresh_request(workspace):
    events = []
    workspace.subscribe(events.append)
    workspace.mark(1, AttendanceStatus.PRESENT)
    workspace.save()

    assert [e.kind for e in events] == [WorkspaceEventKind.CHANGED, WorkspaceEventKind.REFRESH_REQUESTED]
    assert events[-1].scope == workspace.scope


def test_unsubscribe_stops_events(workspace):
    events = []
    unsubscribe = workspace.subscribe(events.append)
    unsubscribe()
    workspace.mark(1, AttendanceStatus.PRESENT)

    assert events == []


def _start_blocked_save(ws, repo):
    repo.release = threading.Event()
    outcome = {}

    def run():
        try:
            outcome["result"] = ws.save()
        except Exception as e:
            outcome["error"] = e

    t = threading.Thread(target=run)
    t.start()
    assert repo.entered.wait(timeout=5)
    return t, outcome


def test_second_save_while_first_in_flight_is_rejected(workspace, attendance_repo):
    workspace.mark(1, AttendanceStatus.PRESENT)
    t, outcome = _start_blocked_save(workspace, attendance_repo)

    assert workspace.is_saving
    with pytest.raises(SaveInProgressError):
        workspace.save()

    # staged during the request, must survive it
    workspace.mark(2, AttendanceStatus.LATE)

    attendance_repo.release.set()
    t.join(timeout=5)

    assert outcome["result"].outcome == SaveOutcome.SAVED
    assert len(attendance_repo.batches) == 1
    assert workspace.pending == {2: AttendanceStatus.LATE}


def test_close_during_save_discards_result(workspace, attendance_repo):
    events = []
    workspace.subscribe(events.append)
    workspace.mark(1, AttendanceStatus.PRESENT)
    t, outcome = _start_blocked_save(workspace, attendance_repo)

    workspace.close()
    attendance_repo.release.set()
    t.join(timeout=5)

    assert outcome["result"].outcome == SaveOutcome.DISCARDED
    assert [e.kind for e in events] == [WorkspaceEventKind.CHANGED]


def test_closed_workspace_rejects_changes(workspace):
    workspace.close()

    assert workspace.closed
    with pytest.raises(ValidationError):
        workspace.mark(1, AttendanceStatus.PRESENT)
    with pytest.raises(ValidationError):
        workspace.save()


def test_reload_prefers_committed_over_pending(workspace, make_record):
    workspace.mark(1, AttendanceStatus.LATE)
    workspace.mark(2, AttendanceStatus.ABSENT)

    workspace.load_committed([make_record(1, AttendanceStatus.PRESENT)])

    assert workspace.status_of(1) == AttendanceStatus.PRESENT
    assert workspace.pending == {2: AttendanceStatus.ABSENT}
    assert workspace.stats.as_dict() == {"present": 1, "absent": 1, "late": 0, "percentage": 50}


def test_marking_session_end_to_end(scope, roster, attendance_repo, make_record):
    ws = AttendanceWorkspace(scope, roster, [make_record(1, AttendanceStatus.PRESENT)], commands=attendance_repo)

    ws.mark(2, AttendanceStatus.ABSENT)
    assert ws.mark_all_unmarked_present() == 1
    assert ws.stats.as_dict() == {"present": 2, "absent": 1, "late": 0, "percentage": 67}

    result = ws.save()

    assert result.success_count == 2
    assert {r.student_id for r in attendance_repo.batches[0]} == {2, 3}
    assert ws.pending == {}


def test_is_marked_exactly_for_marked_students(workspace, roster):
    for student_id in (1, 3):
        workspace.mark(student_id, AttendanceStatus.PRESENT)

    assert {s.student_id for s in roster if workspace.is_marked(s.student_id)} == {1, 3}


def test_saved_students_cannot_be_staged_again_before_refresh(workspace):
    workspace.mark(1, AttendanceStatus.PRESENT)
    workspace.save()

    assert workspace.committed == {1: AttendanceStatus.PRESENT}
    assert workspace.status_of(1) == AttendanceStatus.PRESENT
    with pytest.raises(DuplicateMarkError):
        workspace.mark(1, AttendanceStatus.ABSENT)
    assert workspace.mark_all_unmarked_present() == 2
    assert 1 not in workspace.pending
