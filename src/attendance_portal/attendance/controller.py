from __future__ import annotations

import logging
import uuid
from typing import Mapping, Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.datetime_utils import format_date
from ..common.validators import optional_int
from ..common.web import login_required
from ..core.constants import YEARS_OF_STUDY
from ..core.enums import AttendanceStatus, SaveOutcome
from ..core.exceptions import ApiError, SaveInProgressError, SaveTransportError, ValidationError
from ..container import Container
from .model import AttendanceStats

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _owner() -> str:
        if "workspace_owner" not in session:
            session["workspace_owner"] = uuid.uuid4().hex
        return session["workspace_owner"]

    def _selection(source: Mapping[str, str]) -> tuple[Optional[int], Optional[int], str]:
        return (
            optional_int(source.get("courseId")),
            optional_int(source.get("academicYearId")),
            (source.get("yearOfStudy") or "").strip(),
        )

    def _back(course_id, academic_year_id, year_of_study):
        return redirect(
            url_for("attendance", courseId=course_id, academicYearId=academic_year_id, yearOfStudy=year_of_study)
        )

    def _payload() -> Mapping[str, str]:
        if request.is_json:
            return {k: str(v) for k, v in (request.get_json(silent=True) or {}).items()}
        return request.form

    def _reply(workspace, *, ok: bool, message: str, category: str, selection):
        if request.is_json:
            body = {"success": ok, "message": message}
            if workspace is not None:
                body["stats"] = workspace.stats.as_dict()
            return jsonify(body), (200 if ok else 400)
        flash(message, category)
        return _back(*selection)

    def _workspace(selection):
        course_id, academic_year_id, year_of_study = selection
        if not (course_id and academic_year_id and year_of_study):
            raise ValidationError("Select academic year, course and year of study first")
        return service.open_workspace(
            owner=_owner(),
            course_id=course_id,
            academic_year_id=academic_year_id,
            year_of_study=year_of_study,
        )

    @app.route("/attendance", endpoint="attendance")
    @login_required
    def attendance():
        course_id, academic_year_id, year_of_study = _selection(request.args)
        workspace = None
        rows: list[dict] = []
        stats = AttendanceStats()
        courses, years = [], []

        try:
            courses = container.course_service.list_courses()
            years = container.year_service.list_years()
            if academic_year_id is None:
                active = next((y for y in years if y.is_active), None)
                academic_year_id = active.year_id if active else None

            if course_id and academic_year_id and year_of_study:
                workspace = _workspace((course_id, academic_year_id, year_of_study))
                rows = service.rows(workspace)
                stats = workspace.stats
        except (ValidationError, ApiError) as e:
            flash(str(e), "danger")

        return render_template(
            "attendance.html",
            courses=courses,
            years=years,
            years_of_study=YEARS_OF_STUDY,
            course_id=course_id,
            academic_year_id=academic_year_id,
            year_of_study=year_of_study,
            selected_course=next((c for c in courses if c.course_id == course_id), None),
            workspace=workspace,
            rows=rows,
            stats=stats,
            today=format_date(service.today()),
            active_page="attendance",
        )

    @app.route("/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance():
        data = _payload()
        selection = _selection(data)
        workspace = None
        try:
            workspace = _workspace(selection)
            student_id = optional_int(data.get("studentId"))
            try:
                status = AttendanceStatus(data.get("status", ""))
            except ValueError:
                raise ValidationError("Attendance must be present, absent or late")
            if student_id is None:
                raise ValidationError("Student is not in the selected group")
            workspace.mark(student_id, status)
        except ValidationError as e:
            return _reply(workspace, ok=False, message=str(e), category="warning", selection=selection)
        except ApiError as e:
            return _reply(workspace, ok=False, message=str(e), category="danger", selection=selection)
        except Exception:
            logger.exception("mark attendance failed")
            return _reply(
                workspace, ok=False, message="System error while marking attendance", category="danger", selection=selection
            )

        if request.is_json:
            return _reply(workspace, ok=True, message="Attendance staged", category="info", selection=selection)
        return _back(*selection)

    @app.route("/attendance/mark-all", methods=["POST"], endpoint="mark_all_present")
    @login_required
    def mark_all_present():
        data = _payload()
        selection = _selection(data)
        workspace = None
        try:
            workspace = _workspace(selection)
            staged = workspace.mark_all_unmarked_present()
        except ValidationError as e:
            return _reply(workspace, ok=False, message=str(e), category="warning", selection=selection)
        except ApiError as e:
            return _reply(workspace, ok=False, message=str(e), category="danger", selection=selection)

        return _reply(
            workspace, ok=True, message=f"{staged} students marked present", category="info", selection=selection
        )

    @app.route("/attendance/save", methods=["POST"], endpoint="save_attendance")
    @login_required
    def save_attendance():
        data = _payload()
        selection = _selection(data)
        workspace = None
        try:
            workspace = _workspace(selection)
            result = workspace.save()
        except SaveInProgressError as e:
            return _reply(workspace, ok=False, message=str(e), category="warning", selection=selection)
        except SaveTransportError as e:
            return _reply(
                workspace, ok=False, message=f"Failed to save attendance: {e}", category="danger", selection=selection
            )
        except (ValidationError, ApiError) as e:
            return _reply(workspace, ok=False, message=str(e), category="danger", selection=selection)
        except Exception:
            logger.exception("save attendance failed")
            return _reply(
                workspace, ok=False, message="System error while saving attendance", category="danger", selection=selection
            )

        category = {
            SaveOutcome.NOTHING_TO_SAVE: "info",
            SaveOutcome.SAVED: "success",
            SaveOutcome.PARTIAL: "warning",
            SaveOutcome.DISCARDED: "warning",
        }[result.outcome]
        return _reply(workspace, ok=True, message=result.message, category=category, selection=selection)

    @app.route("/attendance/stats", endpoint="attendance_stats")
    @login_required
    def attendance_stats():
        workspace = service.current_workspace(_owner())
        if workspace is None or workspace.closed:
            return jsonify(AttendanceStats().as_dict() | {"pending": 0, "rosterSize": 0})
        return jsonify(
            workspace.stats.as_dict()
            | {"pending": len(workspace.pending), "rosterSize": len(workspace.roster)}
        )
