from __future__ import annotations

import csv
import io

from ..attendance.model import AttendanceStats
from ..attendance.repository import AttendanceQueryRepository
from ..common.datetime_utils import format_date, format_datetime
from ..core.constants import REPORT_CSV_HEADERS
from ..core.enums import ReportType
from ..core.exceptions import FormValidationError
from ..courses.repository import CourseRepository
from ..students.model import StudentFilter
from ..students.repository import StudentRepository
from .forms import ReportForm
from .model import Report, ReportSummary


class ReportService:
    def __init__(
        self,
        attendance: AttendanceQueryRepository,
        students: StudentRepository,
        courses: CourseRepository,
    ):
        self._attendance = attendance
        self._students = students
        self._courses = courses

    def generate(self, form: ReportForm) -> Report:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)

        records = list(
            self._attendance.fetch_range(
                course_id=form.course_id,
                academic_year_id=form.academic_year_id,
                date_from=form.start,
                date_to=form.end,
            )
        )
        students = self._students.list(
            StudentFilter(
                course_id=form.course_id,
                academic_year_id=form.academic_year_id,
                year_of_study=form.year_of_study,
            )
        )

        stats = AttendanceStats.from_statuses(r.status for r in records)
        course = self._courses.get_by_id(form.course_id)
        kind = "Daily" if form.report_type == ReportType.DAY_WISE.value else "Summary"

        return Report(
            title=f"{course.name if course else 'Unknown Course'} - {form.year_of_study} Year ({kind})",
            period=f"{format_date(form.start)} - {format_date(form.end)}",
            summary=ReportSummary(
                total_students=len(students),
                total_classes=len({r.date for r in records}),
                present=stats.present,
                absent=stats.absent,
                late=stats.late,
                attendance_percentage=stats.percentage,
            ),
            details=records,
        )

    @staticmethod
    def to_csv(report: Report) -> bytes:
        out = io.StringIO()
        writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(REPORT_CSV_HEADERS)
        for r in report.details:
            writer.writerow(
                [
                    r.date.isoformat(),
                    r.student.name if r.student else "Unknown",
                    r.student.roll_number if r.student else "Unknown",
                    r.status.value,
                    format_datetime(r.marked_at),
                ]
            )
        return out.getvalue().encode("utf-8-sig")
