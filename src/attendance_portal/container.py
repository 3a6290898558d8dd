from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import requests

from .academic_years.api_academic_year_repository import ApiAcademicYearRepository
from .academic_years.service import AcademicYearService
from .api.cache import QueryCache
from .api.client import ApiClient
from .attendance.api_attendance_repository import ApiAttendanceRepository
from .attendance.registry import WorkspaceRegistry
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_MARKED_BY
from .courses.api_course_repository import ApiCourseRepository
from .courses.service import CourseService
from .dashboard.service import DashboardService
from .reports.service import ReportService
from .students.api_student_repository import ApiStudentRepository
from .students.service import StudentService
from .users.api_user_repository import ApiUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    client: ApiClient

    users_repo: ApiUserRepository
    courses_repo: ApiCourseRepository
    years_repo: ApiAcademicYearRepository
    students_repo: ApiStudentRepository
    attendance_repo: ApiAttendanceRepository

    auth_service: AuthService
    user_service: UserService
    course_service: CourseService
    year_service: AcademicYearService
    student_service: StudentService
    attendance_service: AttendanceService
    report_service: ReportService
    dashboard_service: DashboardService


def build_container(*, api_config: dict, session: Optional[requests.Session] = None) -> Container:
    client = ApiClient(
        str(api_config["base_url"]),
        token=str(api_config.get("token") or ""),
        timeout=float(api_config.get("timeout", 10)),
        session=session,
        cache=QueryCache(),
    )

    users_repo = ApiUserRepository(client)
    courses_repo = ApiCourseRepository(client)
    years_repo = ApiAcademicYearRepository(client)
    students_repo = ApiStudentRepository(client)
    attendance_repo = ApiAttendanceRepository(client)

    return Container(
        client=client,
        users_repo=users_repo,
        courses_repo=courses_repo,
        years_repo=years_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        course_service=CourseService(courses_repo),
        year_service=AcademicYearService(years_repo),
        student_service=StudentService(students_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            students_repo,
            registry=WorkspaceRegistry(),
            marked_by=str(api_config.get("marked_by") or DEFAULT_MARKED_BY),
        ),
        report_service=ReportService(attendance_repo, students_repo, courses_repo),
        dashboard_service=DashboardService(attendance_repo, years_repo),
    )
