from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

import pytest

from attendance_portal.academic_years.model import AcademicYear
from attendance_portal.attendance.model import AttendanceRecord, AttendanceScope, BatchResult
from attendance_portal.core.enums import AttendanceStatus, Role
from attendance_portal.core.exceptions import ApiError
from attendance_portal.courses.model import Course
from attendance_portal.students.model import Student
from attendance_portal.users.model import User

TODAY = date(2026, 10, 18)


def build_student(student_id: int, name: str, *, course_id=1, year_of_study="1st", academic_year_id=1, is_active=True):
    return Student(
        student_id=student_id,
        name=name,
        roll_number=f"R{student_id:03d}",
        course_id=course_id,
        year_of_study=year_of_study,
        academic_year_id=academic_year_id,
        is_active=is_active,
        course=Course(course_id=course_id, name="BCA", code="BCA"),
    )


def build_record(student_id: int, status: AttendanceStatus, *, course_id=1, academic_year_id=1, on=TODAY, student=None):
    return AttendanceRecord(
        student_id=student_id,
        course_id=course_id,
        academic_year_id=academic_year_id,
        date=on,
        status=status,
        marked_by="faculty",
        student=student,
    )


class InMemoryAttendance:
    """Stands in for the REST backend's attendance resource."""

    def __init__(self, records=()):
        self.records: list[AttendanceRecord] = list(records)
        self.batches: list[list[AttendanceRecord]] = []
        self.fetch_calls = 0
        self.invalidations = 0
        self.error_count = 0
        self.fail_with: Optional[Exception] = None
        self.fail_fetch_with: Optional[Exception] = None
        self.stats = None
        # when set, create_batch blocks until ``release`` is set
        self.entered = threading.Event()
        self.release: Optional[threading.Event] = None

    def fetch_for_scope(self, scope: AttendanceScope):
        self.fetch_calls += 1
        if self.fail_fetch_with:
            raise self.fail_fetch_with
        return [r for r in self.records if r.in_scope(scope)]

    def fetch_range(self, *, course_id, academic_year_id, date_from, date_to):
        return [
            r
            for r in self.records
            if r.course_id == course_id and r.academic_year_id == academic_year_id and date_from <= r.date <= date_to
        ]

    def fetch_stats(self):
        return self.stats

    def invalidate(self) -> None:
        self.invalidations += 1

    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        self.records.append(record)
        return record

    def create_batch(self, records) -> BatchResult:
        self.entered.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.fail_with:
            raise self.fail_with
        self.batches.append(list(records))
        saved = list(records)[: len(records) - self.error_count]
        self.records.extend(saved)
        return BatchResult(success_count=len(saved), error_count=self.error_count)


class InMemoryStudents:
    def __init__(self, students=()):
        self.students: list[Student] = list(students)
        self.invalidations = 0

    def list(self, student_filter):
        out = []
        for s in self.students:
            if student_filter.course_id is not None and s.course_id != student_filter.course_id:
                continue
            if student_filter.academic_year_id is not None and s.academic_year_id != student_filter.academic_year_id:
                continue
            if student_filter.year_of_study and s.year_of_study != student_filter.year_of_study:
                continue
            out.append(s)
        return out

    def create(self, payload):
        student = build_student(len(self.students) + 1, payload["name"])
        self.students.append(student)
        return student

    def update(self, student_id, payload):
        return next(s for s in self.students if s.student_id == student_id)

    def delete(self, student_id):
        self.students = [s for s in self.students if s.student_id != student_id]

    def invalidate(self):
        self.invalidations += 1


@dataclass
class InMemoryCourses:
    courses: dict[int, Course] = field(default_factory=dict)

    def list_all(self):
        return list(self.courses.values())

    def get_by_id(self, course_id):
        return self.courses.get(int(course_id))

    def create(self, payload):
        course = Course(course_id=len(self.courses) + 1, name=payload["name"], code=payload["code"])
        self.courses[course.course_id] = course
        return course

    def update(self, course_id, payload):
        return self.courses[course_id]

    def delete(self, course_id):
        self.courses.pop(course_id, None)

    def invalidate(self):
        pass


@dataclass
class InMemoryYears:
    years: dict[int, AcademicYear] = field(default_factory=dict)

    def list_all(self):
        return list(self.years.values())

    def get_by_id(self, year_id):
        return self.years.get(int(year_id))

    def create(self, payload):
        year = AcademicYear(
            year_id=len(self.years) + 1,
            name=payload["name"],
            start_date=date.fromisoformat(payload["startDate"]),
            end_date=date.fromisoformat(payload["endDate"]),
        )
        self.years[year.year_id] = year
        return year

    def update(self, year_id, payload):
        return self.years[year_id]

    def delete(self, year_id):
        self.years.pop(year_id, None)

    def invalidate(self):
        pass


class InMemoryUsers:
    def __init__(self, users=(), passwords=None):
        self.users: dict[int, User] = {u.user_id: u for u in users}
        self.passwords: dict[str, str] = dict(passwords or {})
        self.backend_down = False

    def login(self, username, password):
        if self.backend_down:
            raise ApiError("Could not reach the attendance service")
        user = next((u for u in self.users.values() if u.username == username), None)
        if user and self.passwords.get(username) == password:
            return user
        return None

    def list_all(self):
        return list(self.users.values())

    def get_by_id(self, user_id):
        if self.backend_down:
            raise ApiError("Could not reach the attendance service")
        return self.users.get(int(user_id))

    def create(self, payload):
        user = User(
            user_id=max(self.users, default=0) + 1,
            username=payload["username"],
            full_name=payload["fullName"],
            role=Role(payload["role"]),
        )
        self.users[user.user_id] = user
        return user

    def update(self, user_id, payload):
        return self.users[user_id]

    def delete(self, user_id):
        self.users.pop(user_id, None)

    def invalidate(self):
        pass


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def scope() -> AttendanceScope:
    return AttendanceScope(course_id=1, academic_year_id=1, date=TODAY)


@pytest.fixture
def roster():
    return [build_student(1, "Asha Rao"), build_student(2, "Bilal Khan"), build_student(3, "Chen Wei")]


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def students_repo(roster) -> InMemoryStudents:
    return InMemoryStudents(roster)


@pytest.fixture
def courses_repo() -> InMemoryCourses:
    return InMemoryCourses({1: Course(course_id=1, name="BCA", code="BCA")})


@pytest.fixture
def years_repo() -> InMemoryYears:
    return InMemoryYears(
        {1: AcademicYear(year_id=1, name="2026-27", start_date=date(2026, 6, 1), end_date=date(2027, 4, 30), is_active=True)}
    )


@pytest.fixture
def users_repo() -> InMemoryUsers:
    admin = User(user_id=1, username="admin", full_name="Admin", role=Role.ADMIN)
    faculty = User(user_id=2, username="priya", full_name="Priya Nair", role=Role.FACULTY)
    return InMemoryUsers([admin, faculty], {"admin": "admin123", "priya": "faculty123"})


@pytest.fixture
def make_student():
    return build_student


@pytest.fixture
def make_record():
    return build_record


class FakeResponse:
    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self.text = "" if body is None else (body if isinstance(body, str) else json.dumps(body))
        self.content = self.text.encode()

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Replays canned responses (or raises canned exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def http_response():
    return FakeResponse


@pytest.fixture
def http_session():
    return FakeSession
