from __future__ import annotations

from typing import Any, Sequence

from ..api.client import ApiClient
from ..courses.api_course_repository import to_course
from .model import Student, StudentFilter
from .repository import StudentRepository

STUDENTS_PATH = "/api/students"


def to_student(row: dict[str, Any]) -> Student:
    course = row.get("course")
    return Student(
        student_id=int(row["id"]),
        name=row["name"],
        roll_number=str(row.get("rollNumber") or ""),
        course_id=int(row["courseId"]),
        year_of_study=row.get("yearOfStudy") or "",
        academic_year_id=int(row["academicYearId"]),
        contact=row.get("contact") or None,
        is_active=bool(row.get("isActive", True)),
        course=to_course(course) if course else None,
    )


class ApiStudentRepository(StudentRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list(self, student_filter: StudentFilter) -> Sequence[Student]:
        rows = self._client.get(STUDENTS_PATH, student_filter.to_params()) or []
        return [to_student(r) for r in rows]

    def create(self, payload: dict) -> Student:
        return to_student(self._client.post(STUDENTS_PATH, payload))

    def update(self, student_id: int, payload: dict) -> Student:
        return to_student(self._client.put(f"{STUDENTS_PATH}/{int(student_id)}", payload))

    def delete(self, student_id: int) -> None:
        self._client.delete(f"{STUDENTS_PATH}/{int(student_id)}")

    def invalidate(self) -> None:
        self._client.invalidate(STUDENTS_PATH)
