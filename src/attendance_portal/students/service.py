from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.exceptions import FormValidationError
from .forms import StudentForm
from .model import Student, StudentFilter
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def filter_students(students: Sequence[Student], *, search: str = "", group: str = "all") -> list[Student]:
    """Search by name or roll number (case-insensitive) and by course code group."""
    term = (search or "").strip().lower()
    out = []
    for s in students:
        if term and term not in s.name.lower() and term not in s.roll_number.lower():
            continue
        if group and group != "all" and (s.course is None or s.course.code != group):
            continue
        out.append(s)
    return out


class StudentService:
    def __init__(self, students: StudentRepository):
        self._students = students

    def list_students(self, student_filter: Optional[StudentFilter] = None) -> Sequence[Student]:
        return self._students.list(student_filter or StudentFilter())

    def get_student(self, student_id: int) -> Optional[Student]:
        return next((s for s in self.list_students() if s.student_id == int(student_id)), None)

    def create_student(self, form: StudentForm) -> Student:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)
        student = self._students.create(form.to_payload())
        self._students.invalidate()
        logger.info("student created id=%s roll=%s", student.student_id, student.roll_number)
        return student

    def update_student(self, student_id: int, form: StudentForm) -> Student:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)
        student = self._students.update(student_id, form.to_payload())
        self._students.invalidate()
        return student

    def delete_student(self, student_id: int) -> None:
        self._students.delete(student_id)
        self._students.invalidate()
        logger.info("student deleted id=%s", student_id)
