from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..courses.model import Course


@dataclass(frozen=True)
class Student:
    """Domain entity: a student on a course roster. Read-only for attendance marking."""

    student_id: int
    name: str
    roll_number: str
    course_id: int
    year_of_study: str
    academic_year_id: int
    contact: Optional[str] = None
    is_active: bool = True
    course: Optional[Course] = None


@dataclass(frozen=True)
class StudentFilter:
    course_id: Optional[int] = None
    academic_year_id: Optional[int] = None
    year_of_study: Optional[str] = None

    def to_params(self) -> dict:
        return {
            "courseId": self.course_id,
            "academicYearId": self.academic_year_id,
            "yearOfStudy": self.year_of_study or None,
        }
