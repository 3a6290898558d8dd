from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.validators import FormErrors, check_required, optional_int
from ..core.constants import YEARS_OF_STUDY


@dataclass(frozen=True)
class StudentForm:
    name: str
    roll_number: str
    course_id: Optional[int]
    year_of_study: str
    academic_year_id: Optional[int]
    contact: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "StudentForm":
        return cls(
            name=(form.get("name") or "").strip(),
            roll_number=(form.get("rollNumber") or "").strip(),
            course_id=optional_int(form.get("courseId")),
            year_of_study=(form.get("yearOfStudy") or "").strip(),
            academic_year_id=optional_int(form.get("academicYearId")),
            contact=(form.get("contact") or "").strip() or None,
            is_active=form.get("isActive", "on") in ("on", "true", "1"),
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        check_required(errors, "name", self.name, "Student name is required")
        check_required(errors, "rollNumber", self.roll_number, "Roll number is required")
        if self.course_id is None:
            errors.add("courseId", "Course is required")
        if self.year_of_study not in YEARS_OF_STUDY:
            errors.add("yearOfStudy", "Year of study is required")
        if self.academic_year_id is None:
            errors.add("academicYearId", "Academic year is required")
        return errors

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "rollNumber": self.roll_number,
            "courseId": self.course_id,
            "yearOfStudy": self.year_of_study,
            "academicYearId": self.academic_year_id,
            "contact": self.contact or "",
            "isActive": self.is_active,
        }
