from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..common.validators import FormErrors, check_date, optional_int
from ..core.constants import YEARS_OF_STUDY
from ..core.enums import ReportType


@dataclass(frozen=True)
class ReportForm:
    report_type: str
    course_id: Optional[int]
    year_of_study: str
    academic_year_id: Optional[int]
    from_date: str
    to_date: str

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "ReportForm":
        return cls(
            report_type=(form.get("reportType") or ReportType.DAY_WISE.value).strip(),
            course_id=optional_int(form.get("courseId")),
            year_of_study=(form.get("yearOfStudy") or "").strip(),
            academic_year_id=optional_int(form.get("academicYearId")),
            from_date=(form.get("fromDate") or "").strip(),
            to_date=(form.get("toDate") or "").strip(),
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        if self.report_type not in {t.value for t in ReportType}:
            errors.add("reportType", "Report type is required")
        if self.course_id is None:
            errors.add("courseId", "Course is required")
        if self.year_of_study not in YEARS_OF_STUDY:
            errors.add("yearOfStudy", "Year of study is required")
        if self.academic_year_id is None:
            errors.add("academicYearId", "Academic year is required")

        start = check_date(errors, "fromDate", self.from_date, "From date is required")
        end = check_date(errors, "toDate", self.to_date, "To date is required")
        if start and end and start > end:
            errors.add("toDate", "To date must be after from date")
        return errors

    @property
    def start(self) -> date:
        return parse_iso_date(self.from_date)

    @property
    def end(self) -> date:
        return parse_iso_date(self.to_date)

    def to_query(self) -> dict:
        return {
            "reportType": self.report_type,
            "courseId": self.course_id,
            "yearOfStudy": self.year_of_study,
            "academicYearId": self.academic_year_id,
            "fromDate": self.from_date,
            "toDate": self.to_date,
        }
