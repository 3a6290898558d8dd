from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.validators import FormErrors, check_date, check_pattern, check_required
from ..core.constants import ACADEMIC_YEAR_PATTERN


@dataclass(frozen=True)
class AcademicYearForm:
    """Create/edit form for an academic year (``2024-25`` style names)."""

    name: str
    start_date: str
    end_date: str
    description: Optional[str] = None
    is_active: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "AcademicYearForm":
        return cls(
            name=(form.get("name") or "").strip(),
            start_date=(form.get("startDate") or "").strip(),
            end_date=(form.get("endDate") or "").strip(),
            description=(form.get("description") or "").strip() or None,
            is_active=form.get("isActive") in ("on", "true", "1"),
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        if check_required(errors, "name", self.name, "Academic year name is required"):
            check_pattern(
                errors, "name", self.name, ACADEMIC_YEAR_PATTERN,
                "Academic year must be in format YYYY-YY (e.g., 2024-25)",
            )

        start = check_date(errors, "startDate", self.start_date, "Start date is required")
        end = check_date(errors, "endDate", self.end_date, "End date is required")
        if start and end and start >= end:
            errors.add("endDate", "End date must be after start date")
        return errors

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "description": self.description or "",
            "isActive": self.is_active,
        }
