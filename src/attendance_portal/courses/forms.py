from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.validators import FormErrors, check_required


@dataclass(frozen=True)
class CourseForm:
    name: str
    code: str
    description: Optional[str] = None

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "CourseForm":
        return cls(
            name=(form.get("name") or "").strip(),
            code=(form.get("code") or "").strip(),
            description=(form.get("description") or "").strip() or None,
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        check_required(errors, "name", self.name, "Course name is required")
        check_required(errors, "code", self.code, "Course code is required")
        return errors

    def to_payload(self) -> dict:
        return {"name": self.name, "code": self.code, "description": self.description}
