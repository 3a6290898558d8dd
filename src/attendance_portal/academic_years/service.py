from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.exceptions import FormValidationError, ValidationError
from .forms import AcademicYearForm
from .model import AcademicYear
from .repository import AcademicYearRepository

logger = logging.getLogger(__name__)


class AcademicYearService:
    def __init__(self, years: AcademicYearRepository):
        self._years = years

    def list_years(self) -> Sequence[AcademicYear]:
        return self._years.list_all()

    def get_year(self, year_id: int) -> Optional[AcademicYear]:
        return self._years.get_by_id(year_id)

    def active_year(self) -> Optional[AcademicYear]:
        return next((y for y in self._years.list_all() if y.is_active), None)

    def create_year(self, form: AcademicYearForm) -> AcademicYear:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)
        if any(y.name == form.name for y in self._years.list_all()):
            raise ValidationError(f"Academic year {form.name} already exists")

        year = self._years.create(form.to_payload())
        self._years.invalidate()
        logger.info("academic year created id=%s name=%s", year.year_id, year.name)
        return year

    def update_year(self, year_id: int, form: AcademicYearForm) -> AcademicYear:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)
        if not self._years.get_by_id(year_id):
            raise ValidationError("Academic year not found")

        year = self._years.update(year_id, form.to_payload())
        self._years.invalidate()
        return year

    def delete_year(self, year_id: int) -> None:
        year = self._years.get_by_id(year_id)
        if not year:
            raise ValidationError("Academic year not found")
        if year.is_active:
            raise ValidationError("Cannot delete the active academic year")

        self._years.delete(year_id)
        self._years.invalidate()
        logger.info("academic year deleted id=%s", year_id)
