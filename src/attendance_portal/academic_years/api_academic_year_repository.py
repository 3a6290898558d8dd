from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..common.datetime_utils import parse_optional_date
from .model import AcademicYear
from .repository import AcademicYearRepository

ACADEMIC_YEARS_PATH = "/api/academic-years"


def to_academic_year(row: dict[str, Any]) -> AcademicYear:
    return AcademicYear(
        year_id=int(row["id"]),
        name=row["name"],
        start_date=parse_optional_date(row.get("startDate")),
        end_date=parse_optional_date(row.get("endDate")),
        description=row.get("description") or None,
        is_active=bool(row.get("isActive", False)),
        total_students=int(row.get("totalStudents") or 0),
        total_classes=int(row.get("totalClasses") or 0),
    )


class ApiAcademicYearRepository(AcademicYearRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> Sequence[AcademicYear]:
        rows = self._client.get(ACADEMIC_YEARS_PATH) or []
        return [to_academic_year(r) for r in rows]

    def get_by_id(self, year_id: int) -> Optional[AcademicYear]:
        for year in self.list_all():
            if year.year_id == int(year_id):
                return year
        return None

    def create(self, payload: dict) -> AcademicYear:
        return to_academic_year(self._client.post(ACADEMIC_YEARS_PATH, payload))

    def update(self, year_id: int, payload: dict) -> AcademicYear:
        return to_academic_year(self._client.put(f"{ACADEMIC_YEARS_PATH}/{int(year_id)}", payload))

    def delete(self, year_id: int) -> None:
        self._client.delete(f"{ACADEMIC_YEARS_PATH}/{int(year_id)}")

    def invalidate(self) -> None:
        self._client.invalidate(ACADEMIC_YEARS_PATH)
