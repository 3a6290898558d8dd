from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..academic_years.model import AcademicYear
from ..academic_years.repository import AcademicYearRepository
from ..attendance.model import AttendanceStats
from ..attendance.repository import AttendanceQueryRepository


@dataclass(frozen=True)
class DashboardData:
    active_year: Optional[AcademicYear]
    years: Sequence[AcademicYear]
    stats: AttendanceStats


class DashboardService:
    def __init__(self, attendance: AttendanceQueryRepository, years: AcademicYearRepository):
        self._attendance = attendance
        self._years = years

    def build(self) -> DashboardData:
        years = list(self._years.list_all())
        return DashboardData(
            active_year=next((y for y in years if y.is_active), None),
            years=years,
            stats=self._attendance.fetch_stats() or AttendanceStats(),
        )
