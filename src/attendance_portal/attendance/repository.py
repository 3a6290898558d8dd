from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceScope, AttendanceStats, BatchResult


class AttendanceQueryRepository(Protocol):
    def fetch_for_scope(self, scope: AttendanceScope) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def fetch_range(
        self,
        *,
        course_id: int,
        academic_year_id: int,
        date_from: date,
        date_to: date,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def fetch_stats(self) -> Optional[AttendanceStats]:
        """Aggregate counts across all attendance, for the dashboard."""

        raise NotImplementedError

    def invalidate(self) -> None:
        raise NotImplementedError


class AttendanceCommandRepository(Protocol):
    def create(self, record: AttendanceRecord) -> AttendanceRecord:
        raise NotImplementedError

    def create_batch(self, records: Sequence[AttendanceRecord]) -> BatchResult:
        raise NotImplementedError


class AttendanceRepository(AttendanceQueryRepository, AttendanceCommandRepository, Protocol):
    pass
