from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AcademicYear


class AcademicYearRepository(Protocol):
    def list_all(self) -> Sequence[AcademicYear]:
        raise NotImplementedError

    def get_by_id(self, year_id: int) -> Optional[AcademicYear]:
        raise NotImplementedError

    def create(self, payload: dict) -> AcademicYear:
        raise NotImplementedError

    def update(self, year_id: int, payload: dict) -> AcademicYear:
        raise NotImplementedError

    def delete(self, year_id: int) -> None:
        raise NotImplementedError

    def invalidate(self) -> None:
        raise NotImplementedError
