from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student, StudentFilter


class StudentRepository(Protocol):
    def list(self, student_filter: StudentFilter) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, payload: dict) -> Student:
        raise NotImplementedError

    def update(self, student_id: int, payload: dict) -> Student:
        raise NotImplementedError

    def delete(self, student_id: int) -> None:
        raise NotImplementedError

    def invalidate(self) -> None:
        raise NotImplementedError
