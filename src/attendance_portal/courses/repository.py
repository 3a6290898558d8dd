from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    def list_all(self) -> Sequence[Course]:
        raise NotImplementedError

    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def create(self, payload: dict) -> Course:
        raise NotImplementedError

    def update(self, course_id: int, payload: dict) -> Course:
        raise NotImplementedError

    def delete(self, course_id: int) -> None:
        raise NotImplementedError

    def invalidate(self) -> None:
        """Forget cached course lists after a write."""

        raise NotImplementedError
