from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from .model import Course
from .repository import CourseRepository

COURSES_PATH = "/api/courses"


def to_course(row: dict[str, Any]) -> Course:
    return Course(
        course_id=int(row["id"]),
        name=row["name"],
        code=row.get("code") or "",
        description=row.get("description"),
    )


class ApiCourseRepository(CourseRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def list_all(self) -> Sequence[Course]:
        rows = self._client.get(COURSES_PATH) or []
        return [to_course(r) for r in rows]

    def get_by_id(self, course_id: int) -> Optional[Course]:
        for course in self.list_all():
            if course.course_id == int(course_id):
                return course
        return None

    def create(self, payload: dict) -> Course:
        return to_course(self._client.post(COURSES_PATH, payload))

    def update(self, course_id: int, payload: dict) -> Course:
        return to_course(self._client.put(f"{COURSES_PATH}/{int(course_id)}", payload))

    def delete(self, course_id: int) -> None:
        self._client.delete(f"{COURSES_PATH}/{int(course_id)}")

    def invalidate(self) -> None:
        self._client.invalidate(COURSES_PATH)
