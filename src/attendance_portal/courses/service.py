from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.exceptions import FormValidationError, ValidationError
from .forms import CourseForm
from .model import Course
from .repository import CourseRepository

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, courses: CourseRepository):
        self._courses = courses

    def list_courses(self) -> Sequence[Course]:
        return self._courses.list_all()

    def get_course(self, course_id: int) -> Optional[Course]:
        return self._courses.get_by_id(course_id)

    def create_course(self, form: CourseForm) -> Course:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)
        course = self._courses.create(form.to_payload())
        self._courses.invalidate()
        logger.info("course created id=%s code=%s", course.course_id, course.code)
        return course

    def update_course(self, course_id: int, form: CourseForm) -> Course:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)
        if not self._courses.get_by_id(course_id):
            raise ValidationError("Course not found")
        course = self._courses.update(course_id, form.to_payload())
        self._courses.invalidate()
        return course

    def delete_course(self, course_id: int) -> None:
        if not self._courses.get_by_id(course_id):
            raise ValidationError("Course not found")
        self._courses.delete(course_id)
        self._courses.invalidate()
        logger.info("course deleted id=%s", course_id)
