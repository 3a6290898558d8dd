from __future__ import annotations

import pytest

from attendance_portal.common.datetime_utils import parse_optional_date, parse_optional_datetime
from attendance_portal.common.formatting import attendance_percentage, initials
from attendance_portal.core.exceptions import FormValidationError
from attendance_portal.students.forms import StudentForm
from attendance_portal.students.service import StudentService, filter_students


def test_filter_by_name_or_roll_number(roster):
    assert [s.name for s in filter_students(roster, search="bil")] == ["Bilal Khan"]
    assert [s.name for s in filter_students(roster, search="r003")] == ["Chen Wei"]
    assert filter_students(roster, search="  ") == roster


def test_filter_by_group(roster):
    assert len(filter_students(roster, group="BCA")) == 3
    assert filter_students(roster, group="MCA") == []


def test_create_student_invalidates_listing(students_repo):
    service = StudentService(students_repo)

    service.create_student(
        StudentForm(name="Dev", roll_number="R9", course_id=1, year_of_study="1st", academic_year_id=1)
    )

    assert students_repo.invalidations == 1


def test_create_student_with_missing_fields(students_repo):
    with pytest.raises(FormValidationError, match="Student name is required"):
        StudentService(students_repo).create_student(
            StudentForm(name="", roll_number="", course_id=None, year_of_study="", academic_year_id=None)
        )


@pytest.mark.parametrize(
    "present,total,expected",
    [(0, 0, 0), (5, 8, 63), (1, 8, 13), (3, 3, 100), (0, 4, 0)],
)
def test_attendance_percentage(present, total, expected):
    assert attendance_percentage(present, total) == expected


def test_initials():
    assert initials("asha rao kumar") == "AR"
    assert initials("Chen") == "C"


def test_backend_dates():
    assert parse_optional_date("2026-10-18T00:00:00.000Z").isoformat() == "2026-10-18"
    assert parse_optional_datetime("2026-10-18T09:30:00Z").hour == 9
    assert parse_optional_date(None) is None
