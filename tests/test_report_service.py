"""Tests for reports."""

import pytest

from ccrm.core.entities import Course
from ccrm.core.enums import Grade, Semester
from ccrm.services import ReportService


@pytest.fixture
def reports(students, courses, service):
    courses.add(Course("CS201-A", "Data Structures", 5, Semester.WINTER,
                       instructor="Dr. Johnson", department="Computer Science"))
    courses.add(Course("ART100-A", "Drawing", 2, Semester.SPRING, department="Arts"))
    courses.deactivate("ART100-A")
    return ReportService(students, courses, service)


def test_courses_by_department_counts_active(reports):
    assert reports.courses_by_department() == {"Computer Science": 2, "Mathematics": 1}


def test_courses_by_semester_in_semester_order(reports):
    assert reports.courses_by_semester() == {
        "SPRING": ["MATH201-B"],
        "FALL": ["CS101-A"],
        "WINTER": ["CS201-A"],
    }
    assert list(reports.courses_by_semester()) == ["SPRING", "FALL", "WINTER"]


def test_average_credits(reports):
    assert reports.average_credits() == pytest.approx(4.0)


def test_summary(reports, service):
    service.enroll("S001", "CS101-A")
    service.enroll("S001", "MATH201-B")
    service.assign_grade("S001", "CS101-A", Grade.A)
    service.assign_grade("S001", "MATH201-B", Grade.B)

    summary = reports.summary(top=1)

    assert summary["students"] == 2
    assert summary["courses"] == 4
    assert summary["active_courses"] == 3
    assert summary["average_gpa"] == pytest.approx(4.25)
    assert summary["grade_distribution"] == {"A": 1, "B": 1}
    assert summary["top_students"] == [{"id": "S001", "full_name": "John Doe", "gpa": 8.5}]
    assert summary["enrollment"]["active_enrollments"] == 2
