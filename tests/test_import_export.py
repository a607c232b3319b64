"""Tests for CSV import and export."""

import os

import pytest

from ccrm.core.entities import Course, Student
from ccrm.core.enums import Grade, Semester
from ccrm.core.exceptions import IOFailure, ParseError
from ccrm.services.import_export_service import COURSE_HEADER, STUDENT_HEADER, parse_bool


class TestParsing:

    def test_parse_student_minimal_row(self, exchange):
        student = exchange.parse_student("S001,2023-CS-0001,John Doe,john.doe@email.com")
        assert student.id == "S001"
        assert student.reg_no == "2023-CS-0001"
        assert student.full_name == "John Doe"
        assert student.active

    def test_parse_student_active_flag(self, exchange):
        student = exchange.parse_student('S001,2023-CS-0001,"John Doe",john.doe@email.com,no')
        assert student.full_name == "John Doe"
        assert not student.active

    @pytest.mark.parametrize("text, expected", [
        ("true", True), ("YES", True), (" 1 ", True),
        ("false", False), ("No", False), ("0", False),
    ])
    def test_parse_bool(self, text, expected):
        assert parse_bool(text) is expected

    def test_parse_bool_rejects_other_text(self):
        with pytest.raises(ParseError):
            parse_bool("maybe")

    def test_parse_course(self, exchange):
        course = exchange.parse_course("CS101-A,Introduction to Programming,3,Dr. Johnson,FALL,Computer Science")
        assert course.code == "CS101-A"
        assert course.credits == 3
        assert course.semester is Semester.FALL
        assert course.department == "Computer Science"

    @pytest.mark.parametrize("line", [
        "CS101-A,Intro,3,Dr. Johnson,FALL",
        "CS101-A,Intro,three,Dr. Johnson,FALL,CS",
        "CS101-A,Intro,3,Dr. Johnson,AUTUMN,CS",
        "CS101-A,Intro,9,Dr. Johnson,FALL,CS",
        ",Intro,3,Dr. Johnson,FALL,CS",
    ])
    def test_parse_course_rejects_bad_rows(self, exchange, line):
        with pytest.raises(ParseError):
            exchange.parse_course(line)


class TestImport:

    def test_import_skips_header_blank_and_malformed_rows(self, exchange, write_data_file):
        name = write_data_file("students.csv", "\n".join([
            STUDENT_HEADER,
            "S001,2023-CS-0001,John Doe,john.doe@email.com",
            "",
            "S002,2023-CS-0002",
            "S003,2023-CS-0003,Carol Davis,carol@email.com,maybe",
            "S004,2023-CS-0004,Dan Brown,dan@email.com,false",
        ]) + "\n")

        students = exchange.import_students(name)

        assert [s.id for s in students] == ["S001", "S004"]
        assert not students[1].active

    def test_import_courses_keeps_valid_rows(self, exchange, write_data_file):
        name = write_data_file("courses.csv", "\n".join([
            "Code,Title,Credits,Instructor,Semester,Department",
            "CS101-A,Introduction to Programming,3,Dr. Johnson,FALL,Computer Science",
            "MATH201-B,Calculus II,x,Prof. Davis,SPRING,Mathematics",
            "PHY110-A,Physics I,4,Dr. Brown,Summer,Physics",
        ]))

        courses = exchange.import_courses(name)

        assert [c.code for c in courses] == ["CS101-A", "PHY110-A"]
        assert courses[1].semester is Semester.SUMMER

    def test_first_line_is_always_skipped(self, exchange, write_data_file):
        name = write_data_file("students.csv", "S001,2023-CS-0001,John Doe,john.doe@email.com\n")
        assert exchange.import_students(name) == []

    def test_missing_file(self, exchange):
        with pytest.raises(IOFailure):
            exchange.import_students("nope.csv")


class TestExport:

    def test_student_row_format(self, exchange):
        student = Student("S001", "2023-CS-0001", "John Doe", "john.doe@email.com")
        student.enroll_course("CS101-A")
        student.enroll_course("MATH201-B")
        student.assign_grade("CS101-A", Grade.A)
        student.assign_grade("MATH201-B", Grade.B)

        fields = exchange.student_to_csv(student).split(",")

        assert fields[:7] == ["S001", "2023-CS-0001", '"John Doe"', "john.doe@email.com",
                              "true", "2", "8.50"]
        assert fields[7] == student.created_at.isoformat()

    def test_course_row_format(self, exchange):
        course = Course("CS101-A", "Intro", 3, Semester.FALL, instructor="Dr. Johnson", department="CS")
        course.deactivate()
        fields = exchange.course_to_csv(course).split(",")
        assert fields[:7] == ["CS101-A", '"Intro"', "3", "Dr. Johnson", "FALL", "CS", "false"]

    def test_export_writes_header_and_rows(self, exchange, config, students):
        path = exchange.export_students(students.find_all(), "students.csv")

        assert path == os.path.join(config.export_folder, "students.csv")
        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
        assert lines[0] == STUDENT_HEADER
        assert len(lines) == 3

    def test_export_courses_header(self, exchange, courses):
        path = exchange.export_courses(courses.find_all(), "courses.csv")
        with open(path, encoding="utf-8") as f:
            assert f.readline().rstrip("\n") == COURSE_HEADER

    def test_export_then_import_students(self, exchange, config, students):
        students.deactivate("S002")
        exported = students.find_all()
        path = exchange.export_students(exported, "roundtrip.csv")

        config.data_folder = config.export_folder
        imported = exchange.import_students(os.path.basename(path))

        assert [(s.id, s.reg_no, s.full_name, s.email, s.active) for s in imported] == [
            (s.id, s.reg_no, s.full_name, s.email, s.active) for s in exported
        ]

    def test_export_then_import_courses(self, exchange, config, courses):
        courses.deactivate("MATH201-B")
        exported = courses.find_all()
        exchange.export_courses(exported, "courses.csv")

        config.data_folder = config.export_folder
        imported = exchange.import_courses("courses.csv")

        assert [(c.code, c.title, c.credits, c.semester, c.active) for c in imported] == [
            (c.code, c.title, c.credits, c.semester, c.active) for c in exported
        ]

    def test_export_to_unwritable_location(self, exchange, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(IOFailure):
            exchange.export_students([], str(blocker / "students.csv"))
