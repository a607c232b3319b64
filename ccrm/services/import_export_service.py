"""
CSV import/export of students and courses.

The format is line oriented and split on plain commas. Free-text fields
(full name, course title) are wrapped in double quotes on export but not
escaped, so a name containing a comma or quote does not survive a round trip.
"""

import logging
import os
from datetime import datetime
from typing import Callable, Iterable, List, TypeVar

from ..config import AppConfig
from ..core.entities import Course, Student
from ..core.enums import Semester
from ..core.exceptions import CcrmException, IOFailure, ParseError

logger = logging.getLogger(__name__)

T = TypeVar('T')

STUDENT_HEADER = "ID,RegNo,FullName,Email,Active,EnrolledCourses,GPA,CreatedAt"
COURSE_HEADER = "Code,Title,Credits,Instructor,Semester,Department,Active,CreatedAt"

STUDENT_MIN_FIELDS = 4
COURSE_MIN_FIELDS = 6

_TRUE_VALUES = {"true", "yes", "1"}
_FALSE_VALUES = {"false", "no", "0"}


def parse_bool(value: str) -> bool:
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ParseError(f"Not a boolean: {value!r}")


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1].strip()
    return value


def _format_timestamp(value: datetime) -> str:
    return value.isoformat()


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


class ImportExportService:
    """Reads and writes record CSV files in the configured folders."""

    def __init__(self, config: AppConfig):
        self._config = config

    # Parsing

    def parse_student(self, line: str) -> Student:
        """Parse one student row; raises ``ParseError``."""
        parts = line.split(",")
        if len(parts) < STUDENT_MIN_FIELDS:
            raise ParseError(f"Expected at least {STUDENT_MIN_FIELDS} fields, got {len(parts)}")

        student_id = parts[0].strip()
        if not student_id:
            raise ParseError("Student ID is empty")
        student = Student(student_id, parts[1].strip(), _unquote(parts[2]), parts[3].strip())
        if len(parts) > STUDENT_MIN_FIELDS:
            student.set_active(parse_bool(parts[4]))
        return student

    def parse_course(self, line: str) -> Course:
        """Parse one course row; raises ``ParseError``."""
        parts = line.split(",")
        if len(parts) < COURSE_MIN_FIELDS:
            raise ParseError(f"Expected at least {COURSE_MIN_FIELDS} fields, got {len(parts)}")

        try:
            credits = int(parts[2].strip())
        except ValueError:
            raise ParseError(f"Credits is not an integer: {parts[2].strip()!r}") from None
        try:
            semester = Semester.from_string(parts[4])
        except ValueError as e:
            raise ParseError(str(e)) from None

        try:
            course = Course(
                code=parts[0].strip(),
                title=_unquote(parts[1]),
                credits=credits,
                semester=semester,
                instructor=parts[3].strip(),
                department=parts[5].strip()
            )
        except CcrmException as e:
            raise ParseError(e.message) from e
        if len(parts) > COURSE_MIN_FIELDS:
            course.set_active(parse_bool(parts[6]))
        return course

    def parse_students(self, lines: Iterable[str]) -> List[Student]:
        """Parse student rows, skipping the header, blank and malformed lines."""
        return self._parse_rows(lines, self.parse_student, "student")

    def parse_courses(self, lines: Iterable[str]) -> List[Course]:
        """Parse course rows, skipping the header, blank and malformed lines."""
        return self._parse_rows(lines, self.parse_course, "course")

    def _parse_rows(self, lines: Iterable[str], parse: Callable[[str], T], kind: str) -> List[T]:
        records: List[T] = []
        for line_num, line in enumerate(lines, 1):
            if line_num == 1:
                continue
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            try:
                records.append(parse(line))
            except ParseError as e:
                logger.warning("Skipping malformed %s row at line %d: %r - %s", kind, line_num, line, e.message)
        return records

    # File import

    def import_students(self, file_name: str) -> List[Student]:
        students = self.parse_students(self._read_lines(file_name))
        logger.info("Imported %d students from %s", len(students), file_name)
        return students

    def import_courses(self, file_name: str) -> List[Course]:
        courses = self.parse_courses(self._read_lines(file_name))
        logger.info("Imported %d courses from %s", len(courses), file_name)
        return courses

    def _read_lines(self, file_name: str) -> List[str]:
        path = self._resolve(self._config.data_folder, file_name)
        if not os.path.isfile(path):
            raise IOFailure(f"File not found: {path}", details={"path": path})
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise IOFailure(f"Failed to read {path}: {str(e)}", details={"path": path})

    # Export

    def student_to_csv(self, student: Student) -> str:
        return ",".join([
            student.id,
            student.reg_no,
            f'"{student.full_name}"',
            student.email,
            _format_bool(student.active),
            str(len(student.enrolled_courses)),
            f"{student.calculate_gpa():.2f}",
            _format_timestamp(student.created_at)
        ])

    def course_to_csv(self, course: Course) -> str:
        return ",".join([
            course.code,
            f'"{course.title}"',
            str(course.credits),
            course.instructor,
            course.semester.name,
            course.department,
            _format_bool(course.active),
            _format_timestamp(course.created_at)
        ])

    def students_to_lines(self, students: Iterable[Student]) -> List[str]:
        return [STUDENT_HEADER] + [self.student_to_csv(s) for s in students]

    def courses_to_lines(self, courses: Iterable[Course]) -> List[str]:
        return [COURSE_HEADER] + [self.course_to_csv(c) for c in courses]

    def export_students(self, students: List[Student], file_name: str) -> str:
        """Write students to the export folder and return the file path."""
        path = self._write_lines(file_name, self.students_to_lines(students))
        logger.info("Exported %d students to %s", len(students), path)
        return path

    def export_courses(self, courses: List[Course], file_name: str) -> str:
        """Write courses to the export folder and return the file path."""
        path = self._write_lines(file_name, self.courses_to_lines(courses))
        logger.info("Exported %d courses to %s", len(courses), path)
        return path

    def _write_lines(self, file_name: str, lines: List[str]) -> str:
        path = self._resolve(self._config.export_folder, file_name)
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
        except OSError as e:
            raise IOFailure(f"Failed to write {path}: {str(e)}", details={"path": path})
        return path

    @staticmethod
    def _resolve(folder: str, file_name: str) -> str:
        if os.path.isabs(file_name):
            return file_name
        return os.path.join(folder, file_name)
