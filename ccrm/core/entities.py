"""
Core entities for the CCRM platform.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Set

from .enums import EnrollmentStatus, Grade, PersonType, Semester
from .exceptions import ValidationError
from .validators import is_not_empty, is_valid_credits, MIN_CREDITS, MAX_CREDITS


class AbstractEntity(ABC):
    """Base entity with an immutable identifier, lifecycle flag and versioning."""

    def __init__(self, entity_id: str):
        self._id = entity_id
        self._created_at = datetime.now()
        self._updated_at = self._created_at
        self._version = 1
        self._active = True

    @property
    def id(self) -> str:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp (local time)."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def version(self) -> int:
        return self._version

    @property
    def active(self) -> bool:
        return self._active

    def touch(self) -> None:
        """Record a modification."""
        self._updated_at = datetime.now()
        self._version += 1

    def activate(self) -> None:
        self._active = True
        self.touch()

    def deactivate(self) -> None:
        self._active = False
        self.touch()

    def set_active(self, active: bool) -> None:
        self._active = bool(active)
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
            'updated_at': self._updated_at.isoformat(),
            'version': self._version,
            'active': self._active
        }

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, active={self._active})"


class Person(AbstractEntity):
    """Abstract base class for all persons in the system."""

    def __init__(self, person_id: str, full_name: str, email: str):
        super().__init__(person_id)
        self._full_name = full_name
        self._email = email

    @property
    @abstractmethod
    def role(self) -> PersonType:
        """The person's role in the system."""

    @property
    def full_name(self) -> str:
        return self._full_name

    @full_name.setter
    def full_name(self, value: str) -> None:
        self._full_name = value
        self.touch()

    @property
    def display_name(self) -> str:
        return self._full_name

    @property
    def email(self) -> str:
        return self._email

    @email.setter
    def email(self, value: str) -> None:
        self._email = value
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'full_name': self._full_name,
            'email': self._email,
            'role': self.role.value
        })
        return base_dict

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id='{self._id}', name='{self._full_name}', role='{self.role.value}')"


class Student(Person):
    """Student entity holding enrolled courses and recorded grades.

    The enrolled-course set and grade mapping are only changed through the
    enrollment service; accessors hand out immutable snapshots.
    """

    def __init__(self, student_id: str, reg_no: str, full_name: str, email: str):
        super().__init__(student_id, full_name, email)
        self._reg_no = reg_no
        self._enrolled_courses: Set[str] = set()
        self._grades: Dict[str, Grade] = {}

    @property
    def role(self) -> PersonType:
        return PersonType.STUDENT

    @property
    def reg_no(self) -> str:
        return self._reg_no

    @property
    def enrolled_courses(self) -> FrozenSet[str]:
        return frozenset(self._enrolled_courses)

    @property
    def grades(self) -> Mapping[str, Grade]:
        return MappingProxyType(dict(self._grades))

    def is_enrolled_in(self, course_code: str) -> bool:
        return course_code in self._enrolled_courses

    def enroll_course(self, course_code: str) -> None:
        self._enrolled_courses.add(course_code)
        self.touch()

    def unenroll_course(self, course_code: str) -> None:
        """Drop a course together with any grade recorded for it."""
        self._enrolled_courses.discard(course_code)
        self._grades.pop(course_code, None)
        self.touch()

    def assign_grade(self, course_code: str, grade: Grade) -> bool:
        """Record a grade; ignored unless the course is currently enrolled."""
        if course_code not in self._enrolled_courses:
            return False
        self._grades[course_code] = grade
        self.touch()
        return True

    def copy_records_from(self, other: "Student") -> None:
        """Take over the enrolled courses and grades of a record being replaced."""
        self._enrolled_courses = set(other._enrolled_courses)
        self._grades = dict(other._grades)
        self.touch()

    def calculate_gpa(self) -> float:
        """Unweighted mean of grade points, 0.0 with no grades."""
        if not self._grades:
            return 0.0
        return sum(grade.points for grade in self._grades.values()) / len(self._grades)

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'reg_no': self._reg_no,
            'enrolled_courses': sorted(self._enrolled_courses),
            'grades': {code: grade.name for code, grade in sorted(self._grades.items())},
            'gpa': round(self.calculate_gpa(), 2)
        })
        return base_dict

    def __str__(self) -> str:
        return (f"Student(regNo='{self._reg_no}', name='{self._full_name}', "
                f"courses={len(self._enrolled_courses)}, GPA={self.calculate_gpa():.2f})")


class Instructor(Person):
    """Instructor entity with teaching assignments."""

    def __init__(self, instructor_id: str, employee_id: str, full_name: str,
                 email: str, department: str):
        super().__init__(instructor_id, full_name, email)
        self._employee_id = employee_id
        self._department = department
        self._assigned_courses: Set[str] = set()

    @property
    def role(self) -> PersonType:
        return PersonType.INSTRUCTOR

    @property
    def employee_id(self) -> str:
        return self._employee_id

    @property
    def department(self) -> str:
        return self._department

    @department.setter
    def department(self, value: str) -> None:
        self._department = value
        self.touch()

    @property
    def assigned_courses(self) -> FrozenSet[str]:
        return frozenset(self._assigned_courses)

    def assign_course(self, course_code: str) -> None:
        self._assigned_courses.add(course_code)
        self.touch()

    def unassign_course(self, course_code: str) -> None:
        self._assigned_courses.discard(course_code)
        self.touch()

    def copy_assignments_from(self, other: "Instructor") -> None:
        self._assigned_courses = set(other._assigned_courses)
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'employee_id': self._employee_id,
            'department': self._department,
            'assigned_courses': sorted(self._assigned_courses)
        })
        return base_dict

    def __str__(self) -> str:
        return (f"Instructor(empId='{self._employee_id}', name='{self._full_name}', "
                f"dept='{self._department}', courses={len(self._assigned_courses)})")


class Course(AbstractEntity):
    """Course offering identified by its code, e.g. ``CS101-A``.

    All fields except the active flag are fixed at construction, which
    rejects a missing code, title or semester and credits outside 1-6.
    """

    def __init__(self, code: str, title: str, credits: int, semester: Semester,
                 instructor: str = "", department: str = ""):
        if not is_not_empty(code):
            raise ValidationError("Course code is required", error_code="COURSE_CODE_REQUIRED")
        if not is_not_empty(title):
            raise ValidationError("Course title is required", error_code="COURSE_TITLE_REQUIRED")
        if not isinstance(semester, Semester):
            raise ValidationError("Course semester is required", error_code="COURSE_SEMESTER_REQUIRED")
        if not is_valid_credits(credits):
            raise ValidationError(
                f"Course credits must be between {MIN_CREDITS} and {MAX_CREDITS}",
                error_code="INVALID_CREDITS",
                details={"credits": credits}
            )
        super().__init__(code)
        self._title = title
        self._credits = credits
        self._semester = semester
        self._instructor = instructor or ""
        self._department = department or ""

    @property
    def code(self) -> str:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def credits(self) -> int:
        return self._credits

    @property
    def semester(self) -> Semester:
        return self._semester

    @property
    def instructor(self) -> str:
        return self._instructor

    @property
    def department(self) -> str:
        return self._department

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'code': self.code,
            'title': self._title,
            'credits': self._credits,
            'semester': self._semester.name,
            'instructor': self._instructor,
            'department': self._department
        })
        return base_dict

    def __str__(self) -> str:
        return (f"Course(code='{self.code}', title='{self._title}', credits={self._credits}, "
                f"instructor='{self._instructor}', semester={self._semester})")


class Enrollment:
    """Link between one student and one course."""

    def __init__(self, student_id: str, course_code: str):
        if not is_not_empty(student_id) or not is_not_empty(course_code):
            raise ValidationError("Enrollment requires a student ID and a course code")
        self._student_id = student_id
        self._course_code = course_code
        self._enrolled_at = datetime.now()
        self._grade: Optional[Grade] = None
        self._active = True

    @property
    def key(self):
        return (self._student_id, self._course_code)

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def course_code(self) -> str:
        return self._course_code

    @property
    def enrolled_at(self) -> datetime:
        return self._enrolled_at

    @property
    def grade(self) -> Optional[Grade]:
        return self._grade

    @property
    def active(self) -> bool:
        return self._active

    @property
    def status(self) -> EnrollmentStatus:
        if not self._active:
            return EnrollmentStatus.DROPPED
        if self._grade is not None:
            return EnrollmentStatus.COMPLETED
        return EnrollmentStatus.ENROLLED

    def assign_grade(self, grade: Grade) -> None:
        self._grade = grade

    def deactivate(self) -> None:
        self._active = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'student_id': self._student_id,
            'course_code': self._course_code,
            'enrolled_at': self._enrolled_at.isoformat(),
            'grade': self._grade.name if self._grade else None,
            'status': self.status.value
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Enrollment):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return (f"Enrollment(student='{self._student_id}', course='{self._course_code}', "
                f"grade={self._grade.name if self._grade else None}, status='{self.status.value}')")
