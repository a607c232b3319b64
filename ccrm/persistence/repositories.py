"""
In-memory record stores for students, instructors and courses.
"""

import threading
from abc import abstractmethod
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from ..core.entities import AbstractEntity, Course, Instructor, Student
from ..core.enums import Semester
from ..core.exceptions import NotFoundError, ValidationError
from ..core.interfaces import Repository
from ..core.validators import (
    is_not_empty, is_valid_course_code, is_valid_credits, is_valid_email, is_valid_reg_no,
    MIN_CREDITS, MAX_CREDITS
)

T = TypeVar('T', bound=AbstractEntity)


class InMemoryRepository(Repository[T], Generic[T]):
    """Base record store keyed by entity ID.

    ``add`` is an upsert. Listings are ordered by natural key and are fresh
    lists, so callers never see the store's own dictionary change.
    """

    def __init__(self, entity_type: str):
        self._entity_type = entity_type
        self._entities: Dict[str, T] = {}
        self._lock = threading.RLock()

    def add(self, entity: T) -> T:
        """Validate and store an entity."""
        with self._lock:
            if entity is None:
                raise ValidationError(f"{self._entity_type.capitalize()} cannot be None")
            if not is_not_empty(entity.id):
                raise ValidationError(f"{self._entity_type.capitalize()} ID is required")
            self.validate(entity)
            existing = self._entities.get(entity.id)
            if existing is not None and existing is not entity:
                self._merge_state(existing, entity)
            self._entities[entity.id] = entity
            return entity

    def find_by_id(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._entities.get(entity_id)

    def find_all(self) -> List[T]:
        with self._lock:
            return [self._entities[key] for key in sorted(self._entities)]

    def find_by(self, predicate: Callable[[T], bool]) -> List[T]:
        return [entity for entity in self.find_all() if predicate(entity)]

    def exists(self, entity_id: str) -> bool:
        with self._lock:
            return entity_id in self._entities

    def count(self) -> int:
        with self._lock:
            return len(self._entities)

    def get(self, entity_id: str) -> T:
        """Like ``find_by_id`` but raises ``NotFoundError`` for unknown IDs."""
        entity = self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(
                f"{self._entity_type.capitalize()} not found: {entity_id}",
                error_code=f"{self._entity_type.upper()}_NOT_FOUND",
                details={"id": entity_id}
            )
        return entity

    def deactivate(self, entity_id: str) -> T:
        """Flag an entity inactive; records are never removed."""
        with self._lock:
            entity = self.get(entity_id)
            entity.deactivate()
            return entity

    def find_active(self) -> List[T]:
        return self.find_by(lambda entity: entity.active)

    def _merge_state(self, existing: T, replacement: T) -> None:
        """Carry state owned by other components onto a replacing record."""
        pass

    @abstractmethod
    def validate(self, entity: T) -> None:
        """Raise ``ValidationError`` when required fields are invalid."""
        pass


class StudentRepository(InMemoryRepository[Student]):
    """Record store for Student entities."""

    def __init__(self):
        super().__init__("student")

    def validate(self, student: Student) -> None:
        if not isinstance(student, Student):
            raise ValidationError(f"Expected a Student, got {type(student).__name__}")
        if not is_valid_email(student.email):
            raise ValidationError("Invalid email format", error_code="INVALID_EMAIL",
                                  details={"email": student.email})
        if not is_valid_reg_no(student.reg_no):
            raise ValidationError("Invalid registration number, expected YYYY-DEPT-NNNN",
                                  error_code="INVALID_REG_NO", details={"reg_no": student.reg_no})

    def _merge_state(self, existing: Student, replacement: Student) -> None:
        # enrollments belong to the enrollment service, not to the incoming record
        replacement.copy_records_from(existing)

    def find_by_reg_no(self, reg_no: str) -> Optional[Student]:
        matches = self.find_by(lambda s: s.reg_no == reg_no)
        return matches[0] if matches else None

    def find_by_email(self, email: str) -> Optional[Student]:
        needle = email.lower()
        matches = self.find_by(lambda s: s.email.lower() == needle)
        return matches[0] if matches else None


class InstructorRepository(InMemoryRepository[Instructor]):
    """Record store for Instructor entities."""

    def __init__(self):
        super().__init__("instructor")

    def validate(self, instructor: Instructor) -> None:
        if not isinstance(instructor, Instructor):
            raise ValidationError(f"Expected an Instructor, got {type(instructor).__name__}")
        if not is_valid_email(instructor.email):
            raise ValidationError("Invalid email format", error_code="INVALID_EMAIL",
                                  details={"email": instructor.email})

    def _merge_state(self, existing: Instructor, replacement: Instructor) -> None:
        replacement.copy_assignments_from(existing)

    def find_by_department(self, department: str) -> List[Instructor]:
        return self.find_by(lambda i: i.department == department)


class CourseRepository(InMemoryRepository[Course]):
    """Record store for Course entities, keyed by course code."""

    def __init__(self):
        super().__init__("course")

    def validate(self, course: Course) -> None:
        if not isinstance(course, Course):
            raise ValidationError(f"Expected a Course, got {type(course).__name__}")
        if not is_valid_credits(course.credits):
            raise ValidationError(f"Course credits must be between {MIN_CREDITS} and {MAX_CREDITS}",
                                  error_code="INVALID_CREDITS", details={"credits": course.credits})
        if not is_valid_course_code(course.code):
            raise ValidationError("Invalid course code, expected DEPT###-SECTION",
                                  error_code="INVALID_COURSE_CODE", details={"code": course.code})

    def find_by_instructor(self, instructor: str) -> List[Course]:
        return self.find_by(lambda c: c.instructor == instructor)

    def find_by_department(self, department: str) -> List[Course]:
        return self.find_by(lambda c: c.department == department)

    def find_by_semester(self, semester: Semester) -> List[Course]:
        return self.find_by(lambda c: c.semester is semester)

    def find_by_credits(self, min_credits: int, max_credits: int) -> List[Course]:
        return self.find_by(lambda c: min_credits <= c.credits <= max_credits)

    def search(self, instructor: Optional[str] = None, department: Optional[str] = None,
               semester: Optional[Semester] = None) -> List[Course]:
        """Active courses matching every given criterion."""
        return self.find_by(lambda c: (
            c.active
            and (instructor is None or c.instructor == instructor)
            and (department is None or c.department == department)
            and (semester is None or c.semester is semester)
        ))
