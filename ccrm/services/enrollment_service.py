"""
Enrollment service: the only component that changes enrollment and grade state.
"""

import logging
import threading
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from ..config import DEFAULT_MAX_CREDITS
from ..core.entities import Course, Enrollment, Student
from ..core.enums import EnrollmentStatus, Grade
from ..core.exceptions import (
    CreditLimitExceededError, DuplicateEnrollmentError, NotFoundError, ValidationError
)
from ..persistence.repositories import CourseRepository, StudentRepository

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Enforces enrollment, credit-load and grading rules over the record stores.

    Every compound operation runs under a single re-entrant lock, so a caller
    never observes an enrollment without the matching change on the student.
    """

    def __init__(self, students: StudentRepository, courses: CourseRepository,
                 max_credits: int = DEFAULT_MAX_CREDITS):
        self._students = students
        self._courses = courses
        self._max_credits = max_credits
        self._enrollments: Dict[Tuple[str, str], Enrollment] = {}  # (student_id, course_code) -> enrollment
        self._lock = threading.RLock()

    @property
    def max_credits(self) -> int:
        return self._max_credits

    def enroll(self, student_id: str, course_code: str) -> Enrollment:
        """Enroll a student in a course.

        The credit check looks at the load the student already carries, not
        the load after adding this course: a student at 22 of 24 credits may
        still take a 6-credit course, a student at 24 may take nothing.
        """
        with self._lock:
            student = self._get_student(student_id)
            self._get_course(course_code)

            current_credits = self._credits_for(student)
            if current_credits >= self._max_credits:
                logger.warning("Enrollment refused for %s in %s: %d credits (max %d)",
                               student_id, course_code, current_credits, self._max_credits)
                raise CreditLimitExceededError(student_id, current_credits, self._max_credits)

            existing = self._enrollments.get((student_id, course_code))
            if existing is not None and existing.active:
                raise DuplicateEnrollmentError(student_id, course_code)

            enrollment = Enrollment(student_id, course_code)
            self._enrollments[enrollment.key] = enrollment
            student.enroll_course(course_code)

            logger.info("Enrolled student %s in %s", student_id, course_code)
            return enrollment

    def unenroll(self, student_id: str, course_code: str) -> None:
        """Drop a course and discard its grade; no-op without an active enrollment."""
        with self._lock:
            enrollment = self._enrollments.get((student_id, course_code))
            if enrollment is None or not enrollment.active:
                logger.debug("No active enrollment for %s in %s; nothing to drop", student_id, course_code)
                return

            enrollment.deactivate()
            student = self._students.find_by_id(student_id)
            if student is not None:
                student.unenroll_course(course_code)

            logger.info("Unenrolled student %s from %s", student_id, course_code)

    def assign_grade(self, student_id: str, course_code: str, grade: Grade) -> None:
        """Record a grade; silently ignored without an active enrollment."""
        if not isinstance(grade, Grade):
            raise ValidationError(f"Invalid grade: {grade!r}")

        with self._lock:
            enrollment = self._enrollments.get((student_id, course_code))
            if enrollment is None or not enrollment.active:
                logger.debug("No active enrollment for %s in %s; grade ignored", student_id, course_code)
                return

            enrollment.assign_grade(grade)
            student = self._students.find_by_id(student_id)
            if student is not None:
                student.assign_grade(course_code, grade)

            logger.info("Assigned grade %s to %s for %s", grade.name, student_id, course_code)

    def calculate_gpa(self, student: Student) -> float:
        """Unweighted mean of the student's recorded grade points (0.0 if none)."""
        with self._lock:
            return student.calculate_gpa()

    def current_credits(self, student_id: str) -> int:
        """Credit load of the student's currently enrolled courses."""
        with self._lock:
            return self._credits_for(self._get_student(student_id))

    def get_enrollment(self, student_id: str, course_code: str) -> Optional[Enrollment]:
        with self._lock:
            return self._enrollments.get((student_id, course_code))

    def get_enrollments(self, student_id: str, include_inactive: bool = False) -> List[Enrollment]:
        """A student's enrollments ordered by course code."""
        with self._lock:
            return [
                enrollment for key, enrollment in sorted(self._enrollments.items())
                if key[0] == student_id and (include_inactive or enrollment.active)
            ]

    def course_roster(self, course_code: str) -> List[str]:
        """IDs of students actively enrolled in a course."""
        with self._lock:
            return [
                student_id for (student_id, code), enrollment in sorted(self._enrollments.items())
                if code == course_code and enrollment.active
            ]

    def grade_distribution(self) -> Dict[str, int]:
        """Count of enrollment records per letter grade, in scale order.

        Every record holding a grade is counted, including dropped ones.
        """
        with self._lock:
            counts = Counter(e.grade for e in self._enrollments.values() if e.grade is not None)
            return {grade.name: counts[grade] for grade in Grade if counts[grade]}

    def top_students(self, limit: int) -> List[Student]:
        """Active students by GPA, highest first; ties keep listing order."""
        with self._lock:
            ranked = sorted(self._students.find_active(), key=lambda s: s.calculate_gpa(), reverse=True)
            return ranked[:max(limit, 0)]

    def average_gpa(self) -> float:
        """Mean GPA across active students (0.0 when there are none)."""
        with self._lock:
            active = self._students.find_active()
            if not active:
                return 0.0
            return sum(s.calculate_gpa() for s in active) / len(active)

    def get_statistics(self) -> Dict[str, Any]:
        """Get enrollment statistics."""
        with self._lock:
            statuses = Counter(e.status for e in self._enrollments.values())
            return {
                'total_enrollments': len(self._enrollments),
                'active_enrollments': statuses[EnrollmentStatus.ENROLLED] + statuses[EnrollmentStatus.COMPLETED],
                'completed_enrollments': statuses[EnrollmentStatus.COMPLETED],
                'dropped_enrollments': statuses[EnrollmentStatus.DROPPED],
                'max_credits': self._max_credits
            }

    def _credits_for(self, student: Student) -> int:
        total = 0
        for course_code in student.enrolled_courses:
            course = self._courses.find_by_id(course_code)
            if course is not None:
                total += course.credits
        return total

    def _get_student(self, student_id: str) -> Student:
        student = self._students.find_by_id(student_id)
        if student is None:
            raise NotFoundError(f"Student not found: {student_id}", error_code="STUDENT_NOT_FOUND",
                                details={"student_id": student_id})
        return student

    def _get_course(self, course_code: str) -> Course:
        course = self._courses.find_by_id(course_code)
        if course is None:
            raise NotFoundError(f"Course not found: {course_code}", error_code="COURSE_NOT_FOUND",
                                details={"course_code": course_code})
        return course
