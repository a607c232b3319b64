"""
Reporting over courses, students and grades.
"""

from collections import Counter
from typing import Any, Dict, List

from ..persistence.repositories import CourseRepository, StudentRepository
from .enrollment_service import EnrollmentService


class ReportService:
    """Read-only aggregates for the reports screen and API."""

    def __init__(self, students: StudentRepository, courses: CourseRepository,
                 enrollment_service: EnrollmentService):
        self._students = students
        self._courses = courses
        self._enrollment_service = enrollment_service

    def courses_by_department(self) -> Dict[str, int]:
        """Active courses per department."""
        counts = Counter(course.department for course in self._courses.find_active())
        return dict(sorted(counts.items()))

    def courses_by_semester(self) -> Dict[str, List[str]]:
        """Active course codes per semester, in semester order."""
        grouped: Dict[str, List[str]] = {}
        for course in sorted(self._courses.find_active(), key=lambda c: (c.semester.order, c.code)):
            grouped.setdefault(course.semester.name, []).append(course.code)
        return grouped

    def average_credits(self) -> float:
        active = self._courses.find_active()
        if not active:
            return 0.0
        return sum(course.credits for course in active) / len(active)

    def summary(self, top: int = 5) -> Dict[str, Any]:
        return {
            'students': self._students.count(),
            'active_students': len(self._students.find_active()),
            'courses': self._courses.count(),
            'active_courses': len(self._courses.find_active()),
            'average_gpa': round(self._enrollment_service.average_gpa(), 2),
            'average_credits': round(self.average_credits(), 2),
            'grade_distribution': self._enrollment_service.grade_distribution(),
            'courses_by_department': self.courses_by_department(),
            'top_students': [
                {'id': s.id, 'full_name': s.full_name, 'gpa': round(s.calculate_gpa(), 2)}
                for s in self._enrollment_service.top_students(top)
            ],
            'enrollment': self._enrollment_service.get_statistics()
        }
