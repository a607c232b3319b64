"""
Enumerations and constants for the CCRM platform.
"""

from enum import Enum


class PersonType(Enum):
    """Roles a person can hold in the system."""
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"


class Semester(Enum):
    """Academic terms, each with a display name and ordering rank."""
    SPRING = ("Spring", 1)
    SUMMER = ("Summer", 2)
    FALL = ("Fall", 3)
    WINTER = ("Winter", 4)

    def __init__(self, display_name: str, order: int):
        self.display_name = display_name
        self.order = order

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def from_string(cls, text: str) -> "Semester":
        """Match an enum name or display name, ignoring case."""
        needle = (text or "").strip().lower()
        for semester in cls:
            if semester.name.lower() == needle or semester.display_name.lower() == needle:
                return semester
        raise ValueError(f"No semester found for: {text}")


class Grade(Enum):
    """Fixed grade scale, best first."""
    S = (10.0, "Outstanding")
    A = (9.0, "Excellent")
    B = (8.0, "Very Good")
    C = (7.0, "Good")
    D = (6.0, "Average")
    E = (5.0, "Below Average")
    F = (0.0, "Fail")

    def __init__(self, points: float, description: str):
        self.points = points
        self.description = description

    @property
    def is_passing(self) -> bool:
        return self is not Grade.F

    def __str__(self) -> str:
        return f"{self.name} ({self.points:.1f}) - {self.description}"

    @classmethod
    def from_points(cls, points: float) -> "Grade":
        """Find the grade whose points lie within 0.1 of ``points``."""
        for grade in cls:
            if abs(grade.points - points) < 0.1:
                return grade
        raise ValueError(f"No grade found for points: {points}")

    @classmethod
    def from_letter(cls, letter: str) -> "Grade":
        try:
            return cls[(letter or "").strip().upper()]
        except KeyError:
            raise ValueError(f"No grade found for letter: {letter}") from None


class EnrollmentStatus(Enum):
    """Derived status of an enrollment."""
    ENROLLED = "ENROLLED"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"
