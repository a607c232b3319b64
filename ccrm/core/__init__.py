"""
Core module containing the domain model.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "AbstractEntity",
    "Person",
    "Student",
    "Instructor",
    "Course",
    "Enrollment",

    # Interfaces
    "Repository",

    # Enums
    "PersonType",
    "Semester",
    "Grade",
    "EnrollmentStatus",

    # Exceptions
    "CcrmException",
    "ValidationError",
    "NotFoundError",
    "EnrollmentError",
    "DuplicateEnrollmentError",
    "CreditLimitExceededError",
    "IOFailure",
    "ParseError",
    "ConfigurationError",
]
