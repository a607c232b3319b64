"""
Custom exceptions for the CCRM platform.
"""

from typing import Optional, Any, Dict


class CcrmException(Exception):
    """Base exception for all CCRM-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(CcrmException):
    """Raised when entity fields fail validation."""
    pass


class NotFoundError(CcrmException):
    """Raised when an operation references an unknown student or course."""
    pass


class EnrollmentError(CcrmException):
    """Raised when enrollment operations fail."""
    pass


class DuplicateEnrollmentError(EnrollmentError):
    """Raised when a student already holds an active enrollment in the course."""

    def __init__(self, student_id: str, course_code: str):
        super().__init__(
            f"Student {student_id} is already enrolled in course {course_code}",
            error_code="DUPLICATE_ENROLLMENT",
            details={"student_id": student_id, "course_code": course_code}
        )
        self.student_id = student_id
        self.course_code = course_code


class CreditLimitExceededError(EnrollmentError):
    """Raised when a student's credit load has reached the configured maximum."""

    def __init__(self, student_id: str, current_credits: int, max_credits: int,
                 message: Optional[str] = None):
        super().__init__(
            message or (f"Student {student_id} has {current_credits} credits, "
                        f"exceeding maximum limit of {max_credits}"),
            error_code="CREDIT_LIMIT_EXCEEDED",
            details={
                "student_id": student_id,
                "current_credits": current_credits,
                "max_credits": max_credits
            }
        )
        self.student_id = student_id
        self.current_credits = current_credits
        self.max_credits = max_credits


class IOFailure(CcrmException):
    """Raised when a data file is missing, unreadable or cannot be written."""
    pass


class ParseError(CcrmException):
    """Raised when a single CSV row cannot be parsed."""
    pass


class ConfigurationError(CcrmException):
    """Raised when configuration is invalid."""
    pass
