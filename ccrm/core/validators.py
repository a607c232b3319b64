"""
Field validators shared by entities, repositories and the API layer.
"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")

# YYYY-DEPT-NNNN, e.g. 2023-CS-0001
REG_NO_PATTERN = re.compile(r"^(\d{4})-([A-Za-z]{2,4})-(\d{4})$")

# DEPT###-SECTION, e.g. CS101-A
COURSE_CODE_PATTERN = re.compile(r"^([A-Za-z]{2,4})(\d{3})-([A-Za-z0-9])$")

MIN_CREDITS = 1
MAX_CREDITS = 6


def is_valid_email(email: Optional[str]) -> bool:
    return email is not None and EMAIL_PATTERN.match(email) is not None


def is_valid_reg_no(reg_no: Optional[str]) -> bool:
    """Check a student registration number such as ``2023-CS-0001``."""
    if reg_no is None:
        return False
    match = REG_NO_PATTERN.match(reg_no)
    if not match:
        return False
    year, _dept, number = match.groups()
    return 2000 <= int(year) <= 2099 and int(number) >= 1


def is_valid_course_code(course_code: Optional[str]) -> bool:
    """Check a course code such as ``CS101-A`` (course number 100-999)."""
    if course_code is None:
        return False
    match = COURSE_CODE_PATTERN.match(course_code)
    if not match:
        return False
    return 100 <= int(match.group(2)) <= 999


def is_valid_credits(credits: int) -> bool:
    return isinstance(credits, int) and not isinstance(credits, bool) and MIN_CREDITS <= credits <= MAX_CREDITS


def is_not_empty(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""
