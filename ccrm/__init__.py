"""
CCRM: Campus Course & Records Manager

Manages students, instructors, courses, enrollments and grades in memory,
with credit-load enforcement, GPA reporting, CSV import/export and
timestamped backups.
"""

__version__ = "1.0.0"
__author__ = "CCRM Development Team"
__description__ = "Campus Course & Records Manager"
