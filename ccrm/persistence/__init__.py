"""
Persistence module: in-memory record stores and file backups.
"""

from .repositories import (
    InMemoryRepository, StudentRepository, InstructorRepository, CourseRepository
)
from .backup_manager import BackupManager, format_file_size

__all__ = [
    "InMemoryRepository",
    "StudentRepository",
    "InstructorRepository",
    "CourseRepository",
    "BackupManager",
    "format_file_size",
]
