"""Shared fixtures for the CCRM test suite."""

import os

import pytest

from ccrm.config import AppConfig
from ccrm.core.entities import Course, Student
from ccrm.core.enums import Semester
from ccrm.main import CcrmPlatform
from ccrm.persistence import CourseRepository, StudentRepository
from ccrm.services import EnrollmentService, ImportExportService


@pytest.fixture
def config(tmp_path):
    return AppConfig(
        data_folder=str(tmp_path / "data"),
        export_folder=str(tmp_path / "exports"),
        backup_folder=str(tmp_path / "backups"),
    )


@pytest.fixture
def students():
    repo = StudentRepository()
    repo.add(Student("S001", "2023-CS-0001", "John Doe", "john.doe@email.com"))
    repo.add(Student("S002", "2023-CS-0002", "Jane Smith", "jane.smith@email.com"))
    return repo


@pytest.fixture
def courses():
    repo = CourseRepository()
    repo.add(Course("CS101-A", "Introduction to Programming", 3, Semester.FALL,
                    instructor="Dr. Johnson", department="Computer Science"))
    repo.add(Course("MATH201-B", "Calculus II", 4, Semester.SPRING,
                    instructor="Prof. Davis", department="Mathematics"))
    return repo


@pytest.fixture
def service(students, courses):
    return EnrollmentService(students, courses, max_credits=24)


@pytest.fixture
def exchange(config):
    return ImportExportService(config)


@pytest.fixture
def platform(config):
    config.ensure_directories()
    return CcrmPlatform(config)


@pytest.fixture
def write_data_file(config):
    """Write a file into the configured data folder and return its name."""
    def _write(name, text):
        os.makedirs(config.data_folder, exist_ok=True)
        with open(os.path.join(config.data_folder, name), "w", encoding="utf-8") as f:
            f.write(text)
        return name
    return _write
