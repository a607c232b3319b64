"""Tests for the platform wiring and command line."""

import json
import os

from ccrm.core.enums import Grade
from ccrm.main import CcrmPlatform, main


def _write_config(tmp_path, **overrides):
    settings = {
        "data_folder": str(tmp_path / "data"),
        "export_folder": str(tmp_path / "exports"),
        "backup_folder": str(tmp_path / "backups"),
    }
    settings.update(overrides)
    path = tmp_path / "ccrm.json"
    path.write_text(json.dumps(settings))
    return str(path)


def test_platform_uses_configured_credit_limit(config):
    config.max_credits_per_semester = 12
    assert CcrmPlatform(config).enrollment_service.max_credits == 12


def test_import_counts_rejected_records(platform, write_data_file):
    write_data_file("students.csv", "\n".join([
        "ID,RegNo,FullName,Email",
        "S001,2023-CS-0001,John Doe,john.doe@email.com",
        "S002,2023-CS-0002,Jane Smith,not-an-email",
    ]))
    assert platform.import_students() == (1, 1)
    assert platform.students.exists("S001")


def test_demo_exports(tmp_path, capsys):
    assert main(["--config", _write_config(tmp_path), "--demo"]) == 0
    assert os.path.isfile(tmp_path / "exports" / "students.csv")
    assert "Demo completed" in capsys.readouterr().out


def test_import_then_backup(tmp_path, capsys):
    config_path = _write_config(tmp_path)
    os.makedirs(tmp_path / "data")
    (tmp_path / "data" / "courses.csv").write_text(
        "Code,Title,Credits,Instructor,Semester,Department\n"
        "CS101-A,Intro,3,Dr. Johnson,FALL,Computer Science\n"
    )

    assert main(["--config", config_path, "--import-courses", "courses.csv", "--backup"]) == 0

    out = capsys.readouterr().out
    assert "Imported 1 courses (0 rejected)" in out
    backups = os.listdir(tmp_path / "backups")
    assert len(backups) == 1
    assert os.path.isfile(tmp_path / "backups" / backups[0] / "courses.csv")


def test_missing_import_file_fails(tmp_path, capsys):
    assert main(["--config", _write_config(tmp_path), "--import-students", "absent.csv"]) == 1
    assert "File not found" in capsys.readouterr().out


def test_bad_config(tmp_path, capsys):
    assert main(["--config", _write_config(tmp_path, max_credits_per_semester=0)]) == 2
    assert main(["--config", str(tmp_path / "missing.json")]) == 2


def test_reimporting_students_keeps_enrollments(platform, write_data_file):
    platform.create_sample_data()
    platform.enrollment_service.enroll("S001", "CS101-A")
    platform.enrollment_service.assign_grade("S001", "CS101-A", Grade.B)

    write_data_file("students.csv", "ID,RegNo,FullName,Email\n"
                                    "S001,2023-CS-0001,Johnny Doe,john.doe@email.com\n")
    assert platform.import_students() == (1, 0)

    student = platform.students.find_by_id("S001")
    assert student.full_name == "Johnny Doe"
    assert student.enrolled_courses == frozenset({"CS101-A"})
    assert platform.enrollment_service.calculate_gpa(student) == 8.0
    assert platform.enrollment_service.current_credits("S001") == 3


def test_sample_data_assigns_instructors(platform):
    platform.create_sample_data()
    assert platform.instructors.get("I002").assigned_courses == frozenset({"MATH201-B"})
