"""
Main entry point for the CCRM platform.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .config import AppConfig
from .core.entities import Course, Instructor, Student
from .core.enums import Grade, Semester
from .core.exceptions import CcrmException, ValidationError
from .persistence import BackupManager, CourseRepository, InstructorRepository, StudentRepository
from .services import EnrollmentService, ImportExportService, ReportService

logger = logging.getLogger(__name__)

STUDENTS_FILE = "students.csv"
COURSES_FILE = "courses.csv"


class CcrmPlatform:
    """Wires the record stores and services around one configuration."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()
        self._rest_api = None

        self.students = StudentRepository()
        self.instructors = InstructorRepository()
        self.courses = CourseRepository()

        self.enrollment_service = EnrollmentService(
            self.students, self.courses, max_credits=self._config.max_credits_per_semester
        )
        self.import_export_service = ImportExportService(self._config)
        self.report_service = ReportService(self.students, self.courses, self.enrollment_service)
        self.backup_manager = BackupManager(self._config)

        logger.info("CCRM platform initialized (max credits %d)", self._config.max_credits_per_semester)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def rest_app(self):
        """FastAPI application, built on first use."""
        if self._rest_api is None:
            from .api.rest_api import CcrmRestAPI
            self._rest_api = CcrmRestAPI(self)
        return self._rest_api.app

    def import_students(self, file_name: str = STUDENTS_FILE) -> Tuple[int, int]:
        """Load students from the data folder; returns (added, rejected)."""
        return self._load(self.import_export_service.import_students(file_name), self.students)

    def import_courses(self, file_name: str = COURSES_FILE) -> Tuple[int, int]:
        """Load courses from the data folder; returns (added, rejected)."""
        return self._load(self.import_export_service.import_courses(file_name), self.courses)

    def _load(self, records: List, repository) -> Tuple[int, int]:
        added = rejected = 0
        for record in records:
            try:
                repository.add(record)
                added += 1
            except ValidationError as e:
                rejected += 1
                logger.warning("Rejected imported record %s: %s", record.id, e.message)
        return added, rejected

    def export_all(self) -> Dict[str, str]:
        """Export students and courses to the export folder."""
        return {
            'students': self.import_export_service.export_students(self.students.find_all(), STUDENTS_FILE),
            'courses': self.import_export_service.export_courses(self.courses.find_all(), COURSES_FILE)
        }

    def backup(self) -> str:
        """Export current records, then copy the export folder into a timestamped backup."""
        self.export_all()
        return self.backup_manager.create_backup(self._config.export_folder)

    def create_sample_data(self) -> None:
        """Create sample data for demonstration."""
        self.students.add(Student("S001", "2023-CS-0001", "John Doe", "john.doe@email.com"))
        self.students.add(Student("S002", "2023-CS-0002", "Jane Smith", "jane.smith@email.com"))
        self.students.add(Student("S003", "2023-MA-0003", "Ravi Kumar", "ravi.kumar@email.com"))

        self.instructors.add(Instructor("I001", "EMP-101", "Dr. Johnson", "johnson@email.com", "Computer Science"))
        self.instructors.add(Instructor("I002", "EMP-102", "Prof. Davis", "davis@email.com", "Mathematics"))
        self.instructors.add(Instructor("I003", "EMP-103", "Dr. Curie", "curie@email.com", "Physics"))

        self.courses.add(Course("CS101-A", "Introduction to Programming", 3, Semester.FALL,
                                instructor="Dr. Johnson", department="Computer Science"))
        self.courses.add(Course("MATH201-B", "Calculus II", 4, Semester.SPRING,
                                instructor="Prof. Davis", department="Mathematics"))
        self.courses.add(Course("PHY110-A", "Physics I", 4, Semester.FALL,
                                instructor="Dr. Curie", department="Physics"))

        for instructor_id, course_code in [("I001", "CS101-A"), ("I002", "MATH201-B"), ("I003", "PHY110-A")]:
            self.instructors.get(instructor_id).assign_course(course_code)

    def run_demo(self) -> None:
        """Run a demonstration of the platform."""
        print("Running CCRM demonstration...")
        self.create_sample_data()

        plan = [
            ("S001", "CS101-A", Grade.A),
            ("S001", "MATH201-B", Grade.B),
            ("S002", "CS101-A", Grade.S),
            ("S002", "PHY110-A", Grade.C),
            ("S003", "MATH201-B", Grade.F),
        ]
        for student_id, course_code, grade in plan:
            try:
                self.enrollment_service.enroll(student_id, course_code)
                self.enrollment_service.assign_grade(student_id, course_code, grade)
            except CcrmException as e:
                print(f"  ! {student_id} -> {course_code}: {e.message}")

        print("\n=== Students ===")
        for student in self.students.find_all():
            print(f"  {student}")

        print("\n=== Instructors ===")
        for instructor in self.instructors.find_all():
            print(f"  {instructor}")

        print("\n=== Reports ===")
        summary = self.report_service.summary()
        print(f"  Average GPA: {summary['average_gpa']:.2f}")
        print(f"  Grade distribution: {summary['grade_distribution']}")
        print(f"  Courses by department: {summary['courses_by_department']}")
        for rank, entry in enumerate(summary['top_students'], 1):
            print(f"  #{rank} {entry['full_name']} ({entry['gpa']:.2f})")

        paths = self.export_all()
        print(f"\nExported students to {paths['students']}")
        print(f"Exported courses to {paths['courses']}")
        print("\n✓ Demo completed")

    def start_rest_server(self, host: str = "127.0.0.1", port: int = 8000) -> None:
        """Serve the REST API until interrupted."""
        import uvicorn

        print(f"✓ REST server starting on {host}:{port} (docs at http://{host}:{port}/docs)")
        uvicorn.run(self.rest_app, host=host, port=port, log_level=self._config.log_level.lower())


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Campus Course & Records Manager")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--import-students", metavar="FILE", help="Import students CSV from the data folder")
    parser.add_argument("--import-courses", metavar="FILE", help="Import courses CSV from the data folder")
    parser.add_argument("--export", action="store_true", help="Export students and courses")
    parser.add_argument("--backup", action="store_true", help="Export and back up records")
    parser.add_argument("--serve", action="store_true", help="Start the REST server")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="REST server host")
    parser.add_argument("--port", type=int, default=8000, help="REST server port")

    args = parser.parse_args(argv)

    try:
        config = AppConfig.from_file(args.config) if args.config else AppConfig()
    except CcrmException as e:
        print(f"Configuration error: {e.message}")
        return 2

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    config.ensure_directories()
    platform = CcrmPlatform(config)

    try:
        if args.import_courses:
            added, rejected = platform.import_courses(args.import_courses)
            print(f"Imported {added} courses ({rejected} rejected)")
        if args.import_students:
            added, rejected = platform.import_students(args.import_students)
            print(f"Imported {added} students ({rejected} rejected)")
        if args.demo:
            platform.run_demo()
        if args.export:
            for kind, path in platform.export_all().items():
                print(f"Exported {kind} to {path}")
        if args.backup:
            print(f"Backup created: {platform.backup()}")
        if args.serve:
            platform.start_rest_server(args.host, args.port)
    except CcrmException as e:
        print(f"Error: {e.message}")
        return 1
    except KeyboardInterrupt:
        print("\nShutting down...")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
