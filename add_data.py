"""
Script to add sample records to CCRM via the REST API.
Make sure the server is running before executing this script.

Usage:
    python -m ccrm.main --serve
    python add_data.py
"""

import json
import os
import sys

import requests


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"
_WARN_CHAR = "⚠" if _console_supports_utf8() else "[WARN]"

BASE_URL = os.environ.get("CCRM_BASE_URL", "http://127.0.0.1:8000")
TIMEOUT = 5


def _detail(response) -> str:
    """Pull the error message out of an API error body."""
    try:
        detail = response.json().get("detail")
    except ValueError:
        return response.text
    if isinstance(detail, dict):
        return detail.get("message", str(detail))
    return str(detail)


def check_server(session: requests.Session) -> bool:
    """Check if the server is running."""
    try:
        response = session.get(f"{BASE_URL}/health", timeout=2)
        if response.status_code == 200:
            print(f"{_OK_CHAR} Server is running at {BASE_URL}")
            return True
    except requests.exceptions.RequestException:
        pass
    print(f"{_FAIL_CHAR} Server is not running!")
    print("\nPlease start the server first:")
    print("  python -m ccrm.main --serve --port 8000")
    return False


def create_student(session, student_id, reg_no, full_name, email):
    """Create a new student."""
    data = {"id": student_id, "reg_no": reg_no, "full_name": full_name, "email": email}
    response = session.post(f"{BASE_URL}/students", json=data, timeout=TIMEOUT)
    if response.status_code == 201:
        print(f"{_OK_CHAR} Created student: {full_name} ({student_id})")
        return response.json()
    print(f"{_FAIL_CHAR} Failed to create student {student_id}: {_detail(response)}")
    return None


def create_course(session, code, title, credits, instructor, semester, department):
    """Create a new course."""
    data = {
        "code": code,
        "title": title,
        "credits": credits,
        "instructor": instructor,
        "semester": semester,
        "department": department
    }
    response = session.post(f"{BASE_URL}/courses", json=data, timeout=TIMEOUT)
    if response.status_code == 201:
        print(f"{_OK_CHAR} Created course: {code} - {title}")
        return response.json()
    print(f"{_FAIL_CHAR} Failed to create course {code}: {_detail(response)}")
    return None


def enroll_student(session, student_id, course_code):
    """Enroll a student in a course."""
    data = {"student_id": student_id, "course_code": course_code}
    response = session.post(f"{BASE_URL}/enrollments", json=data, timeout=TIMEOUT)
    if response.status_code == 201:
        print(f"{_OK_CHAR} Enrolled {student_id} in {course_code}")
        return response.json()
    if response.status_code == 409:
        print(f"{_WARN_CHAR} {student_id} not enrolled in {course_code}: {_detail(response)}")
        return None
    print(f"{_FAIL_CHAR} Failed to enroll {student_id}: {_detail(response)}")
    return None


def assign_grade(session, student_id, course_code, grade):
    """Assign a grade to an enrollment."""
    url = f"{BASE_URL}/enrollments/{student_id}/{course_code}/grade"
    response = session.put(url, json={"grade": grade}, timeout=TIMEOUT)
    if response.status_code == 200:
        result = response.json()
        print(f"{_OK_CHAR} Graded {student_id} in {course_code}: {grade} (GPA {result['gpa']:.2f})")
        return result
    print(f"{_FAIL_CHAR} Failed to grade {student_id}: {_detail(response)}")
    return None


def list_students(session):
    """List all students."""
    response = session.get(f"{BASE_URL}/students", timeout=TIMEOUT)
    if response.status_code != 200:
        print(f"{_FAIL_CHAR} Failed to list students: {_detail(response)}")
        return []
    students = response.json()
    print(f"\n{'='*60}")
    print(f"Students ({len(students)})")
    print(f"{'='*60}")
    for student in students:
        courses = ", ".join(student['enrolled_courses']) or "None"
        print(f"  {student['id']:6} | {student['full_name']:18} | GPA {student['gpa']:5.2f} | {courses}")
    return students


def show_summary(session):
    """Print the summary report."""
    response = session.get(f"{BASE_URL}/reports/summary", timeout=TIMEOUT)
    if response.status_code != 200:
        print(f"{_FAIL_CHAR} Failed to get summary: {_detail(response)}")
        return None
    report = response.json()
    print(f"\n{'='*60}")
    print("Summary")
    print(f"{'='*60}")
    print(json.dumps(report['report'], indent=2))
    return report


def main():
    """Main execution."""
    print("="*60)
    print("CCRM - Sample Data Script")
    print("="*60)

    session = requests.Session()
    if not check_server(session):
        sys.exit(1)

    print("\nCreating courses...")
    create_course(session, "CS101-A", "Introduction to Programming", 3, "Dr. Johnson", "FALL", "Computer Science")
    create_course(session, "CS201-A", "Data Structures", 4, "Dr. Johnson", "SPRING", "Computer Science")
    create_course(session, "MATH201-B", "Calculus II", 4, "Prof. Davis", "Spring", "Mathematics")
    create_course(session, "ENG101-A", "English Composition", 3, "Dr. Woolf", "fall", "English")

    print("\nCreating students...")
    create_student(session, "S001", "2023-CS-0001", "John Doe", "john.doe@email.com")
    create_student(session, "S002", "2023-CS-0002", "Jane Smith", "jane.smith@email.com")
    create_student(session, "S003", "2024-MA-0003", "Carol Davis", "carol.davis@email.com")

    print("\nEnrolling and grading...")
    plan = [
        ("S001", "CS101-A", "A"),
        ("S001", "MATH201-B", "B"),
        ("S002", "CS101-A", "S"),
        ("S002", "ENG101-A", "C"),
        ("S003", "CS201-A", "B"),
    ]
    for student_id, course_code, grade in plan:
        if enroll_student(session, student_id, course_code):
            assign_grade(session, student_id, course_code, grade)

    list_students(session)
    show_summary(session)

    print(f"\n{_OK_CHAR} Sample data added successfully!")
    print(f"  - View API docs: {BASE_URL}/docs")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{_FAIL_CHAR} Interrupted by user")
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        print(f"\n{_FAIL_CHAR} Request failed: {e}")
        sys.exit(1)
