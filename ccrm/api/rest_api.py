"""
REST API implementation for the CCRM platform using FastAPI.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, Response, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..core.entities import Course, Enrollment, Instructor, Student
from ..core.enums import Grade, Semester
from ..core.exceptions import (
    CcrmException, CreditLimitExceededError, DuplicateEnrollmentError, IOFailure,
    NotFoundError, ValidationError
)

if TYPE_CHECKING:
    from ..main import CcrmPlatform


# Pydantic models for API
class StudentCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=20)
    reg_no: str = Field(..., pattern=r'^\d{4}-[A-Za-z]{2,4}-\d{4}$')
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r'^[^@]+@[^@]+\.[^@]+$')


class StudentResponse(BaseModel):
    id: str
    reg_no: str
    full_name: str
    email: str
    active: bool
    enrolled_courses: List[str] = []
    grades: Dict[str, str] = {}
    gpa: float
    created_at: datetime


class InstructorCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=20)
    employee_id: str = Field(..., min_length=1, max_length=20)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r'^[^@]+@[^@]+\.[^@]+$')
    department: str = Field("", max_length=100)


class InstructorResponse(BaseModel):
    id: str
    employee_id: str
    full_name: str
    email: str
    department: str
    active: bool
    assigned_courses: List[str] = []
    created_at: datetime


class CourseCreate(BaseModel):
    code: str = Field(..., pattern=r'^[A-Za-z]{2,4}\d{3}-[A-Za-z0-9]$')
    title: str = Field(..., min_length=1, max_length=200)
    credits: int = Field(..., ge=1, le=6)
    instructor: str = Field("", max_length=100)
    semester: str = Field(..., min_length=1)
    department: str = Field("", max_length=100)


class CourseResponse(BaseModel):
    code: str
    title: str
    credits: int
    instructor: str
    semester: str
    department: str
    active: bool
    created_at: datetime


class EnrollmentRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)


class EnrollmentResponse(BaseModel):
    student_id: str
    course_code: str
    status: str
    grade: Optional[str] = None
    enrolled_at: datetime


class GradeRequest(BaseModel):
    grade: str = Field(..., pattern=r'^[SABCDEFsabcdef]$')


class GpaResponse(BaseModel):
    student_id: str
    gpa: float
    credits: int


class ImportRequest(BaseModel):
    students_file: Optional[str] = None
    courses_file: Optional[str] = None


class ImportResponse(BaseModel):
    students_added: int = 0
    students_rejected: int = 0
    courses_added: int = 0
    courses_rejected: int = 0


class PathResponse(BaseModel):
    success: bool
    message: str
    paths: Dict[str, str]


class ReportResponse(BaseModel):
    success: bool
    message: str
    report: Dict[str, Any]


class CcrmRestAPI:
    """REST API over the record stores and the enrollment service."""

    def __init__(self, platform: "CcrmPlatform"):
        self._platform = platform
        self._students = platform.students
        self._instructors = platform.instructors
        self._courses = platform.courses
        self._enrollment_service = platform.enrollment_service
        self._report_service = platform.report_service

        self.app = FastAPI(
            title="CCRM API",
            description="Campus Course & Records Manager",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        def root():
            """Root endpoint."""
            return {
                "message": "CCRM API",
                "version": "1.0.0",
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now().isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        def create_student(student_data: StudentCreate):
            """Create or replace a student."""
            try:
                student = Student(student_data.id, student_data.reg_no,
                                  student_data.full_name, student_data.email)
                return self._student_to_response(self._students.add(student))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/students", response_model=List[StudentResponse])
        def list_students(active_only: bool = False, skip: int = Query(0, ge=0),
                          limit: int = Query(100, ge=1)):
            """List students ordered by ID."""
            students = self._students.find_active() if active_only else self._students.find_all()
            return [self._student_to_response(s) for s in students[skip:skip + limit]]

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        def get_student(student_id: str):
            """Get a student by ID."""
            try:
                return self._student_to_response(self._students.get(student_id))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/students/{student_id}/deactivate", response_model=StudentResponse)
        def deactivate_student(student_id: str):
            try:
                return self._student_to_response(self._students.deactivate(student_id))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/students/{student_id}/gpa", response_model=GpaResponse)
        def get_student_gpa(student_id: str):
            try:
                student = self._students.get(student_id)
                return GpaResponse(
                    student_id=student.id,
                    gpa=round(self._enrollment_service.calculate_gpa(student), 2),
                    credits=self._enrollment_service.current_credits(student.id)
                )
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/students/{student_id}/enrollments", response_model=List[EnrollmentResponse])
        def get_student_enrollments(student_id: str, include_dropped: bool = False):
            try:
                self._students.get(student_id)
                enrollments = self._enrollment_service.get_enrollments(student_id, include_inactive=include_dropped)
                return [self._enrollment_to_response(e) for e in enrollments]
            except CcrmException as e:
                raise self._http_error(e)

        # Instructor endpoints
        @self.app.post("/instructors", response_model=InstructorResponse, status_code=status.HTTP_201_CREATED)
        def create_instructor(instructor_data: InstructorCreate):
            """Create or replace an instructor."""
            try:
                instructor = Instructor(instructor_data.id, instructor_data.employee_id,
                                        instructor_data.full_name, instructor_data.email,
                                        instructor_data.department)
                return self._instructor_to_response(self._instructors.add(instructor))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/instructors", response_model=List[InstructorResponse])
        def list_instructors(department: Optional[str] = None):
            """List instructors ordered by ID, optionally for one department."""
            if department is None:
                instructors = self._instructors.find_all()
            else:
                instructors = self._instructors.find_by_department(department)
            return [self._instructor_to_response(i) for i in instructors]

        @self.app.get("/instructors/{instructor_id}", response_model=InstructorResponse)
        def get_instructor(instructor_id: str):
            try:
                return self._instructor_to_response(self._instructors.get(instructor_id))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.put("/instructors/{instructor_id}/courses/{course_code}", response_model=InstructorResponse)
        def assign_course(instructor_id: str, course_code: str):
            """Add a known course to an instructor's teaching assignments."""
            try:
                instructor = self._instructors.get(instructor_id)
                self._courses.get(course_code)
                instructor.assign_course(course_code)
                return self._instructor_to_response(instructor)
            except CcrmException as e:
                raise self._http_error(e)

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        def create_course(course_data: CourseCreate):
            """Create or replace a course."""
            try:
                semester = self._parse_semester(course_data.semester)
                course = Course(
                    code=course_data.code,
                    title=course_data.title,
                    credits=course_data.credits,
                    semester=semester,
                    instructor=course_data.instructor,
                    department=course_data.department
                )
                return self._course_to_response(self._courses.add(course))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/courses", response_model=List[CourseResponse])
        def list_courses(instructor: Optional[str] = None, department: Optional[str] = None,
                         semester: Optional[str] = None):
            """List courses; any filter restricts the listing to active matches."""
            try:
                if instructor is None and department is None and semester is None:
                    courses = self._courses.find_all()
                else:
                    courses = self._courses.search(
                        instructor=instructor,
                        department=department,
                        semester=self._parse_semester(semester) if semester else None
                    )
                return [self._course_to_response(c) for c in courses]
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.get("/courses/{course_code}", response_model=CourseResponse)
        def get_course(course_code: str):
            try:
                return self._course_to_response(self._courses.get(course_code))
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/courses/{course_code}/deactivate", response_model=CourseResponse)
        def deactivate_course(course_code: str):
            try:
                return self._course_to_response(self._courses.deactivate(course_code))
            except CcrmException as e:
                raise self._http_error(e)

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
        def enroll_student(enrollment_data: EnrollmentRequest):
            """Enroll a student in a course."""
            try:
                enrollment = self._enrollment_service.enroll(enrollment_data.student_id,
                                                             enrollment_data.course_code)
                return self._enrollment_to_response(enrollment)
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.delete("/enrollments/{student_id}/{course_code}", status_code=status.HTTP_204_NO_CONTENT)
        def unenroll_student(student_id: str, course_code: str):
            """Drop a course; dropping an inactive enrollment is a no-op."""
            self._enrollment_service.unenroll(student_id, course_code)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        @self.app.put("/enrollments/{student_id}/{course_code}/grade", response_model=GpaResponse)
        def assign_grade(student_id: str, course_code: str, grade_data: GradeRequest):
            """Assign a grade and return the student's updated GPA."""
            try:
                student = self._students.get(student_id)
                self._enrollment_service.assign_grade(student_id, course_code,
                                                      Grade.from_letter(grade_data.grade))
                return GpaResponse(
                    student_id=student_id,
                    gpa=round(self._enrollment_service.calculate_gpa(student), 2),
                    credits=self._enrollment_service.current_credits(student_id)
                )
            except CcrmException as e:
                raise self._http_error(e)

        # Report endpoints
        @self.app.get("/reports/grade-distribution", response_model=Dict[str, int])
        def grade_distribution():
            return self._enrollment_service.grade_distribution()

        @self.app.get("/reports/top-students", response_model=List[StudentResponse])
        def top_students(limit: int = 5):
            return [self._student_to_response(s) for s in self._enrollment_service.top_students(limit)]

        @self.app.get("/reports/summary", response_model=ReportResponse)
        def summary(top: int = 5):
            return ReportResponse(
                success=True,
                message="Summary generated successfully",
                report=self._report_service.summary(top)
            )

        # Import/export endpoints
        @self.app.post("/imports", response_model=ImportResponse)
        def import_records(import_data: ImportRequest):
            """Import courses then students from the data folder."""
            try:
                result = ImportResponse()
                if import_data.courses_file:
                    result.courses_added, result.courses_rejected = \
                        self._platform.import_courses(import_data.courses_file)
                if import_data.students_file:
                    result.students_added, result.students_rejected = \
                        self._platform.import_students(import_data.students_file)
                return result
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/exports", response_model=PathResponse)
        def export_records():
            try:
                return PathResponse(success=True, message="Records exported",
                                    paths=self._platform.export_all())
            except CcrmException as e:
                raise self._http_error(e)

        @self.app.post("/backups", response_model=PathResponse, status_code=status.HTTP_201_CREATED)
        def create_backup():
            try:
                return PathResponse(success=True, message="Backup created",
                                    paths={"backup": self._platform.backup()})
            except CcrmException as e:
                raise self._http_error(e)

    @staticmethod
    def _parse_semester(value: str) -> Semester:
        try:
            return Semester.from_string(value)
        except ValueError as e:
            raise ValidationError(str(e)) from None

    @staticmethod
    def _http_error(error: CcrmException) -> HTTPException:
        """Map a domain error onto an HTTP error."""
        if isinstance(error, NotFoundError):
            code = status.HTTP_404_NOT_FOUND
        elif isinstance(error, (DuplicateEnrollmentError, CreditLimitExceededError)):
            code = status.HTTP_409_CONFLICT
        elif isinstance(error, (ValidationError, IOFailure)):
            code = status.HTTP_400_BAD_REQUEST
        else:
            code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return HTTPException(status_code=code, detail={
            "message": error.message,
            "error_code": error.error_code,
            "details": error.details
        })

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(
            id=student.id,
            reg_no=student.reg_no,
            full_name=student.full_name,
            email=student.email,
            active=student.active,
            enrolled_courses=sorted(student.enrolled_courses),
            grades={code: grade.name for code, grade in sorted(student.grades.items())},
            gpa=round(student.calculate_gpa(), 2),
            created_at=student.created_at
        )

    def _instructor_to_response(self, instructor: Instructor) -> InstructorResponse:
        return InstructorResponse(
            id=instructor.id,
            employee_id=instructor.employee_id,
            full_name=instructor.full_name,
            email=instructor.email,
            department=instructor.department,
            active=instructor.active,
            assigned_courses=sorted(instructor.assigned_courses),
            created_at=instructor.created_at
        )

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            code=course.code,
            title=course.title,
            credits=course.credits,
            instructor=course.instructor,
            semester=course.semester.name,
            department=course.department,
            active=course.active,
            created_at=course.created_at
        )

    def _enrollment_to_response(self, enrollment: Enrollment) -> EnrollmentResponse:
        return EnrollmentResponse(
            student_id=enrollment.student_id,
            course_code=enrollment.course_code,
            status=enrollment.status.value,
            grade=enrollment.grade.name if enrollment.grade else None,
            enrolled_at=enrollment.enrolled_at
        )
