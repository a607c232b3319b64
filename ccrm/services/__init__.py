"""
Services module containing enrollment, CSV exchange and reporting.
"""

from .enrollment_service import EnrollmentService
from .import_export_service import ImportExportService
from .report_service import ReportService

__all__ = [
    "EnrollmentService",
    "ImportExportService",
    "ReportService",
]
