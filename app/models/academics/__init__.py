"""
Academic collaborator models.

Students, batches and academic sessions are owned by the wider school
management system; the fee engine only reads them to validate tenancy.
"""

from app.models.academics.academic_session import AcademicSession
from app.models.academics.batch import Batch
from app.models.academics.student import Student

__all__ = ["AcademicSession", "Batch", "Student"]
