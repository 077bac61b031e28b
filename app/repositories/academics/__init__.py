"""
Academic collaborator repositories.

Read-only lookups the fee engine uses to validate tenancy of students,
batches and academic sessions.
"""

from app.repositories.academics.academics_repository import (
    AcademicSessionRepository,
    BatchRepository,
    StudentRepository,
)

__all__ = [
    "AcademicSessionRepository",
    "BatchRepository",
    "StudentRepository",
]
