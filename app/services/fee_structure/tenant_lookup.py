"""
Tenant-checked lookups shared by the fee services.

Every reference arriving from a caller is resolved through the caller's
TenantScope. Missing and foreign records raise the same NotFoundError.
"""

from typing import Dict, Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.models.academics import AcademicSession, Batch, Student
from app.models.fee_structure import FeeComponent
from app.repositories.academics import (
    AcademicSessionRepository,
    BatchRepository,
    StudentRepository,
)
from app.repositories.fee_structure import FeeComponentRepository
from app.schemas.common.tenant import TenantScope


class TenantLookup:

    def __init__(self, db_session: Session):
        self.students = StudentRepository(db_session)
        self.batches = BatchRepository(db_session)
        self.sessions = AcademicSessionRepository(db_session)
        self.components = FeeComponentRepository(db_session)

    def student(self, scope: TenantScope, student_id: UUID) -> Student:
        student = self.students.get_in_scope(scope.org_id, scope.branch_id, student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        return student

    def batch(self, scope: TenantScope, batch_id: UUID) -> Batch:
        batch = self.batches.get_in_scope(scope.org_id, scope.branch_id, batch_id)
        if batch is None:
            raise NotFoundError("Batch", batch_id)
        return batch

    def session(self, scope: TenantScope, session_id: UUID) -> AcademicSession:
        academic_session = self.sessions.get_in_org(scope.org_id, session_id)
        if academic_session is None:
            raise NotFoundError("Academic session", session_id)
        return academic_session

    def active_components(self, scope: TenantScope, component_ids: Iterable[UUID]) -> Dict[UUID, FeeComponent]:
        """
        Resolve every id to an active component of the caller's org.

        Raises:
            NotFoundError: for the first id that is unknown, foreign or inactive
        """
        wanted = list(dict.fromkeys(component_ids))
        found = {c.id: c for c in self.components.get_active_by_ids(scope.org_id, wanted)}
        for cid in wanted:
            if cid not in found:
                raise NotFoundError("Fee component", cid)
        return found
