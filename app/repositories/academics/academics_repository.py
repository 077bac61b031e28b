"""
Academics Repository

Tenant-scoped lookups for students, batches and academic sessions.
A record outside the caller's tenant is reported exactly like a missing one.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.academics import AcademicSession, Batch, Student
from app.models.base import StudentStatus
from app.repositories.base.base_repository import BaseRepository


class StudentRepository(BaseRepository[Student]):
    """Students are scoped by organization and branch."""

    def __init__(self, session: Session):
        super().__init__(session, Student)

    def get_in_scope(self, org_id: UUID, branch_id: UUID, student_id: UUID) -> Optional[Student]:
        return self.find_one({"id": student_id, "org_id": org_id, "branch_id": branch_id})

    def list_active_in_batch(self, batch_id: UUID) -> List[Student]:
        stmt = (
            self._base_select()
            .where(
                Student.batch_id == batch_id,
                Student.status == StudentStatus.ACTIVE,
            )
            .order_by(Student.first_name, Student.last_name, Student.id)
        )
        return list(self._execute_scalars(stmt))


class BatchRepository(BaseRepository[Batch]):
    """Batches are scoped by organization and branch."""

    def __init__(self, session: Session):
        super().__init__(session, Batch)

    def get_in_scope(self, org_id: UUID, branch_id: UUID, batch_id: UUID) -> Optional[Batch]:
        return self.find_one({"id": batch_id, "org_id": org_id, "branch_id": branch_id})


class AcademicSessionRepository(BaseRepository[AcademicSession]):
    """Academic sessions are shared by all branches of an organization."""

    def __init__(self, session: Session):
        super().__init__(session, AcademicSession)

    def get_in_org(self, org_id: UUID, session_id: UUID) -> Optional[AcademicSession]:
        return self.find_one({"id": session_id, "org_id": org_id})
