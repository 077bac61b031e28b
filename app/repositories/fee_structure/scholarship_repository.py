"""
Scholarship Repository

Scholarship definitions (org-scoped) and student scholarship assignments.
"""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.academics import Student
from app.models.base import ScholarshipBasis, ScholarshipType
from app.models.fee_structure import Scholarship, StudentScholarship
from app.repositories.base.base_repository import BaseRepository


class ScholarshipRepository(BaseRepository[Scholarship]):

    def __init__(self, session: Session):
        super().__init__(session, Scholarship)

    def get_in_org(self, org_id: UUID, scholarship_id: UUID) -> Optional[Scholarship]:
        return self.find_one({"id": scholarship_id, "org_id": org_id})

    def find_by_name(
        self,
        org_id: UUID,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Scholarship]:
        stmt = self._base_select().where(
            Scholarship.org_id == org_id,
            Scholarship.name == name,
        )
        if exclude_id is not None:
            stmt = stmt.where(Scholarship.id != exclude_id)
        return self._execute_one_or_none(stmt.limit(1))

    def list_page(
        self,
        org_id: UUID,
        *,
        is_active: Optional[bool],
        scholarship_type: Optional[ScholarshipType],
        basis: Optional[ScholarshipBasis],
        skip: int,
        limit: int,
    ) -> Tuple[Sequence[Scholarship], int]:
        return self.paginate(
            skip=skip,
            limit=limit,
            filters={
                "org_id": org_id,
                "is_active": is_active,
                "type": scholarship_type,
                "basis": basis,
            },
            order_by=(Scholarship.basis, Scholarship.name),
        )

    def list_active(self, org_id: UUID) -> List[Scholarship]:
        return list(
            self.get_multi(
                limit=None,
                filters={"org_id": org_id, "is_active": True},
                order_by=(Scholarship.basis, Scholarship.name),
            )
        )


class StudentScholarshipRepository(BaseRepository[StudentScholarship]):
    """
    Scholarship assignments.

    Assignments reference their fee structure through (student_id,
    session_id); there is no foreign key to the structure itself.
    """

    def __init__(self, session: Session):
        super().__init__(session, StudentScholarship)

    def get_in_scope(self, org_id: UUID, branch_id: UUID, assignment_id: UUID) -> Optional[StudentScholarship]:
        stmt = (
            self._base_select()
            .join(Student, Student.id == StudentScholarship.student_id)
            .where(
                StudentScholarship.id == assignment_id,
                Student.org_id == org_id,
                Student.branch_id == branch_id,
            )
        )
        return self._execute_one_or_none(stmt)

    def find_active(
        self,
        student_id: UUID,
        scholarship_id: UUID,
        session_id: UUID,
    ) -> Optional[StudentScholarship]:
        return self.find_one(
            {
                "student_id": student_id,
                "scholarship_id": scholarship_id,
                "session_id": session_id,
                "is_active": True,
            }
        )

    def list_active_for(self, student_id: UUID, session_id: UUID) -> List[StudentScholarship]:
        """Active assignments for one (student, session), in a stable order."""
        stmt = (
            self._base_select()
            .where(
                StudentScholarship.student_id == student_id,
                StudentScholarship.session_id == session_id,
                StudentScholarship.is_active.is_(True),
            )
            .order_by(StudentScholarship.created_at, StudentScholarship.id)
        )
        return list(self._execute_scalars(stmt))

    def list_for_student(self, student_id: UUID, session_id: Optional[UUID] = None) -> List[StudentScholarship]:
        return list(
            self.get_multi(
                limit=None,
                filters={"student_id": student_id, "session_id": session_id, "is_active": True},
                order_by=(StudentScholarship.approved_at.desc(), StudentScholarship.id),
            )
        )

    def structure_keys_for_scholarship(self, scholarship_id: UUID) -> List[Tuple[UUID, UUID]]:
        """Distinct (student_id, session_id) pairs holding an active assignment of the scholarship."""
        stmt = (
            select(StudentScholarship.student_id, StudentScholarship.session_id)
            .where(
                StudentScholarship.scholarship_id == scholarship_id,
                StudentScholarship.is_active.is_(True),
            )
            .distinct()
        )
        return [(row.student_id, row.session_id) for row in self.session.execute(stmt)]
