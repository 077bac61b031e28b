"""
Student Fee Structure Repository

Per-student fee aggregates and their line items. Mutating callers load the
structure with ``for_update=True`` so concurrent writers to the same
(student, session) serialize on the structure row.
"""

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import Select
from sqlalchemy.orm import Session

from app.models.academics import AcademicSession, Batch, Student
from app.models.base import StudentStatus
from app.models.fee_structure import StudentFeeLineItem, StudentFeeStructure
from app.repositories.base.base_repository import BaseRepository


class StudentFeeStructureRepository(BaseRepository[StudentFeeStructure]):

    def __init__(self, session: Session):
        super().__init__(session, StudentFeeStructure)

    def _lock(self, stmt: Select, for_update: bool) -> Select:
        if for_update:
            return stmt.with_for_update(of=StudentFeeStructure)
        return stmt

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #
    def get_in_scope(
        self,
        org_id: UUID,
        branch_id: UUID,
        structure_id: UUID,
        for_update: bool = False,
    ) -> Optional[StudentFeeStructure]:
        """Structure by id, visible only through its student's org and branch."""
        stmt = (
            self._base_select()
            .join(Student, Student.id == StudentFeeStructure.student_id)
            .where(
                StudentFeeStructure.id == structure_id,
                Student.org_id == org_id,
                Student.branch_id == branch_id,
            )
        )
        return self._execute_one_or_none(self._lock(stmt, for_update))

    def get_for_student_session(
        self,
        student_id: UUID,
        session_id: UUID,
        for_update: bool = False,
    ) -> Optional[StudentFeeStructure]:
        stmt = self._base_select().where(
            StudentFeeStructure.student_id == student_id,
            StudentFeeStructure.session_id == session_id,
        )
        return self._execute_one_or_none(self._lock(stmt, for_update))

    def list_for_session(self, org_id: UUID, branch_id: UUID, session_id: UUID) -> List[StudentFeeStructure]:
        """Structures of the branch's active students, ordered by batch then student name."""
        stmt = (
            self._base_select()
            .join(Student, Student.id == StudentFeeStructure.student_id)
            .outerjoin(Batch, Batch.id == Student.batch_id)
            .where(
                StudentFeeStructure.session_id == session_id,
                Student.org_id == org_id,
                Student.branch_id == branch_id,
                Student.status == StudentStatus.ACTIVE,
            )
            .order_by(Batch.name, Student.first_name, Student.last_name, StudentFeeStructure.id)
        )
        return list(self._execute_scalars(stmt))

    def list_for_student(self, student_id: UUID, session_id: Optional[UUID] = None) -> List[StudentFeeStructure]:
        """A student's structures, most recent session name first."""
        stmt = (
            self._base_select()
            .join(AcademicSession, AcademicSession.id == StudentFeeStructure.session_id)
            .where(StudentFeeStructure.student_id == student_id)
            .order_by(AcademicSession.name.desc())
        )
        if session_id is not None:
            stmt = stmt.where(StudentFeeStructure.session_id == session_id)
        return list(self._execute_scalars(stmt))

    # ------------------------------------------------------------------ #
    # Line items
    # ------------------------------------------------------------------ #
    def replace_line_items(
        self,
        structure: StudentFeeStructure,
        line_items: Iterable[Dict[str, Any]],
    ) -> StudentFeeStructure:
        """
        Delete the structure's line items and insert ``line_items`` in order.

        The old rows are flushed away first; the (structure, component)
        unique key would otherwise collide with the replacements.
        """
        structure.line_items.clear()
        self._flush()

        for position, data in enumerate(line_items):
            structure.line_items.append(StudentFeeLineItem(position=position, **data))
        self._flush()
        return structure
