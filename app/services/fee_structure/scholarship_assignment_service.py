"""
Scholarship Assignment Service

Grants and removes scholarships for a student in an academic session.
Assignments never compute their own discount: every assign/remove ends in
the recalculation service, which refreshes each active assignment's
``discount_amount`` together with the structure totals.
"""

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateAssignmentError, NotFoundError, ValidationError
from app.models.fee_structure import StudentScholarship
from app.repositories.fee_structure import ScholarshipRepository, StudentScholarshipRepository
from app.schemas.common.tenant import TenantScope
from app.schemas.fee_structure.scholarship import AssignScholarshipInput
from app.services.base import BaseService, ServiceResult
from app.services.fee_structure.recalculation_service import RecalculationService
from app.services.fee_structure.tenant_lookup import TenantLookup


class ScholarshipAssignmentService(BaseService[StudentScholarshipRepository]):
    """
    Scholarship assignment ledger.

    Multiple active scholarships for the same student and session stack
    additively; there is no precedence between them.
    """

    def __init__(
        self,
        db_session: Session,
        repository: Optional[StudentScholarshipRepository] = None,
        recalculation_service: Optional[RecalculationService] = None,
    ):
        repository = repository or StudentScholarshipRepository(db_session)
        super().__init__(repository, db_session)
        self.scholarships = ScholarshipRepository(db_session)
        self.lookup = TenantLookup(db_session)
        self.recalculation = recalculation_service or RecalculationService(
            db_session, assignment_repository=repository
        )

    def assign(
        self,
        scope: TenantScope,
        data: Union[AssignScholarshipInput, Mapping[str, Any]],
        approved_by_id: UUID,
    ) -> ServiceResult[StudentScholarship]:
        """
        Assign a scholarship to a student for a session.

        When the student already has a structure for the session its totals
        are recalculated immediately; otherwise the assignment carries a
        placeholder discount until the structure is created.

        Returns:
            ServiceResult with the assignment, or a failure with NOT_FOUND
            (student, session or scholarship outside the tenant),
            VALIDATION_ERROR (inactive scholarship) or ALREADY_EXISTS.
        """

        def _work() -> StudentScholarship:
            request = self._validate_input(AssignScholarshipInput, data)

            self.lookup.student(scope, request.student_id)
            self.lookup.session(scope, request.session_id)
            scholarship = self.scholarships.get_in_org(scope.org_id, request.scholarship_id)
            if scholarship is None:
                raise NotFoundError("Scholarship", request.scholarship_id)
            if not scholarship.is_active:
                raise ValidationError(
                    "Scholarship is inactive and cannot be assigned",
                    field_errors={"scholarship_id": ["scholarship is inactive"]},
                )

            existing = self.repository.find_active(request.student_id, request.scholarship_id, request.session_id)
            if existing is not None:
                raise DuplicateAssignmentError(request.student_id, request.scholarship_id, request.session_id)

            assignment = self.repository.create(
                {
                    "student_id": request.student_id,
                    "scholarship_id": request.scholarship_id,
                    "session_id": request.session_id,
                    "discount_amount": 0,
                    "approved_by_id": approved_by_id,
                    "approved_at": datetime.now(timezone.utc),
                    "remarks": request.remarks,
                    "is_active": True,
                }
            )
            structure = self.recalculation.recalculate_in_place(request.student_id, request.session_id)

            self._logger.info(
                "Scholarship assigned",
                extra={
                    "assignment_id": str(assignment.id),
                    "student_id": str(request.student_id),
                    "scholarship_id": str(request.scholarship_id),
                    "session_id": str(request.session_id),
                    "org_id": str(scope.org_id),
                    "discount_amount": assignment.discount_amount,
                    "structure_id": str(structure.id) if structure is not None else None,
                    "net_amount": structure.net_amount if structure is not None else None,
                },
            )
            return assignment

        return self._run("assign scholarship", _work, message="Scholarship assigned", scope=scope)

    def remove(self, scope: TenantScope, assignment_id: UUID) -> ServiceResult[bool]:
        """Delete an assignment and bring the owning structure's totals back down."""

        def _work() -> bool:
            assignment = self.repository.get_in_scope(scope.org_id, scope.branch_id, assignment_id)
            if assignment is None:
                raise NotFoundError("Student scholarship", assignment_id)

            student_id, session_id = assignment.student_id, assignment.session_id
            self.repository.delete(assignment)
            structure = self.recalculation.recalculate_in_place(student_id, session_id)

            self._logger.info(
                "Scholarship removed",
                extra={
                    "assignment_id": str(assignment_id),
                    "student_id": str(student_id),
                    "session_id": str(session_id),
                    "org_id": str(scope.org_id),
                    "net_amount": structure.net_amount if structure is not None else None,
                },
            )
            return True

        return self._run("remove scholarship", _work, entity_ref=assignment_id, message="Scholarship removed", scope=scope)

    def list_for_student(
        self,
        scope: TenantScope,
        student_id: UUID,
        session_id: Optional[UUID] = None,
    ) -> ServiceResult[List[StudentScholarship]]:
        """Active assignments of a student, most recently approved first."""

        def _work() -> List[StudentScholarship]:
            self.lookup.student(scope, student_id)
            return self.repository.list_for_student(student_id, session_id)

        return self._run("list student scholarships", _work, entity_ref=student_id, scope=scope)
