"""
Recalculation Service

Single writer of the derived fee figures: every assignment's
``discount_amount``, and each structure's ``scholarship_amount`` and
``net_amount``. Other services call ``recalculate_in_place`` from inside
their own unit of work; callers outside a transaction use ``recalculate``.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import ConsistencyError
from app.models.fee_structure import StudentFeeStructure
from app.repositories.fee_structure import (
    StudentFeeStructureRepository,
    StudentScholarshipRepository,
)
from app.schemas.common.tenant import TenantScope
from app.services.base import BaseService, ServiceResult
from app.services.fee_structure.discount_calculator import (
    compute_scholarship_discount,
    placeholder_scholarship_discount,
)
from app.services.fee_structure.tenant_lookup import TenantLookup
from app.utils.money import format_minor_units, net_amount


def assert_structure_consistent(structure: StudentFeeStructure) -> None:
    """
    Check the invariants of a fee snapshot before it is persisted.

    Raises:
        ConsistencyError: if gross does not match the line items, or net is
            outside ``[0, gross]`` or does not follow from the stored parts
    """
    line_total = sum(item.adjusted_amount for item in structure.line_items)
    custom = structure.custom_discount_amount or 0
    expected_net = net_amount(structure.gross_amount, structure.scholarship_amount, custom)

    problems: List[str] = []
    if structure.gross_amount != line_total:
        problems.append(f"gross_amount {structure.gross_amount} != line item total {line_total}")
    if structure.net_amount < 0 or structure.net_amount > structure.gross_amount:
        problems.append(f"net_amount {structure.net_amount} outside [0, {structure.gross_amount}]")
    if structure.net_amount != expected_net:
        problems.append(f"net_amount {structure.net_amount} != expected {expected_net}")
    if structure.scholarship_amount < 0 or custom < 0:
        problems.append("negative discount amount")

    if problems:
        raise ConsistencyError(
            "Fee structure snapshot is inconsistent",
            details={"structure_id": str(structure.id), "problems": problems},
        )


class RecalculationService(BaseService[StudentFeeStructureRepository]):
    """
    Re-derives scholarship totals and net amount for one (student, session).

    The structure row is loaded ``FOR UPDATE`` so concurrent recalculations
    of the same structure serialize; each sees the full set of active
    assignments at the time it acquires the lock.
    """

    def __init__(
        self,
        db_session: Session,
        structure_repository: Optional[StudentFeeStructureRepository] = None,
        assignment_repository: Optional[StudentScholarshipRepository] = None,
    ):
        super().__init__(structure_repository or StudentFeeStructureRepository(db_session), db_session)
        self.assignments = assignment_repository or StudentScholarshipRepository(db_session)
        self.lookup = TenantLookup(db_session)

    def recalculate(
        self,
        scope: TenantScope,
        student_id: UUID,
        session_id: UUID,
    ) -> ServiceResult[Optional[StudentFeeStructure]]:
        """
        Recalculate a student's structure for a session in its own unit of work.

        Returns a successful result with ``None`` when the student has no
        structure for the session.
        """

        def _work() -> Optional[StudentFeeStructure]:
            self.lookup.student(scope, student_id)
            self.lookup.session(scope, session_id)
            return self.recalculate_in_place(student_id, session_id)

        return self._run("recalculate fee structure", _work, entity_ref=student_id, scope=scope)

    def recalculate_in_place(
        self,
        student_id: UUID,
        session_id: UUID,
        structure: Optional[StudentFeeStructure] = None,
    ) -> Optional[StudentFeeStructure]:
        """
        Recalculate within the caller's unit of work (or a new one if none is open).

        ``structure`` may be passed when the caller already holds it locked.
        When no structure exists, assignments get their placeholder discount
        and ``None`` is returned.
        """
        with self.uow.begin():
            if structure is None:
                structure = self.repository.get_for_student_session(student_id, session_id, for_update=True)

            assignments = self.assignments.list_active_for(student_id, session_id)

            if structure is None:
                for assignment in assignments:
                    assignment.discount_amount = placeholder_scholarship_discount(assignment.scholarship)
                self.db.flush()
                return None

            scholarship_total = 0
            for assignment in assignments:
                discount = compute_scholarship_discount(assignment.scholarship, structure)
                assignment.discount_amount = discount
                scholarship_total += discount

            structure.scholarship_amount = scholarship_total
            structure.net_amount = net_amount(
                structure.gross_amount,
                scholarship_total,
                structure.custom_discount_amount or 0,
            )
            assert_structure_consistent(structure)
            self.db.flush()

            self._logger.info(
                f"Fee structure recalculated: net {format_minor_units(structure.net_amount)}",
                extra={
                    "structure_id": str(structure.id),
                    "student_id": str(student_id),
                    "session_id": str(session_id),
                    "assignments": len(assignments),
                    "gross_amount": structure.gross_amount,
                    "scholarship_amount": structure.scholarship_amount,
                    "net_amount": structure.net_amount,
                },
            )
            return structure

    def recalculate_for_scholarship(self, scholarship_id: UUID) -> int:
        """
        Recalculate every (student, session) holding an active assignment of
        the scholarship, inside the caller's unit of work.

        Returns the number of (student, session) pairs refreshed.
        """
        with self.uow.begin():
            keys = self.assignments.structure_keys_for_scholarship(scholarship_id)
            for student_id, session_id in keys:
                self.recalculate_in_place(student_id, session_id)
            return len(keys)
