"""
Student Fee Structure Service

Lifecycle of per-student, per-session fee structures:
- Creation from ad hoc line items or from a batch fee template
- Line item replacement and remark updates
- Custom discount set / clear
- Detail, per-session admin listing and the student dashboard summary

Every mutation runs in one unit of work and ends with the recalculation
service, so a structure is never committed with stale totals.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateStructureError, NotFoundError
from app.models.base import FeeStructureSource
from app.models.fee_structure import BatchFeeStructure, StudentFeeStructure
from app.repositories.fee_structure import (
    BatchFeeStructureRepository,
    StudentFeeStructureRepository,
)
from app.schemas.common.tenant import TenantScope
from app.schemas.fee_structure.student_fee_structure import (
    CustomDiscountInput,
    CustomDiscountResponse,
    LineItemInput,
    StudentFeeStructureCreate,
    StudentFeeStructureDetail,
    StudentFeeStructureUpdate,
    StudentFeeSummary,
    StudentFeeSummaryItem,
)
from app.services.base import BaseService, ServiceResult
from app.services.fee_structure.discount_calculator import compute_custom_discount
from app.services.fee_structure.recalculation_service import (
    RecalculationService,
    assert_structure_consistent,
)
from app.services.fee_structure.tenant_lookup import TenantLookup
from app.utils.money import net_amount


def template_line_items(template: BatchFeeStructure) -> List[LineItemInput]:
    """Student line items copied from a batch template, original and adjusted alike."""
    return [
        LineItemInput(fee_component_id=item.fee_component_id, original_amount=item.amount, adjusted_amount=item.amount)
        for item in template.line_items
    ]


def _line_item_rows(line_items: Sequence[LineItemInput]) -> List[Dict[str, Any]]:
    return [
        {
            "fee_component_id": item.fee_component_id,
            "original_amount": item.original_amount if item.original_amount is not None else item.adjusted_amount,
            "adjusted_amount": item.adjusted_amount,
            "waived": item.waived,
            "waiver_reason": item.waiver_reason,
        }
        for item in line_items
    ]


class StudentFeeStructureService(BaseService[StudentFeeStructureRepository]):
    """
    Student fee structure management.

    Public methods return ``ServiceResult``; the ``*_in_uow`` helpers raise
    domain exceptions and are meant for other fee services composing a
    larger unit of work (template application).
    """

    def __init__(
        self,
        db_session: Session,
        repository: Optional[StudentFeeStructureRepository] = None,
        recalculation_service: Optional[RecalculationService] = None,
    ):
        repository = repository or StudentFeeStructureRepository(db_session)
        super().__init__(repository, db_session)
        self.lookup = TenantLookup(db_session)
        self.templates = BatchFeeStructureRepository(db_session)
        self.recalculation = recalculation_service or RecalculationService(
            db_session, structure_repository=repository
        )

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create_structure(
        self,
        scope: TenantScope,
        data: Union[StudentFeeStructureCreate, Mapping[str, Any]],
    ) -> ServiceResult[StudentFeeStructure]:
        """
        Create a custom fee structure for a student and session.

        Returns:
            ServiceResult with the structure, totals already reflecting any
            scholarships the student holds for the session. Fails with
            ALREADY_EXISTS if the student has a structure for the session.
        """

        def _work() -> StudentFeeStructure:
            request = self._validate_input(StudentFeeStructureCreate, data)
            return self.create_in_uow(
                scope,
                student_id=request.student_id,
                session_id=request.session_id,
                line_items=request.line_items,
                source=FeeStructureSource.CUSTOM,
                remarks=request.remarks,
            )

        return self._run("create student fee structure", _work, message="Fee structure created", scope=scope)

    def create_from_template(
        self,
        scope: TenantScope,
        student_id: UUID,
        template_id: UUID,
    ) -> ServiceResult[StudentFeeStructure]:
        """Create a ``source=template`` structure copying a batch fee template."""

        def _work() -> StudentFeeStructure:
            template = self.templates.get_in_scope(scope.org_id, scope.branch_id, template_id)
            if template is None:
                raise NotFoundError("Batch fee structure", template_id)
            return self.create_in_uow(
                scope,
                student_id=student_id,
                session_id=template.session_id,
                line_items=template_line_items(template),
                source=FeeStructureSource.TEMPLATE,
                batch_fee_structure_id=template.id,
            )

        return self._run("create fee structure from template", _work, entity_ref=template_id, scope=scope)

    def create_in_uow(
        self,
        scope: TenantScope,
        *,
        student_id: UUID,
        session_id: UUID,
        line_items: Sequence[LineItemInput],
        source: FeeStructureSource,
        remarks: Optional[str] = None,
        batch_fee_structure_id: Optional[UUID] = None,
    ) -> StudentFeeStructure:
        with self.uow.begin():
            self.lookup.student(scope, student_id)
            self.lookup.session(scope, session_id)

            if self.repository.get_for_student_session(student_id, session_id) is not None:
                raise DuplicateStructureError(student_id, session_id)

            self.lookup.active_components(scope, (item.fee_component_id for item in line_items))

            rows = _line_item_rows(line_items)
            gross = sum(row["adjusted_amount"] for row in rows)
            structure = self.repository.create(
                {
                    "student_id": student_id,
                    "session_id": session_id,
                    "source": source,
                    "batch_fee_structure_id": batch_fee_structure_id,
                    "gross_amount": gross,
                    "scholarship_amount": 0,
                    "custom_discount_amount": 0,
                    "net_amount": gross,
                    "remarks": remarks,
                }
            )
            self.repository.replace_line_items(structure, rows)
            self.recalculation.recalculate_in_place(student_id, session_id, structure=structure)

            self._logger.info(
                "Student fee structure created",
                extra={
                    "structure_id": str(structure.id),
                    "student_id": str(student_id),
                    "session_id": str(session_id),
                    "org_id": str(scope.org_id),
                    "source": source.value,
                    "gross_amount": structure.gross_amount,
                    "scholarship_amount": structure.scholarship_amount,
                    "net_amount": structure.net_amount,
                },
            )
            return structure

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update_structure(
        self,
        scope: TenantScope,
        structure_id: UUID,
        data: Union[StudentFeeStructureUpdate, Mapping[str, Any]],
    ) -> ServiceResult[StudentFeeStructure]:
        """
        Replace line items and/or remarks.

        New line items mark the structure custom, recompute gross, re-derive
        the custom discount against the new gross and recalculate
        scholarships.
        """

        def _work() -> StudentFeeStructure:
            request = self._validate_input(StudentFeeStructureUpdate, data)
            structure = self._require_structure(scope, structure_id, for_update=True)
            changes = request.model_dump(exclude_unset=True)

            if "remarks" in changes:
                structure.remarks = request.remarks

            if request.line_items is not None:
                self.replace_line_items_in_uow(
                    scope, structure, request.line_items, source=FeeStructureSource.CUSTOM
                )
            else:
                assert_structure_consistent(structure)
                self.db.flush()

            self._logger.info(
                "Student fee structure updated",
                extra={
                    "structure_id": str(structure.id),
                    "org_id": str(scope.org_id),
                    "fields": sorted(changes),
                    "gross_amount": structure.gross_amount,
                    "net_amount": structure.net_amount,
                },
            )
            return structure

        return self._run("update student fee structure", _work, entity_ref=structure_id, message="Fee structure updated", scope=scope)

    def replace_line_items_in_uow(
        self,
        scope: TenantScope,
        structure: StudentFeeStructure,
        line_items: Sequence[LineItemInput],
        *,
        source: FeeStructureSource,
        batch_fee_structure_id: Optional[UUID] = None,
    ) -> StudentFeeStructure:
        """Swap the line items of a locked structure and bring every total up to date."""
        with self.uow.begin():
            self.lookup.active_components(scope, (item.fee_component_id for item in line_items))

            rows = _line_item_rows(line_items)
            self.repository.replace_line_items(structure, rows)
            structure.gross_amount = sum(row["adjusted_amount"] for row in rows)
            structure.source = source
            if source == FeeStructureSource.TEMPLATE:
                structure.batch_fee_structure_id = batch_fee_structure_id

            if structure.has_custom_discount:
                structure.custom_discount_amount = compute_custom_discount(
                    structure.custom_discount_type,
                    structure.custom_discount_value,
                    structure.gross_amount,
                )

            return self.recalculation.recalculate_in_place(
                structure.student_id, structure.session_id, structure=structure
            )

    # -------------------------------------------------------------------------
    # Custom discount
    # -------------------------------------------------------------------------

    def set_custom_discount(
        self,
        scope: TenantScope,
        structure_id: UUID,
        data: Union[CustomDiscountInput, Mapping[str, Any]],
    ) -> ServiceResult[StudentFeeStructure]:
        """Set or change the student-specific discount, computed on the current gross."""

        def _work() -> StudentFeeStructure:
            request = self._validate_input(CustomDiscountInput, data)
            structure = self._require_structure(scope, structure_id, for_update=True)

            structure.custom_discount_type = request.type
            structure.custom_discount_value = request.value
            structure.custom_discount_remarks = request.remarks
            structure.custom_discount_amount = compute_custom_discount(
                request.type, request.value, structure.gross_amount
            )
            self._refresh_net(structure)

            self._logger.info(
                "Custom discount set",
                extra={
                    "structure_id": str(structure.id),
                    "org_id": str(scope.org_id),
                    "discount_type": request.type.value,
                    "discount_value": request.value,
                    "custom_discount_amount": structure.custom_discount_amount,
                    "net_amount": structure.net_amount,
                },
            )
            return structure

        return self._run("set custom discount", _work, entity_ref=structure_id, message="Custom discount applied", scope=scope)

    def clear_custom_discount(self, scope: TenantScope, structure_id: UUID) -> ServiceResult[StudentFeeStructure]:
        def _work() -> StudentFeeStructure:
            structure = self._require_structure(scope, structure_id, for_update=True)

            structure.custom_discount_type = None
            structure.custom_discount_value = None
            structure.custom_discount_remarks = None
            structure.custom_discount_amount = 0
            self._refresh_net(structure)

            self._logger.info(
                "Custom discount cleared",
                extra={
                    "structure_id": str(structure.id),
                    "org_id": str(scope.org_id),
                    "net_amount": structure.net_amount,
                },
            )
            return structure

        return self._run("clear custom discount", _work, entity_ref=structure_id, message="Custom discount removed", scope=scope)

    def _refresh_net(self, structure: StudentFeeStructure) -> None:
        structure.net_amount = net_amount(
            structure.gross_amount,
            structure.scholarship_amount,
            structure.custom_discount_amount,
        )
        assert_structure_consistent(structure)
        self.db.flush()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_structure(self, scope: TenantScope, structure_id: UUID) -> ServiceResult[StudentFeeStructureDetail]:
        """Structure detail with line items resolved to component name and type."""

        def _work() -> StudentFeeStructureDetail:
            return StudentFeeStructureDetail.from_model(self._require_structure(scope, structure_id))

        return self._run("get student fee structure", _work, entity_ref=structure_id, scope=scope)

    def get_for_student(
        self,
        scope: TenantScope,
        student_id: UUID,
        session_id: UUID,
    ) -> ServiceResult[Optional[StudentFeeStructure]]:
        """The student's structure for the session, or ``None`` when it has none yet."""

        def _work() -> Optional[StudentFeeStructure]:
            self.lookup.student(scope, student_id)
            self.lookup.session(scope, session_id)
            return self.repository.get_for_student_session(student_id, session_id)

        return self._run("get student fee structure", _work, entity_ref=student_id, scope=scope)

    def list_for_session(self, scope: TenantScope, session_id: UUID) -> ServiceResult[List[StudentFeeStructure]]:
        """Admin view: structures of the branch's active students for a session."""

        def _work() -> List[StudentFeeStructure]:
            self.lookup.session(scope, session_id)
            return self.repository.list_for_session(scope.org_id, scope.branch_id, session_id)

        return self._run("list student fee structures", _work, entity_ref=session_id, scope=scope)

    def get_student_fee_summary(
        self,
        scope: TenantScope,
        student_id: UUID,
        session_id: Optional[UUID] = None,
    ) -> ServiceResult[StudentFeeSummary]:
        """Per-session gross, scholarship, custom discount and net figures for a student."""

        def _work() -> StudentFeeSummary:
            student = self.lookup.student(scope, student_id)
            structures = self.repository.list_for_student(student_id, session_id)
            return StudentFeeSummary(
                student_id=student.id,
                student_name=student.full_name,
                fee_structures=[
                    StudentFeeSummaryItem(
                        structure_id=structure.id,
                        session_id=structure.session_id,
                        session_name=structure.session.name,
                        is_current_session=structure.session.is_current,
                        gross_amount=structure.gross_amount,
                        scholarship_amount=structure.scholarship_amount,
                        custom_discount=CustomDiscountResponse.from_structure(structure),
                        net_amount=structure.net_amount,
                        line_item_count=len(structure.line_items),
                    )
                    for structure in structures
                ],
            )

        return self._run("get student fee summary", _work, entity_ref=student_id, scope=scope)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_structure(
        self,
        scope: TenantScope,
        structure_id: UUID,
        for_update: bool = False,
    ) -> StudentFeeStructure:
        structure = self.repository.get_in_scope(scope.org_id, scope.branch_id, structure_id, for_update=for_update)
        if structure is None:
            raise NotFoundError("Student fee structure", structure_id)
        return structure
