"""
Batch Fee Structure Service

Batch-level fee templates and their application to the students of the
batch. Applying a template goes through the regular student fee structure
create path, so scholarships already assigned to a student are reflected
in the structure it receives.
"""

from typing import Any, List, Mapping, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError, ValidationError
from app.models.base import FeeStructureSource
from app.models.fee_structure import BatchFeeStructure
from app.repositories.academics import StudentRepository
from app.repositories.fee_structure import BatchFeeStructureRepository
from app.schemas.common.tenant import TenantScope
from app.schemas.fee_structure.batch_fee_structure import ApplyTemplateResult, BatchFeeStructureInput
from app.services.base import BaseService, ServiceResult
from app.services.fee_structure.student_fee_structure_service import (
    StudentFeeStructureService,
    template_line_items,
)
from app.services.fee_structure.tenant_lookup import TenantLookup


class BatchFeeStructureService(BaseService[BatchFeeStructureRepository]):

    def __init__(
        self,
        db_session: Session,
        repository: Optional[BatchFeeStructureRepository] = None,
        structure_service: Optional[StudentFeeStructureService] = None,
    ):
        super().__init__(repository or BatchFeeStructureRepository(db_session), db_session)
        self.lookup = TenantLookup(db_session)
        self.students = StudentRepository(db_session)
        self.structures = structure_service or StudentFeeStructureService(db_session)

    def create_or_update(
        self,
        scope: TenantScope,
        data: Union[BatchFeeStructureInput, Mapping[str, Any]],
    ) -> ServiceResult[BatchFeeStructure]:
        """
        Create the template for (batch, session), or replace its name and
        line items if one exists. Student structures already created from
        it are not touched; re-apply with ``overwrite_existing`` for that.
        """

        def _work() -> BatchFeeStructure:
            request = self._validate_input(BatchFeeStructureInput, data)
            batch = self.lookup.batch(scope, request.batch_id)
            self.lookup.session(scope, request.session_id)
            self.lookup.active_components(scope, (item.fee_component_id for item in request.line_items))

            rows = [
                {"fee_component_id": item.fee_component_id, "amount": item.amount}
                for item in request.line_items
            ]
            total = sum(row["amount"] for row in rows)

            template = self.repository.get_for_batch(batch.id, request.session_id)
            created = template is None
            if created:
                template = self.repository.create(
                    {
                        "org_id": scope.org_id,
                        "branch_id": scope.branch_id,
                        "batch_id": batch.id,
                        "session_id": request.session_id,
                        "name": request.name,
                        "total_amount": total,
                        "is_active": True,
                    }
                )
            else:
                template = self.repository.update(template, {"name": request.name, "total_amount": total})
            self.repository.replace_line_items(template, rows)

            self._logger.info(
                "Batch fee structure created" if created else "Batch fee structure updated",
                extra={
                    "template_id": str(template.id),
                    "batch_id": str(batch.id),
                    "session_id": str(request.session_id),
                    "org_id": str(scope.org_id),
                    "total_amount": total,
                },
            )
            return template

        return self._run("save batch fee structure", _work, message="Batch fee structure saved", scope=scope)

    def get_template(self, scope: TenantScope, template_id: UUID) -> ServiceResult[BatchFeeStructure]:
        return self._run(
            "get batch fee structure",
            lambda: self.require_template(scope, template_id),
            entity_ref=template_id,
            scope=scope,
        )

    def get_for_batch(
        self,
        scope: TenantScope,
        batch_id: UUID,
        session_id: UUID,
    ) -> ServiceResult[Optional[BatchFeeStructure]]:
        def _work() -> Optional[BatchFeeStructure]:
            self.lookup.batch(scope, batch_id)
            return self.repository.get_for_batch(batch_id, session_id)

        return self._run("get batch fee structure", _work, entity_ref=batch_id, scope=scope)

    def list_templates(
        self,
        scope: TenantScope,
        session_id: Optional[UUID] = None,
    ) -> ServiceResult[List[BatchFeeStructure]]:
        return self._run(
            "list batch fee structures",
            lambda: self.repository.list_in_scope(scope.org_id, scope.branch_id, session_id),
            scope=scope,
        )

    def apply_to_students(
        self,
        scope: TenantScope,
        template_id: UUID,
        overwrite_existing: bool = False,
    ) -> ServiceResult[ApplyTemplateResult]:
        """
        Give every active student of the batch a structure copied from the template.

        Students who already have a structure for the session are skipped,
        unless ``overwrite_existing`` is set: then their line items are
        replaced and the structure goes back to ``source=template``. All
        students are processed in one unit of work.
        """

        def _work() -> ApplyTemplateResult:
            template = self.require_template(scope, template_id)
            if not template.is_active:
                raise ValidationError(
                    "Batch fee structure is inactive",
                    field_errors={"template_id": ["template is inactive"]},
                )

            line_items = template_line_items(template)
            applied = skipped = 0

            for student in self.students.list_active_in_batch(template.batch_id):
                existing = self.structures.repository.get_for_student_session(
                    student.id, template.session_id, for_update=True
                )
                if existing is None:
                    self.structures.create_in_uow(
                        scope,
                        student_id=student.id,
                        session_id=template.session_id,
                        line_items=line_items,
                        source=FeeStructureSource.TEMPLATE,
                        batch_fee_structure_id=template.id,
                    )
                    applied += 1
                elif overwrite_existing:
                    self.structures.replace_line_items_in_uow(
                        scope,
                        existing,
                        line_items,
                        source=FeeStructureSource.TEMPLATE,
                        batch_fee_structure_id=template.id,
                    )
                    applied += 1
                else:
                    skipped += 1

            self._logger.info(
                "Batch fee structure applied",
                extra={
                    "template_id": str(template.id),
                    "batch_id": str(template.batch_id),
                    "session_id": str(template.session_id),
                    "org_id": str(scope.org_id),
                    "applied": applied,
                    "skipped": skipped,
                },
            )
            return ApplyTemplateResult(
                applied=applied,
                skipped=skipped,
                message=f"Applied fee structure to {applied} students, skipped {skipped}",
            )

        return self._run("apply batch fee structure", _work, entity_ref=template_id, scope=scope)

    def require_template(self, scope: TenantScope, template_id: UUID) -> BatchFeeStructure:
        template = self.repository.get_in_scope(scope.org_id, scope.branch_id, template_id)
        if template is None:
            raise NotFoundError("Batch fee structure", template_id)
        return template
