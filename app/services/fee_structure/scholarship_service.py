"""
Scholarship Service

Organization-scoped catalog of scholarship definitions:
- Creation with discount configuration validation
- Updates that keep every assignment's cached discount in step
- Soft deactivation
"""

from typing import Any, List, Mapping, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateScholarshipError, NotFoundError
from app.models.base import ScholarshipType
from app.models.fee_structure import Scholarship
from app.repositories.fee_structure import FeeComponentRepository, ScholarshipRepository
from app.schemas.common.pagination import PaginatedResponse, PaginationParams
from app.schemas.common.tenant import TenantScope
from app.schemas.fee_structure.scholarship import (
    ScholarshipCreate,
    ScholarshipFilter,
    ScholarshipResponse,
    ScholarshipUpdate,
)
from app.services.base import BaseService, ServiceResult
from app.services.fee_structure.discount_calculator import validate_discount_config
from app.services.fee_structure.recalculation_service import RecalculationService


class ScholarshipService(BaseService[ScholarshipRepository]):
    """
    Scholarship catalog management.

    Changing ``value`` or ``max_amount`` recalculates every structure that
    holds an active assignment of the scholarship, in the same unit of work.
    Deactivated scholarships keep applying to existing assignments but can
    no longer be assigned.
    """

    def __init__(
        self,
        db_session: Session,
        repository: Optional[ScholarshipRepository] = None,
        recalculation_service: Optional[RecalculationService] = None,
    ):
        super().__init__(repository or ScholarshipRepository(db_session), db_session)
        self.components = FeeComponentRepository(db_session)
        self.recalculation = recalculation_service or RecalculationService(db_session)

    def list_scholarships(
        self,
        scope: TenantScope,
        filters: Optional[ScholarshipFilter] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> ServiceResult[PaginatedResponse[ScholarshipResponse]]:
        """Page through scholarships, ordered by basis then name."""
        filters = filters or ScholarshipFilter()
        pagination = pagination or PaginationParams()

        def _work() -> PaginatedResponse[ScholarshipResponse]:
            items, total = self.repository.list_page(
                scope.org_id,
                is_active=filters.is_active,
                scholarship_type=filters.type,
                basis=filters.basis,
                skip=pagination.offset,
                limit=pagination.limit,
            )
            return PaginatedResponse[ScholarshipResponse].create(
                items=[ScholarshipResponse.model_validate(s) for s in items],
                total_items=total,
                page=pagination.page,
                page_size=pagination.page_size,
            )

        return self._run("list scholarships", _work, scope=scope)

    def list_all_active(self, scope: TenantScope) -> ServiceResult[List[Scholarship]]:
        return self._run("list active scholarships", lambda: self.repository.list_active(scope.org_id), scope=scope)

    def get_scholarship(self, scope: TenantScope, scholarship_id: UUID) -> ServiceResult[Scholarship]:
        return self._run(
            "get scholarship",
            lambda: self._require_scholarship(scope, scholarship_id),
            entity_ref=scholarship_id,
            scope=scope,
        )

    def create_scholarship(
        self,
        scope: TenantScope,
        data: Union[ScholarshipCreate, Mapping[str, Any]],
    ) -> ServiceResult[Scholarship]:
        """
        Create a scholarship definition.

        A component_waiver must reference an active fee component of the
        same organization.
        """

        def _work() -> Scholarship:
            request = self._validate_input(ScholarshipCreate, data)
            validate_discount_config(request.type, request.value, request.max_amount, request.component_id)

            if self.repository.find_by_name(scope.org_id, request.name) is not None:
                raise DuplicateScholarshipError(request.name)

            if request.type == ScholarshipType.COMPONENT_WAIVER:
                component = self.components.get_in_org(scope.org_id, request.component_id)
                if component is None or not component.is_active:
                    raise NotFoundError("Fee component", request.component_id)

            scholarship = self.repository.create(
                {
                    "org_id": scope.org_id,
                    "name": request.name,
                    "type": request.type,
                    "basis": request.basis,
                    "value": request.value,
                    "component_id": request.component_id,
                    "max_amount": request.max_amount,
                    "description": request.description,
                    "is_active": True,
                }
            )
            self._logger.info(
                "Scholarship created",
                extra={
                    "scholarship_id": str(scholarship.id),
                    "scholarship_type": scholarship.type.value,
                    "value": scholarship.value,
                    "org_id": str(scope.org_id),
                },
            )
            return scholarship

        return self._run("create scholarship", _work, message="Scholarship created", scope=scope)

    def update_scholarship(
        self,
        scope: TenantScope,
        scholarship_id: UUID,
        data: Union[ScholarshipUpdate, Mapping[str, Any]],
    ) -> ServiceResult[Scholarship]:
        def _work() -> Scholarship:
            request = self._validate_input(ScholarshipUpdate, data)
            scholarship = self._require_scholarship(scope, scholarship_id)
            changes = request.model_dump(exclude_unset=True)

            for key in ("name", "value", "is_active"):
                if key in changes and changes[key] is None:
                    changes.pop(key)

            if "name" in changes and changes["name"] != scholarship.name:
                if self.repository.find_by_name(scope.org_id, changes["name"], exclude_id=scholarship.id) is not None:
                    raise DuplicateScholarshipError(changes["name"])

            validate_discount_config(
                scholarship.type,
                changes.get("value", scholarship.value),
                changes.get("max_amount", scholarship.max_amount),
                scholarship.component_id,
            )

            affects_discount = any(
                key in changes and changes[key] != getattr(scholarship, key)
                for key in ("value", "max_amount")
            )

            scholarship = self.repository.update(scholarship, changes)
            refreshed = self.recalculation.recalculate_for_scholarship(scholarship.id) if affects_discount else 0

            self._logger.info(
                "Scholarship updated",
                extra={
                    "scholarship_id": str(scholarship.id),
                    "fields": sorted(changes),
                    "structures_recalculated": refreshed,
                    "org_id": str(scope.org_id),
                },
            )
            return scholarship

        return self._run("update scholarship", _work, entity_ref=scholarship_id, message="Scholarship updated", scope=scope)

    def deactivate_scholarship(self, scope: TenantScope, scholarship_id: UUID) -> ServiceResult[Scholarship]:
        def _work() -> Scholarship:
            scholarship = self.repository.update(self._require_scholarship(scope, scholarship_id), {"is_active": False})
            self._logger.info(
                "Scholarship deactivated",
                extra={"scholarship_id": str(scholarship.id), "org_id": str(scope.org_id)},
            )
            return scholarship

        return self._run("deactivate scholarship", _work, entity_ref=scholarship_id, message="Scholarship deactivated", scope=scope)

    def _require_scholarship(self, scope: TenantScope, scholarship_id: UUID) -> Scholarship:
        scholarship = self.repository.get_in_org(scope.org_id, scholarship_id)
        if scholarship is None:
            raise NotFoundError("Scholarship", scholarship_id)
        return scholarship
