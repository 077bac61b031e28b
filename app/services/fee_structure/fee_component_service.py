"""
Fee Component Service

Organization-scoped catalog of chargeable fee components. Components are
never deleted; deactivation keeps historical line items resolvable.
"""

from typing import Any, List, Mapping, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateComponentError, NotFoundError
from app.models.fee_structure import FeeComponent
from app.repositories.fee_structure import FeeComponentRepository
from app.schemas.common.pagination import PaginatedResponse, PaginationParams
from app.schemas.common.tenant import TenantScope
from app.schemas.fee_structure.fee_component import (
    FeeComponentCreate,
    FeeComponentFilter,
    FeeComponentResponse,
    FeeComponentUpdate,
)
from app.services.base import BaseService, ServiceResult


class FeeComponentService(BaseService[FeeComponentRepository]):

    def __init__(self, db_session: Session, repository: Optional[FeeComponentRepository] = None):
        super().__init__(repository or FeeComponentRepository(db_session), db_session)

    def list_components(
        self,
        scope: TenantScope,
        filters: Optional[FeeComponentFilter] = None,
        pagination: Optional[PaginationParams] = None,
    ) -> ServiceResult[PaginatedResponse[FeeComponentResponse]]:
        """Page through components, ordered by type then name."""
        filters = filters or FeeComponentFilter()
        pagination = pagination or PaginationParams()

        def _work() -> PaginatedResponse[FeeComponentResponse]:
            items, total = self.repository.list_page(
                scope.org_id,
                is_active=filters.is_active,
                component_type=filters.type,
                skip=pagination.offset,
                limit=pagination.limit,
            )
            return PaginatedResponse[FeeComponentResponse].create(
                items=[FeeComponentResponse.model_validate(c) for c in items],
                total_items=total,
                page=pagination.page,
                page_size=pagination.page_size,
            )

        return self._run("list fee components", _work, scope=scope)

    def list_all_active(self, scope: TenantScope) -> ServiceResult[List[FeeComponent]]:
        """All active components of the org, for dropdowns."""
        return self._run("list active fee components", lambda: self.repository.list_active(scope.org_id), scope=scope)

    def get_component(self, scope: TenantScope, component_id: UUID) -> ServiceResult[FeeComponent]:
        return self._run(
            "get fee component",
            lambda: self._require_component(scope, component_id),
            entity_ref=component_id,
            scope=scope,
        )

    def create_component(
        self,
        scope: TenantScope,
        data: Union[FeeComponentCreate, Mapping[str, Any]],
    ) -> ServiceResult[FeeComponent]:
        def _work() -> FeeComponent:
            request = self._validate_input(FeeComponentCreate, data)
            if self.repository.find_by_name(scope.org_id, request.type, request.name) is not None:
                raise DuplicateComponentError(request.name, request.type.value)

            component = self.repository.create(
                {
                    "org_id": scope.org_id,
                    "name": request.name,
                    "type": request.type,
                    "description": request.description,
                    "is_active": True,
                }
            )
            self._logger.info(
                "Fee component created",
                extra={
                    "component_id": str(component.id),
                    "component_type": component.type.value,
                    "org_id": str(scope.org_id),
                },
            )
            return component

        return self._run("create fee component", _work, message="Fee component created", scope=scope)

    def update_component(
        self,
        scope: TenantScope,
        component_id: UUID,
        data: Union[FeeComponentUpdate, Mapping[str, Any]],
    ) -> ServiceResult[FeeComponent]:
        def _work() -> FeeComponent:
            request = self._validate_input(FeeComponentUpdate, data)
            component = self._require_component(scope, component_id)
            changes = request.model_dump(exclude_unset=True)

            if changes.get("name") and changes["name"] != component.name:
                clash = self.repository.find_by_name(
                    scope.org_id, component.type, changes["name"], exclude_id=component.id
                )
                if clash is not None:
                    raise DuplicateComponentError(changes["name"], component.type.value)

            # name and is_active are non-nullable
            for key in ("name", "is_active"):
                if key in changes and changes[key] is None:
                    changes.pop(key)

            component = self.repository.update(component, changes)
            self._logger.info(
                "Fee component updated",
                extra={"component_id": str(component.id), "fields": sorted(changes), "org_id": str(scope.org_id)},
            )
            return component

        return self._run("update fee component", _work, entity_ref=component_id, message="Fee component updated", scope=scope)

    def deactivate_component(self, scope: TenantScope, component_id: UUID) -> ServiceResult[FeeComponent]:
        """Soft delete; existing line items keep referencing the component."""

        def _work() -> FeeComponent:
            component = self.repository.update(self._require_component(scope, component_id), {"is_active": False})
            self._logger.info(
                "Fee component deactivated",
                extra={"component_id": str(component.id), "org_id": str(scope.org_id)},
            )
            return component

        return self._run("deactivate fee component", _work, entity_ref=component_id, message="Fee component deactivated", scope=scope)

    def _require_component(self, scope: TenantScope, component_id: UUID) -> FeeComponent:
        component = self.repository.get_in_org(scope.org_id, component_id)
        if component is None:
            raise NotFoundError("Fee component", component_id)
        return component
