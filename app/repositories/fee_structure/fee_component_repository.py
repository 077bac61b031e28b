"""
Fee Component Repository

Organization-scoped queries over the fee component catalog.
"""

from typing import Collection, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.base import FeeComponentType
from app.models.fee_structure import FeeComponent
from app.repositories.base.base_repository import BaseRepository


class FeeComponentRepository(BaseRepository[FeeComponent]):

    def __init__(self, session: Session):
        super().__init__(session, FeeComponent)

    def get_in_org(self, org_id: UUID, component_id: UUID) -> Optional[FeeComponent]:
        return self.find_one({"id": component_id, "org_id": org_id})

    def find_by_name(
        self,
        org_id: UUID,
        component_type: FeeComponentType,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[FeeComponent]:
        """Find a component with the same (org, type, name), ignoring ``exclude_id``."""
        stmt = self._base_select().where(
            FeeComponent.org_id == org_id,
            FeeComponent.type == component_type,
            FeeComponent.name == name,
        )
        if exclude_id is not None:
            stmt = stmt.where(FeeComponent.id != exclude_id)
        return self._execute_one_or_none(stmt.limit(1))

    def list_page(
        self,
        org_id: UUID,
        *,
        is_active: Optional[bool],
        component_type: Optional[FeeComponentType],
        skip: int,
        limit: int,
    ) -> Tuple[Sequence[FeeComponent], int]:
        return self.paginate(
            skip=skip,
            limit=limit,
            filters={"org_id": org_id, "is_active": is_active, "type": component_type},
            order_by=(FeeComponent.type, FeeComponent.name),
        )

    def list_active(self, org_id: UUID) -> List[FeeComponent]:
        return list(
            self.get_multi(
                limit=None,
                filters={"org_id": org_id, "is_active": True},
                order_by=(FeeComponent.type, FeeComponent.name),
            )
        )

    def get_active_by_ids(self, org_id: UUID, component_ids: Collection[UUID]) -> List[FeeComponent]:
        """Active components of the org among ``component_ids``; foreign or inactive ids are dropped."""
        if not component_ids:
            return []
        stmt = self._base_select().where(
            FeeComponent.org_id == org_id,
            FeeComponent.is_active.is_(True),
            FeeComponent.id.in_(list(component_ids)),
        )
        return list(self._execute_scalars(stmt))
