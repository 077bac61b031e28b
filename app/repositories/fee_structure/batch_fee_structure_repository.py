"""
Batch Fee Structure Repository

Batch-level fee templates, scoped by organization and branch.
"""

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.fee_structure import BatchFeeLineItem, BatchFeeStructure
from app.repositories.base.base_repository import BaseRepository


class BatchFeeStructureRepository(BaseRepository[BatchFeeStructure]):

    def __init__(self, session: Session):
        super().__init__(session, BatchFeeStructure)

    def get_in_scope(self, org_id: UUID, branch_id: UUID, template_id: UUID) -> Optional[BatchFeeStructure]:
        return self.find_one({"id": template_id, "org_id": org_id, "branch_id": branch_id})

    def get_for_batch(self, batch_id: UUID, session_id: UUID) -> Optional[BatchFeeStructure]:
        return self.find_one({"batch_id": batch_id, "session_id": session_id})

    def list_in_scope(
        self,
        org_id: UUID,
        branch_id: UUID,
        session_id: Optional[UUID] = None,
    ) -> List[BatchFeeStructure]:
        return list(
            self.get_multi(
                limit=None,
                filters={"org_id": org_id, "branch_id": branch_id, "session_id": session_id},
                order_by=(BatchFeeStructure.name, BatchFeeStructure.id),
            )
        )

    def replace_line_items(
        self,
        template: BatchFeeStructure,
        line_items: Iterable[Dict[str, Any]],
    ) -> BatchFeeStructure:
        template.line_items.clear()
        self._flush()

        for position, data in enumerate(line_items):
            template.line_items.append(BatchFeeLineItem(position=position, **data))
        self._flush()
        return template
