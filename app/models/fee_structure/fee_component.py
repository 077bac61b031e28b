"""
Fee Component Model

Organization-scoped master list of chargeable items (tuition, transport, ...).
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import ActiveFlagMixin, BaseModel, FeeComponentType, TimestampMixin


class FeeComponent(ActiveFlagMixin, TimestampMixin, BaseModel):
    """
    Fee Component Model

    Identity is immutable; ``is_active`` is the only lifecycle flag.
    Line items reference components by id and never copy them.
    """

    __tablename__ = "fee_components"

    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[FeeComponentType] = mapped_column(
        Enum(FeeComponentType, name="fee_component_type_enum"),
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        UniqueConstraint("org_id", "type", "name", name="uq_fee_component_org_type_name"),
    )

    def __repr__(self) -> str:
        return f"<FeeComponent(id={self.id}, name={self.name!r}, type={self.type})>"
