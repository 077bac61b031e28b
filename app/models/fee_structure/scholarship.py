"""
Scholarship Model

Organization-scoped definition of a reusable discount rule.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import (
    ActiveFlagMixin,
    BaseModel,
    ScholarshipBasis,
    ScholarshipType,
    TimestampMixin,
)


class Scholarship(ActiveFlagMixin, TimestampMixin, BaseModel):
    """
    Scholarship Model

    ``value`` is a whole percentage (0-100) for percentage scholarships and
    an amount in minor currency units otherwise. ``max_amount`` caps
    percentage scholarships only. ``component_id`` is set iff the type is
    component_waiver.
    """

    __tablename__ = "scholarships"

    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[ScholarshipType] = mapped_column(
        Enum(ScholarshipType, name="scholarship_type_enum"),
        nullable=False,
    )
    basis: Mapped[ScholarshipBasis] = mapped_column(
        Enum(ScholarshipBasis, name="scholarship_basis_enum"),
        nullable=False,
        index=True,
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    component_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("fee_components.id", ondelete="RESTRICT"),
        nullable=True,
    )
    max_amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    fee_component = relationship("FeeComponent", lazy="joined")

    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_scholarship_org_name"),
        CheckConstraint("value > 0", name="ck_scholarship_value_positive"),
        CheckConstraint(
            "max_amount IS NULL OR max_amount > 0",
            name="ck_scholarship_max_amount_positive",
        ),
    )

    def __repr__(self) -> str:
        return f"<Scholarship(id={self.id}, name={self.name!r}, type={self.type}, value={self.value})>"
