"""
Batch Fee Structure Model

Batch-level fee template that student fee structures are copied from.
"""

from typing import List
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import ActiveFlagMixin, BaseModel, TimestampMixin


class BatchFeeStructure(ActiveFlagMixin, TimestampMixin, BaseModel):
    """Default fee line items for every student of a batch in a session."""

    __tablename__ = "batch_fee_structures"

    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    branch_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    batch_id: Mapped[UUID] = mapped_column(
        ForeignKey("batches.id", ondelete="CASCADE"),
        nullable=False,
    )
    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("academic_sessions.id", ondelete="RESTRICT"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    line_items: Mapped[List["BatchFeeLineItem"]] = relationship(
        "BatchFeeLineItem",
        back_populates="structure",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BatchFeeLineItem.position",
    )
    batch = relationship("Batch", lazy="select")
    session = relationship("AcademicSession", lazy="select")

    __table_args__ = (
        UniqueConstraint("batch_id", "session_id", name="uq_batch_fee_structure_batch_session"),
        CheckConstraint("total_amount >= 0", name="ck_batch_fee_structure_total_non_negative"),
    )


class BatchFeeLineItem(BaseModel):
    """One component charge within a batch fee template."""

    __tablename__ = "batch_fee_line_items"

    structure_id: Mapped[UUID] = mapped_column(
        ForeignKey("batch_fee_structures.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fee_component_id: Mapped[UUID] = mapped_column(
        ForeignKey("fee_components.id", ondelete="RESTRICT"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    amount: Mapped[int] = mapped_column(Integer, nullable=False)

    structure = relationship("BatchFeeStructure", back_populates="line_items")
    fee_component = relationship("FeeComponent", lazy="joined")

    __table_args__ = (
        UniqueConstraint("structure_id", "fee_component_id", name="uq_batch_fee_line_item_component"),
        CheckConstraint("amount > 0", name="ck_batch_fee_line_item_amount_positive"),
    )
