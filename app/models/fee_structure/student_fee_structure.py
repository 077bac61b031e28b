"""
Student Fee Structure Model

Per-student, per-session fee aggregate and the line items it owns.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import (
    BaseModel,
    CustomDiscountType,
    FeeStructureSource,
    TimestampMixin,
)


class StudentFeeStructure(TimestampMixin, BaseModel):
    """
    Student Fee Structure Model

    Aggregate root consumed by installment generation and dashboards.
    ``gross_amount``, ``scholarship_amount``, ``custom_discount_amount`` and
    ``net_amount`` are derived snapshots; only the fee structure and
    recalculation services write them.
    """

    __tablename__ = "student_fee_structures"

    student_id: Mapped[UUID] = mapped_column(
        ForeignKey("students.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("academic_sessions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    source: Mapped[FeeStructureSource] = mapped_column(
        Enum(FeeStructureSource, name="fee_structure_source_enum"),
        nullable=False,
    )
    batch_fee_structure_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("batch_fee_structures.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Amounts in minor currency units
    gross_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    scholarship_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    custom_discount_type: Mapped[Optional[CustomDiscountType]] = mapped_column(
        Enum(CustomDiscountType, name="custom_discount_type_enum"),
        nullable=True,
    )
    custom_discount_value: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    custom_discount_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    custom_discount_remarks: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    net_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    remarks: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    line_items: Mapped[List["StudentFeeLineItem"]] = relationship(
        "StudentFeeLineItem",
        back_populates="structure",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="StudentFeeLineItem.position",
    )
    student = relationship("Student", lazy="select")
    session = relationship("AcademicSession", lazy="select")
    batch_fee_structure = relationship("BatchFeeStructure", lazy="select")

    __table_args__ = (
        UniqueConstraint("student_id", "session_id", name="uq_student_fee_structure_student_session"),
        CheckConstraint("gross_amount >= 0", name="ck_student_fee_structure_gross_non_negative"),
        CheckConstraint("net_amount >= 0", name="ck_student_fee_structure_net_non_negative"),
        CheckConstraint("net_amount <= gross_amount", name="ck_student_fee_structure_net_le_gross"),
    )

    @property
    def has_custom_discount(self) -> bool:
        return self.custom_discount_type is not None

    def line_item_for(self, fee_component_id: UUID) -> Optional["StudentFeeLineItem"]:
        """Return the line item charging the given component, if any."""
        for item in self.line_items:
            if item.fee_component_id == fee_component_id:
                return item
        return None

    def __repr__(self) -> str:
        return (
            f"<StudentFeeStructure(id={self.id}, student_id={self.student_id}, "
            f"gross={self.gross_amount}, net={self.net_amount})>"
        )


class StudentFeeLineItem(BaseModel):
    """One fee component's charge within a student's fee structure."""

    __tablename__ = "student_fee_line_items"

    structure_id: Mapped[UUID] = mapped_column(
        ForeignKey("student_fee_structures.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    fee_component_id: Mapped[UUID] = mapped_column(
        ForeignKey("fee_components.id", ondelete="RESTRICT"),
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    original_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    adjusted_amount: Mapped[int] = mapped_column(Integer, nullable=False)
    waived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    waiver_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    structure = relationship("StudentFeeStructure", back_populates="line_items")
    fee_component = relationship("FeeComponent", lazy="joined")

    __table_args__ = (
        UniqueConstraint("structure_id", "fee_component_id", name="uq_student_fee_line_item_component"),
        CheckConstraint("original_amount >= 0", name="ck_student_fee_line_item_original_non_negative"),
        CheckConstraint("adjusted_amount >= 0", name="ck_student_fee_line_item_adjusted_non_negative"),
    )
