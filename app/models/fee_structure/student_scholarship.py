"""
Student Scholarship Model

Grant of a scholarship to a student for one academic session.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from app.models.base import BaseModel, TimestampMixin


class StudentScholarship(TimestampMixin, BaseModel):
    """
    Student Scholarship Model

    Refers to its fee structure through (student_id, session_id) only.
    ``discount_amount`` is a cached projection written exclusively by the
    recalculation service.
    """

    __tablename__ = "student_scholarships"

    student_id: Mapped[UUID] = mapped_column(
        ForeignKey("students.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    scholarship_id: Mapped[UUID] = mapped_column(
        ForeignKey("scholarships.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    session_id: Mapped[UUID] = mapped_column(
        ForeignKey("academic_sessions.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    discount_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    approved_by_id: Mapped[UUID] = mapped_column(nullable=False)
    approved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    remarks: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    scholarship = relationship("Scholarship", lazy="joined")
    student = relationship("Student", lazy="select")
    session = relationship("AcademicSession", lazy="select")

    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "scholarship_id",
            "session_id",
            name="uq_student_scholarship_student_scholarship_session",
        ),
    )
