"""Student model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, StudentStatus, TimestampMixin


class Student(TimestampMixin, BaseModel):
    """A student enrolled in a branch of an organization."""

    __tablename__ = "students"

    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    branch_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    batch_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("batches.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    status: Mapped[StudentStatus] = mapped_column(
        Enum(StudentStatus, name="student_status_enum"),
        nullable=False,
        default=StudentStatus.ACTIVE,
        index=True,
    )

    batch = relationship("Batch", back_populates="students", lazy="select")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
