"""Batch (class section / coaching group) model."""

from uuid import UUID

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel, TimestampMixin


class Batch(TimestampMixin, BaseModel):
    """A group of students taught together within a branch."""

    __tablename__ = "batches"

    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    branch_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    students = relationship(
        "Student",
        back_populates="batch",
        lazy="select",
    )
