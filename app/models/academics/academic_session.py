"""Academic session (school year) model."""

from uuid import UUID

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel, TimestampMixin


class AcademicSession(TimestampMixin, BaseModel):
    """An academic session scoped to an organization, e.g. "2025-26"."""

    __tablename__ = "academic_sessions"

    org_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("org_id", "name", name="uq_academic_session_org_name"),
    )
