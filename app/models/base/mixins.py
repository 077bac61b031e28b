"""
SQLAlchemy model mixins for reusable functionality.

Provides mixins that mirror the schema mixins for consistent
field definitions across models.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func


class TimestampMixin:
    """
    Mixin for automatic timestamp tracking.

    Provides created_at and updated_at fields with
    automatic timezone-aware timestamp management.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        comment="Record creation timestamp (UTC)",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
        comment="Record last update timestamp (UTC)",
    )


class ActiveFlagMixin:
    """
    Mixin for soft deactivation.

    Catalog rows are referenced by historical fee snapshots, so they are
    flagged inactive instead of being deleted.
    """

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
        comment="Soft deactivation flag",
    )
