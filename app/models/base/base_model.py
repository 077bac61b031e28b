"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base and the abstract base model shared by
all fee engine tables.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Root SQLAlchemy base class."""
    pass


class BaseModel(Base):
    """
    Abstract base model with common fields and methods.

    Every table gets a UUID primary key.
    """

    __abstract__ = True

    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        comment="Primary key (UUID)",
    )

    def to_dict(self, exclude: Optional[List[str]] = None) -> Dict[str, Any]:
        """
        Convert model instance to dictionary.

        Args:
            exclude: List of field names to exclude

        Returns:
            Dictionary representation of the model
        """
        exclude = exclude or []
        result = {}

        for column in self.__table__.columns:
            if column.key in exclude:
                continue
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                result[column.key] = value.isoformat()
            elif isinstance(value, UUID):
                result[column.key] = str(value)
            else:
                result[column.key] = value

        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"
