# app/repositories/base/base_repository.py
from __future__ import annotations

from typing import Any, Dict, Generic, Iterable, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import RepositoryError
from app.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository with common CRUD and query helpers.

    - Does not commit/rollback; the unit of work manages transactions.
    - Filter dictionaries skip ``None`` values so optional filters can be
      passed straight through.
    """

    def __init__(self, session: Session, model: Type[ModelType]):
        self.session = session
        self.model = model

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _base_select(self) -> Select[tuple[ModelType]]:
        return select(self.model)

    def _apply_filters(
        self,
        stmt: Select[tuple[ModelType]],
        filters: Optional[Dict[str, Any]] = None,
    ) -> Select[tuple[ModelType]]:
        if not filters:
            return stmt

        for key, value in filters.items():
            if value is None:
                continue
            column = getattr(self.model, key, None)
            if column is None:
                continue

            if isinstance(value, (list, tuple, set)):
                stmt = stmt.where(column.in_(value))
            else:
                stmt = stmt.where(column == value)
        return stmt

    def _execute_scalars(self, stmt) -> Sequence[ModelType]:
        try:
            return self.session.execute(stmt).scalars().unique().all()
        except SQLAlchemyError as e:
            raise RepositoryError(f"{self.model.__name__} query failed: {e}") from e

    def _execute_one_or_none(self, stmt) -> Optional[ModelType]:
        try:
            return self.session.execute(stmt).scalars().unique().one_or_none()
        except SQLAlchemyError as e:
            raise RepositoryError(f"{self.model.__name__} query failed: {e}") from e

    # ------------------------------------------------------------------ #
    # Basic CRUD
    # ------------------------------------------------------------------ #
    def find_one(self, filters: Dict[str, Any]) -> Optional[ModelType]:
        stmt = self._apply_filters(self._base_select(), filters).limit(1)
        return self._execute_one_or_none(stmt)

    def get_multi(
        self,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[Any]] = None,
    ) -> Sequence[ModelType]:
        stmt = self._base_select()
        stmt = self._apply_filters(stmt, filters)

        if order_by:
            stmt = stmt.order_by(*order_by)

        if skip:
            stmt = stmt.offset(skip)
        if limit:
            stmt = stmt.limit(limit)

        return self._execute_scalars(stmt)

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        stmt = select(func.count(self.model.id))
        stmt = self._apply_filters(stmt, filters)
        try:
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise RepositoryError(f"{self.model.__name__} count failed: {e}") from e

    def paginate(
        self,
        *,
        skip: int,
        limit: int,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Iterable[Any]] = None,
    ) -> Tuple[Sequence[ModelType], int]:
        """Return one page of rows together with the total row count."""
        items = self.get_multi(skip=skip, limit=limit, filters=filters, order_by=order_by)
        return items, self.count(filters)

    def create(self, obj_in: Dict[str, Any] | ModelType) -> ModelType:
        if isinstance(obj_in, self.model):
            db_obj = obj_in
        else:
            db_obj = self.model(**obj_in)  # type: ignore[arg-type]
        self.session.add(db_obj)
        # flush to populate PK and surface constraint violations early
        self._flush()
        return db_obj

    def update(
        self,
        db_obj: ModelType,
        obj_in: Dict[str, Any],
    ) -> ModelType:
        for field, value in obj_in.items():
            if hasattr(db_obj, field) and field != "id":
                setattr(db_obj, field, value)

        self._flush()
        return db_obj

    def delete(self, db_obj: ModelType) -> None:
        self.session.delete(db_obj)
        self._flush()

    def _flush(self) -> None:
        try:
            self.session.flush()
        except SQLAlchemyError as e:
            raise RepositoryError(f"{self.model.__name__} flush failed: {e}") from e
