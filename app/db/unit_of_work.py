"""
Unit of work for fee engine mutations.

Every mutating operation runs inside exactly one unit of work: all writes
commit together or none do. A unit of work opened while another one is
already active on the same session joins it instead of committing early,
which lets services call each other (e.g. recalculation from inside an
assignment) without splitting the transaction.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional, TypeVar
from uuid import uuid4

from sqlalchemy.orm import Session

from app.core.logging import get_logger

T = TypeVar("T")

_DEPTH_KEY = "unit_of_work_depth"


@dataclass
class TransactionContext:
    """Context information for a unit of work."""

    transaction_id: str = field(default_factory=lambda: str(uuid4()))
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    joined: bool = False
    committed: bool = False
    rolled_back: bool = False
    completed_at: Optional[datetime] = None
    error: Optional[Exception] = None


class UnitOfWork:
    """
    Commit-all-or-nothing wrapper around a SQLAlchemy session.

    Example:
        uow = UnitOfWork(db)
        with uow.begin():
            repo.create(...)
            recalculation.recalculate_in_place(...)

        total = uow.run(lambda session: do_work(session))
    """

    def __init__(self, session: Session):
        self.session = session
        self._logger = get_logger(self.__class__.__name__)

    @property
    def is_active(self) -> bool:
        """True while some unit of work is open on this session."""
        return self.session.info.get(_DEPTH_KEY, 0) > 0

    @contextmanager
    def begin(self) -> Iterator[TransactionContext]:
        depth = self.session.info.get(_DEPTH_KEY, 0)
        ctx = TransactionContext(joined=depth > 0)
        self.session.info[_DEPTH_KEY] = depth + 1

        if ctx.joined:
            try:
                yield ctx
            finally:
                self.session.info[_DEPTH_KEY] = depth
            return

        self._logger.debug(
            f"Unit of work started: {ctx.transaction_id}",
            extra={"transaction_id": ctx.transaction_id},
        )
        try:
            yield ctx
            self.session.flush()
            self.session.commit()
            ctx.committed = True
            self._logger.debug(
                f"Unit of work committed: {ctx.transaction_id}",
                extra={"transaction_id": ctx.transaction_id},
            )
        except Exception as exc:
            ctx.error = exc
            self._rollback(ctx, exc)
            raise
        finally:
            self.session.info[_DEPTH_KEY] = depth
            ctx.completed_at = datetime.now(timezone.utc)

    def run(self, callback: Callable[[Session], T]) -> T:
        """Run ``callback`` inside a unit of work and return its result."""
        with self.begin():
            return callback(self.session)

    def _rollback(self, ctx: TransactionContext, exc: Exception) -> None:
        try:
            self.session.rollback()
            ctx.rolled_back = True
            self._logger.warning(
                f"Unit of work rolled back: {ctx.transaction_id} - {exc}",
                extra={
                    "transaction_id": ctx.transaction_id,
                    "error_type": type(exc).__name__,
                },
            )
        except Exception as rollback_exc:
            # The original exception is re-raised by the caller
            self._logger.error(
                f"Rollback failed for unit of work {ctx.transaction_id}: {rollback_exc}",
                exc_info=True,
            )
