"""Database session management."""
import time
from typing import Any, Dict, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.config.settings import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

SLOW_QUERY_SECONDS = 0.5


def build_engine(url: str, **overrides: Any) -> Engine:
    """
    Create an engine for the given URL.

    Pool sizing only applies to server databases; SQLite uses its own pools.
    """
    kwargs: Dict[str, Any] = {
        "pool_pre_ping": True,
        "echo": settings.DB_ECHO,
        "connect_args": dict(settings.DB_CONNECT_ARGS),
    }
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_OVERFLOW,
            pool_recycle=3600,
        )
    kwargs.update(overrides)
    return create_engine(url, **kwargs)


engine = build_engine(settings.get_database_url())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Start the query timer"""
    conn.info.setdefault('query_start_time', []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Stop the query timer and log slow queries"""
    total_time = time.time() - conn.info['query_start_time'].pop()

    if total_time > SLOW_QUERY_SECONDS:
        logger.warning(
            f"Slow query detected ({total_time:.4f}s): {statement[:100]}...",
        )


def get_db() -> Generator[Session, None, None]:
    """
    Yield a database session and close it afterwards.

    Usage:
        for db in get_db():
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
