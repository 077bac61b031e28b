# app/db/init_db.py
"""Database initialization utilities."""
from sqlalchemy import inspect

from app.core.logging import get_logger, setup_logging
from app.db.base import Base
from app.db.session import engine

logger = get_logger(__name__)


def init_db() -> None:
    """
    Initialize the database by creating all tables.

    Note: This is suitable for development/testing only.
    For production, use Alembic migrations instead.
    """
    inspector = inspect(engine)
    existing_tables = inspector.get_table_names()

    if existing_tables:
        logger.info(f"Database already initialized with {len(existing_tables)} tables")
    else:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")


def drop_db() -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Only for development/testing purposes.
    """
    Base.metadata.drop_all(bind=engine)
    logger.warning("All database tables dropped")


if __name__ == "__main__":
    setup_logging()
    init_db()
