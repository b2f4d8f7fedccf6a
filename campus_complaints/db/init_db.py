"""Database initialization utilities."""
import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from campus_complaints.models import Base

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    """
    Create all tables that do not exist yet.

    Note: This is suitable for development/testing only.
    For production, manage the schema with migrations.
    """
    try:
        existing_tables = set(inspect(engine).get_table_names())
        Base.metadata.create_all(bind=engine)
        created = set(Base.metadata.tables) - existing_tables
        if created:
            logger.info(f"Created tables: {', '.join(sorted(created))}")
        else:
            logger.info(f"Database already initialized with {len(existing_tables)} tables")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise

