"""Database engine, sessions, schema creation and seeding."""

from campus_complaints.db.session import (
    SessionFactory,
    create_db_engine,
    create_session_factory,
)
from campus_complaints.db.init_db import init_db

__all__ = [
    "SessionFactory",
    "create_db_engine",
    "create_session_factory",
    "init_db",
]
