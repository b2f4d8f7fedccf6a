"""
Base model configuration for SQLAlchemy ORM.

Provides the declarative base, an abstract model with shared helpers,
and custom column types used across the domain models.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, TypeDecorator
from sqlalchemy.orm import declarative_base

# Create declarative base
Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column.

    Values are normalized to UTC on write and always come back aware,
    including on backends such as SQLite that drop tzinfo.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        """Normalize to naive UTC before storing."""
        if value is None:
            return value
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        """Attach UTC to values read back."""
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class BaseModel(Base):
    """
    Abstract base model with common methods.

    Primary keys are declared on each model because identities differ
    (UUID strings for users, integer sequences for complaint records).
    """

    __abstract__ = True

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
            elif isinstance(value, Enum):
                result[column.key] = value.value
            else:
                result[column.key] = value

        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)!r}>"


def utcnow() -> datetime:
    """Column default for timestamps written outside the service layer."""
    return datetime.now(timezone.utc)


__all__ = ["Base", "BaseModel", "UTCDateTime", "utcnow"]
