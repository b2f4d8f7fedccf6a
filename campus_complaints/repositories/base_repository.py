"""
Base repository with the query primitives shared by domain repositories.

Repositories never commit: the owning service or unit of work decides
when a transaction ends.
"""

from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from campus_complaints.config.logging import get_logger
from campus_complaints.core.exceptions import ResourceNotFoundError
from campus_complaints.models.base import BaseModel
from campus_complaints.repositories.specifications import Specification

logger = get_logger(__name__)

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository over one model class.

    Subclasses bind ``model`` and add domain-specific finders.
    """

    model: Type[ModelType]

    def __init__(self, db: Session, model: Optional[Type[ModelType]] = None):
        """
        Initialize repository.

        Args:
            db: Database session
            model: SQLAlchemy model class (defaults to the subclass binding)
        """
        if model is not None:
            self.model = model
        self.db = db

    # ==================== Read Operations ====================

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        """
        Get entity by primary key.

        Args:
            entity_id: Primary key value

        Returns:
            Entity or None if not found
        """
        return self.db.get(self.model, entity_id)

    def get_or_raise(self, entity_id: Any) -> ModelType:
        """
        Get entity by primary key or raise.

        Raises:
            ResourceNotFoundError: If no row has this key
        """
        entity = self.get_by_id(entity_id)
        if entity is None:
            raise ResourceNotFoundError(self.model.__name__, entity_id)
        return entity

    def find_by_specification(
        self,
        spec: Specification,
        order_by: Sequence[Any] = (),
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """
        Find entities matching a specification.

        Args:
            spec: Specification to evaluate in the database
            order_by: ORDER BY clauses
            limit: Maximum rows to return

        Returns:
            Matching entities
        """
        stmt = select(self.model).where(spec.to_expression(self.model))
        if order_by:
            stmt = stmt.order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.scalars(stmt).unique())

    def count_by_specification(self, spec: Specification) -> int:
        """Count entities matching a specification."""
        stmt = select(func.count()).select_from(self.model).where(spec.to_expression(self.model))
        return self.db.scalar(stmt) or 0

    # ==================== Write Operations ====================

    def add(self, entity: ModelType) -> ModelType:
        """
        Stage a new entity and flush so generated keys are available.

        Raises:
            IntegrityError: When a constraint rejects the row
        """
        try:
            self.db.add(entity)
            self.db.flush()
        except IntegrityError:
            logger.warning(f"Integrity error while adding {self.model.__name__}")
            raise
        except SQLAlchemyError as e:
            logger.error(f"Add failed for {self.model.__name__}: {e}", exc_info=True)
            raise

        logger.debug(f"Added {self.model.__name__} with id: {getattr(entity, 'id', None)}")
        return entity


__all__ = ["BaseRepository", "ModelType"]
