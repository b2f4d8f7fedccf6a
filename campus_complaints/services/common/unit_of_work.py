# campus_complaints/services/common/unit_of_work.py
"""
Unit of Work pattern implementation.

Provides transaction management and repository coordination
for work that runs outside a request, such as the escalation sweep.
"""
from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Any, Callable, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_complaints.core.exceptions import BaseAppException, ErrorCode
from campus_complaints.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

TRepository = TypeVar("TRepository", bound=BaseRepository)


class TransactionError(BaseAppException):
    """Raised when a database transaction fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(
            message,
            ErrorCode.INTERNAL_ERROR,
            details={"error_type": type(original_error).__name__ if original_error else None},
        )
        self.original_error = original_error


class UnitOfWork(AbstractContextManager["UnitOfWork"]):
    """
    Unit of Work for one atomic batch of changes.

    Usage:
        >>> with UnitOfWork(session_factory) as uow:
        ...     repo = uow.get_repo(ComplaintRepository)
        ...     for complaint in repo.find_escalation_due(threshold):
        ...         ...
        ...     # Auto-commits on __exit__ if no exception
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        *,
        auto_commit: bool = True,
    ) -> None:
        """
        Initialize Unit of Work.

        Args:
            session_factory: Factory function that returns a new Session
            auto_commit: Whether to auto-commit on successful context exit
        """
        self._session_factory = session_factory
        self._auto_commit = auto_commit

        self.session: Optional[Session] = None
        self._committed: bool = False
        self._rolled_back: bool = False
        self._repo_cache: dict[Type[BaseRepository], BaseRepository] = {}

    # ------------------------------------------------------------------ #
    # Context manager protocol
    # ------------------------------------------------------------------ #

    def __enter__(self) -> "UnitOfWork":
        """Enter the context and initialize session."""
        if self.session is not None:
            raise RuntimeError("UnitOfWork context already entered")

        self.session = self._session_factory()
        self._committed = False
        self._rolled_back = False
        self._repo_cache.clear()

        logger.debug("UnitOfWork session started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        """Exit the context and handle transaction completion."""
        if self.session is None:
            return False

        try:
            if exc_type is None:
                if self._auto_commit and not self._committed and not self._rolled_back:
                    self.commit()
            else:
                if not self._rolled_back:
                    self.session.rollback()
                    self._rolled_back = True
                    logger.warning(f"UnitOfWork rolled back due to {exc_type.__name__}")
        finally:
            self.session.close()
            self.session = None
            self._repo_cache.clear()
            logger.debug("UnitOfWork session closed")

        return False

    # ------------------------------------------------------------------ #
    # Transaction control
    # ------------------------------------------------------------------ #

    def commit(self) -> None:
        """
        Commit the current transaction.

        Raises:
            RuntimeError: If called outside of context
            TransactionError: If commit fails
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.commit() called outside of context")

        if self._committed:
            logger.warning("commit() called on already-committed transaction")
            return

        if self._rolled_back:
            raise RuntimeError("Cannot commit a rolled-back transaction")

        try:
            self.session.commit()
            self._committed = True
            logger.debug("UnitOfWork committed")
        except SQLAlchemyError as exc:
            logger.error(f"Commit failed: {exc}")
            self.session.rollback()
            self._rolled_back = True
            raise TransactionError("Failed to commit transaction", exc) from exc

    def rollback(self) -> None:
        """Explicitly roll back the current transaction."""
        if self.session is None:
            raise RuntimeError("UnitOfWork.rollback() called outside of context")

        if self._rolled_back:
            return

        self.session.rollback()
        self._rolled_back = True
        self._committed = False
        logger.debug("UnitOfWork explicitly rolled back")

    # ------------------------------------------------------------------ #
    # Repository factory
    # ------------------------------------------------------------------ #

    def get_repo(self, repo_cls: Type[TRepository]) -> TRepository:
        """
        Get or create a repository bound to this UnitOfWork's session.

        Raises:
            RuntimeError: If called outside of context
        """
        if self.session is None:
            raise RuntimeError("UnitOfWork.get_repo() called outside of context")

        if repo_cls not in self._repo_cache:
            self._repo_cache[repo_cls] = repo_cls(self.session)
        return self._repo_cache[repo_cls]  # type: ignore[return-value]

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back
