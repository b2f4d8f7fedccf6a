"""
Specification pattern for encapsulating complaint visibility rules.

Every specification evaluates two ways: against a loaded object with
``is_satisfied_by`` and as a SQLAlchemy clause with ``to_expression``, so
the same rule can filter an in-memory list or run inside the database.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Optional, Type

from sqlalchemy import and_, false, not_, or_, true
from sqlalchemy.sql.expression import ClauseElement

from campus_complaints.core.clock import ensure_utc
from campus_complaints.models.complaint import Complaint
from campus_complaints.models.enums import ComplaintStatus
from campus_complaints.models.user import User


class Specification(ABC):
    """
    Abstract specification for complaint conditions.

    Implements the Specification pattern for building
    reusable and composable query logic.
    """

    @abstractmethod
    def is_satisfied_by(self, candidate: Any) -> bool:
        """
        Evaluate against a loaded complaint.

        Args:
            candidate: Complaint (or complaint-shaped object)

        Returns:
            True if the candidate matches
        """

    @abstractmethod
    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        """
        Convert specification to SQLAlchemy expression.

        Args:
            model: Model class

        Returns:
            SQLAlchemy clause element
        """

    def __and__(self, other: "Specification") -> "AndSpecification":
        """Combine specifications with AND."""
        return AndSpecification(self, other)

    def __or__(self, other: "Specification") -> "OrSpecification":
        """Combine specifications with OR."""
        return OrSpecification(self, other)

    def __invert__(self) -> "NotSpecification":
        """Negate specification."""
        return NotSpecification(self)


class AndSpecification(Specification):
    """AND combination of specifications."""

    def __init__(self, *specs: Specification):
        self.specs = specs

    def is_satisfied_by(self, candidate: Any) -> bool:
        return all(spec.is_satisfied_by(candidate) for spec in self.specs)

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return and_(*[spec.to_expression(model) for spec in self.specs])


class OrSpecification(Specification):
    """OR combination of specifications."""

    def __init__(self, *specs: Specification):
        self.specs = specs

    def is_satisfied_by(self, candidate: Any) -> bool:
        return any(spec.is_satisfied_by(candidate) for spec in self.specs)

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return or_(*[spec.to_expression(model) for spec in self.specs])


class NotSpecification(Specification):
    """NOT negation of specification."""

    def __init__(self, spec: Specification):
        self.spec = spec

    def is_satisfied_by(self, candidate: Any) -> bool:
        return not self.spec.is_satisfied_by(candidate)

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return not_(self.spec.to_expression(model))


# ==================== Generic Specifications ====================


class MatchAll(Specification):
    """Matches every complaint."""

    def is_satisfied_by(self, candidate: Any) -> bool:
        return True

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return true()


# ==================== Complaint Specifications ====================


class SubmittedBy(Specification):
    """Complaints raised by a given user."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def is_satisfied_by(self, candidate: Any) -> bool:
        return candidate.submitter_id == self.user_id

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return model.submitter_id == self.user_id


class AssignedTo(Specification):
    """Complaints routed to a given user."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def is_satisfied_by(self, candidate: Any) -> bool:
        return candidate.assignee_id is not None and candidate.assignee_id == self.user_id

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return model.assignee_id == self.user_id


class InDepartment(Specification):
    """
    Complaints whose submitter or assignee belongs to a department.

    A missing department never matches, on either side.
    """

    def __init__(self, department_id: Optional[int]):
        self.department_id = department_id

    def is_satisfied_by(self, candidate: Any) -> bool:
        if self.department_id is None:
            return False
        return self.department_id in (
            candidate.submitter_department_id,
            candidate.assignee_department_id,
        )

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        if self.department_id is None:
            return false()
        return or_(
            model.submitter.has(User.department_id == self.department_id),
            model.assignee.has(User.department_id == self.department_id),
        )


class HasStatus(Specification):
    """Complaints in an exact status."""

    def __init__(self, status: ComplaintStatus):
        self.status = status

    def is_satisfied_by(self, candidate: Any) -> bool:
        return candidate.status == self.status

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return model.status == self.status


class HasAnyStatus(Specification):
    """Complaints in any of several statuses."""

    def __init__(self, statuses: Iterable[ComplaintStatus]):
        self.statuses = frozenset(statuses)

    def is_satisfied_by(self, candidate: Any) -> bool:
        return candidate.status in self.statuses

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        if not self.statuses:
            return false()
        return model.status.in_(sorted(self.statuses))


class IsEscalated(Specification):
    """Complaints currently flagged by the escalation sweep."""

    def is_satisfied_by(self, candidate: Any) -> bool:
        return bool(candidate.escalated)

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return model.escalated == True  # noqa: E712


class EscalationDue(Specification):
    """NEW, not yet escalated, created at or before ``cutoff``."""

    def __init__(self, cutoff: datetime):
        self.cutoff = ensure_utc(cutoff)

    def is_satisfied_by(self, candidate: Any) -> bool:
        return (
            candidate.status == ComplaintStatus.NEW
            and not candidate.escalated
            and ensure_utc(candidate.created_at) <= self.cutoff
        )

    def to_expression(self, model: Type[Complaint] = Complaint) -> ClauseElement:
        return and_(
            model.status == ComplaintStatus.NEW,
            model.escalated == False,  # noqa: E712
            model.created_at <= self.cutoff,
        )


__all__ = [
    "Specification",
    "AndSpecification",
    "OrSpecification",
    "NotSpecification",
    "MatchAll",
    "SubmittedBy",
    "AssignedTo",
    "InDepartment",
    "HasStatus",
    "HasAnyStatus",
    "IsEscalated",
    "EscalationDue",
]
