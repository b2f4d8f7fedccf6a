"""
Visibility resolver.

Decides which complaints an actor may list. The rules are built as
specifications, so the same decision can filter an in-memory list or be
pushed down into a database query.
"""

from enum import Enum
from typing import Iterable, List, Optional, Union

from campus_complaints.models.complaint import Complaint
from campus_complaints.models.enums import ComplaintStatus, UserRole
from campus_complaints.repositories.specifications import (
    AssignedTo,
    HasStatus,
    InDepartment,
    MatchAll,
    Specification,
    SubmittedBy,
)
from campus_complaints.services.common.permissions import Actor

StatusFilter = Optional[Union[ComplaintStatus, str, int]]


class Origin(str, Enum):
    """Teacher list refinement by how the complaint reached them."""

    ASSIGNED = "assigned"
    SUBMITTED = "submitted"

    @classmethod
    def parse(cls, token: Optional[Union["Origin", str]]) -> Optional["Origin"]:
        """Case-insensitive lookup; None for anything unrecognized."""
        if token is None:
            return None
        if isinstance(token, cls):
            return token
        try:
            return cls(str(token).strip().lower())
        except ValueError:
            return None


def parse_status_filter(status: StatusFilter) -> Optional[ComplaintStatus]:
    """Status used for list filtering; unrecognized tokens mean no filter."""
    if status is None or isinstance(status, ComplaintStatus):
        return status
    return ComplaintStatus.from_token(str(status))


def role_spec(actor: Actor, origin: Optional[Union[Origin, str]] = None) -> Specification:
    """
    Base visibility for the actor's role.

    Args:
        actor: Requesting actor
        origin: Teacher-only refinement (``assigned`` or ``submitted``)
    """
    role = actor.effective_role

    if role == UserRole.ADMIN:
        return MatchAll()

    if role == UserRole.HOD:
        return InDepartment(actor.department_id)

    if role == UserRole.TEACHER:
        refinement = Origin.parse(origin)
        if refinement is Origin.ASSIGNED:
            return AssignedTo(actor.user_id) & ~SubmittedBy(actor.user_id)
        if refinement is Origin.SUBMITTED:
            return SubmittedBy(actor.user_id)
        return AssignedTo(actor.user_id) | SubmittedBy(actor.user_id)

    if role == UserRole.STUDENT:
        return SubmittedBy(actor.user_id)

    raise ValueError(f"Unhandled role: {role!r}")


def visibility_spec(
    actor: Actor,
    status_filter: StatusFilter = None,
    origin_filter: Optional[Union[Origin, str]] = None,
) -> Specification:
    """Role visibility narrowed by an optional exact status."""
    spec = role_spec(actor, origin_filter)
    status = parse_status_filter(status_filter)
    if status is not None:
        spec = spec & HasStatus(status)
    return spec


def filter_visible(
    actor: Actor,
    complaints: Iterable[Complaint],
    status_filter: StatusFilter = None,
    origin_filter: Optional[Union[Origin, str]] = None,
) -> List[Complaint]:
    """
    Complaints from ``complaints`` that ``actor`` may see.

    Args:
        actor: Requesting actor
        complaints: Candidates in insertion order
        status_filter: Exact status to keep; unrecognized values are ignored
        origin_filter: Teacher-only ``assigned``/``submitted`` refinement

    Returns:
        Matching complaints, newest first, ties in reverse insertion order
    """
    spec = visibility_spec(actor, status_filter, origin_filter)
    visible = [complaint for complaint in complaints if spec.is_satisfied_by(complaint)]
    # Stable sort over the reversed list keeps later insertions first on ties.
    return sorted(reversed(visible), key=lambda complaint: complaint.created_at, reverse=True)


__all__ = [
    "Origin",
    "StatusFilter",
    "parse_status_filter",
    "role_spec",
    "visibility_spec",
    "filter_visible",
]
