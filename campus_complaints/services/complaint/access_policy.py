"""
Access policy resolver.

Per-complaint read and status-mutation rights. Both checks are pure and
independent: being allowed to read never implies being allowed to change
status.
"""

from campus_complaints.core.exceptions import AccessDeniedError
from campus_complaints.models.complaint import Complaint
from campus_complaints.models.enums import UserRole
from campus_complaints.repositories.specifications import InDepartment
from campus_complaints.services.common.permissions import Actor

READ_ACTION = "read"
UPDATE_STATUS_ACTION = "update status"


def _in_actor_department(actor: Actor, complaint: Complaint) -> bool:
    return InDepartment(actor.department_id).is_satisfied_by(complaint)


def can_read(actor: Actor, complaint: Complaint) -> bool:
    """
    Whether ``actor`` may view ``complaint`` and comment on it.

    Admins read everything. Submitter and assignee always read. A HOD reads
    complaints whose submitter or assignee is in the HOD's department.
    """
    role = actor.effective_role
    if role == UserRole.ADMIN:
        return True
    if actor.user_id in (complaint.submitter_id, complaint.assignee_id):
        return True
    if role == UserRole.HOD:
        return _in_actor_department(actor, complaint)
    return False


def can_mutate_status(actor: Actor, complaint: Complaint) -> bool:
    """
    Whether ``actor`` may change the status of ``complaint``.

    Admins always may, a HOD may within their department and a Teacher only
    when assigned. Students never may.
    """
    role = actor.effective_role
    if role == UserRole.ADMIN:
        return True
    if role == UserRole.HOD:
        return _in_actor_department(actor, complaint)
    if role == UserRole.TEACHER:
        return complaint.assignee_id is not None and complaint.assignee_id == actor.user_id
    if role == UserRole.STUDENT:
        return False
    raise ValueError(f"Unhandled role: {role!r}")


def require_read(actor: Actor, complaint: Complaint) -> None:
    """
    Raises:
        AccessDeniedError: If ``actor`` may not read ``complaint``
    """
    if not can_read(actor, complaint):
        raise AccessDeniedError(READ_ACTION, user_id=actor.user_id, complaint_id=complaint.id)


def require_status_mutation(actor: Actor, complaint: Complaint) -> None:
    """
    Raises:
        AccessDeniedError: If ``actor`` may not change the status
    """
    if not can_mutate_status(actor, complaint):
        raise AccessDeniedError(UPDATE_STATUS_ACTION, user_id=actor.user_id, complaint_id=complaint.id)


__all__ = [
    "can_read",
    "can_mutate_status",
    "require_read",
    "require_status_mutation",
]
