"""
Complaint lifecycle: status transitions, escalation flag and comments.

Transitions are unconstrained; any status may move to any other. These
functions mutate loaded objects only. Persisting the change is the
caller's job.
"""

from datetime import datetime
from typing import Any, Optional

from campus_complaints.core.exceptions import ErrorCode, ValidationError
from campus_complaints.models.complaint import Complaint
from campus_complaints.models.complaint_comment import COMMENT_MAX_LENGTH, ComplaintComment
from campus_complaints.models.enums import ComplaintStatus
from campus_complaints.services.common.permissions import Actor


def parse_status(token: Any) -> ComplaintStatus:
    """
    Resolve a requested status.

    Accepts display labels (``InProgress``), enum names (``IN_PROGRESS``)
    and ordinals (``1``) in any case.

    Raises:
        ValidationError: For anything else
    """
    if isinstance(token, ComplaintStatus):
        return token
    status = ComplaintStatus.from_token(None if token is None else str(token))
    if status is None:
        raise ValidationError(
            f"Unrecognized status: {token!r}",
            field="status",
            error_code=ErrorCode.INVALID_STATUS,
        )
    return status


def apply_status_transition(complaint: Complaint, status: ComplaintStatus, now: datetime) -> Complaint:
    """
    Move ``complaint`` to ``status``.

    ``updated_at`` is always stamped. Leaving NEW clears the escalation
    flag and its timestamp.
    """
    complaint.status = status
    complaint.updated_at = now
    if status != ComplaintStatus.NEW:
        complaint.escalated = False
        complaint.escalated_at = None
    return complaint


def mark_escalated(complaint: Complaint, now: datetime) -> Complaint:
    """Flag a NEW complaint as escalated."""
    if complaint.status != ComplaintStatus.NEW:
        raise ValueError(f"Only NEW complaints can be escalated (complaint {complaint.id} is {complaint.status.label})")
    complaint.escalated = True
    complaint.escalated_at = now
    complaint.updated_at = now
    return complaint


def validate_comment_content(content: Optional[str]) -> str:
    """
    Trimmed comment text.

    Raises:
        ValidationError: If empty after trimming or longer than the limit
    """
    text = (content or "").strip()
    if not text:
        raise ValidationError("Comment cannot be empty", field="content")
    if len(text) > COMMENT_MAX_LENGTH:
        raise ValidationError(
            f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters",
            field="content",
        )
    return text


def add_comment(complaint: Complaint, author: Actor, content: Optional[str], now: datetime) -> ComplaintComment:
    """
    Append a comment to ``complaint``.

    Touches ``updated_at`` only; status and escalation are left alone.
    """
    text = validate_comment_content(content)
    comment = ComplaintComment(
        author_id=author.user_id,
        content=text,
        created_at=now,
    )
    complaint.comments.append(comment)
    complaint.updated_at = now
    return comment


__all__ = [
    "parse_status",
    "apply_status_transition",
    "mark_escalated",
    "validate_comment_content",
    "add_comment",
]
