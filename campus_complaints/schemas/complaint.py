"""
Complaint schemas: creation input and the read models returned by the
complaint service.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from campus_complaints.models.complaint import (
    CATEGORY_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Complaint,
)
from campus_complaints.models.complaint_comment import ComplaintComment
from campus_complaints.models.enums import ComplaintStatus
from campus_complaints.schemas.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "ComplaintCreate",
    "RecipientOption",
    "UserOption",
    "StatusOption",
    "CommentView",
    "ComplaintSummary",
    "ComplaintDetail",
    "DepartmentComplaintList",
]


class ComplaintCreate(BaseCreateSchema):
    """
    Input for raising a complaint.

    ``recipient_id`` is optional at the schema level so that a missing
    recipient is reported by the service with a dedicated error code.
    """

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    category: str = Field(..., min_length=1, max_length=CATEGORY_MAX_LENGTH)
    recipient_id: Optional[str] = Field(default=None, description="User ID of the chosen recipient")

    @field_validator("recipient_id")
    @classmethod
    def blank_recipient_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat an empty selection as no selection."""
        if v is not None and not v.strip():
            return None
        return v


class RecipientOption(BaseSchema):
    """One eligible assignee in the recipient picker."""

    id: str
    display_name: str
    group_label: str


class UserOption(BaseSchema):
    """User entry in a filter drop-down."""

    id: str
    display_name: str


class StatusOption(BaseSchema):
    """Selectable status with its ordinal value and label."""

    value: int
    label: str

    @classmethod
    def all(cls) -> List["StatusOption"]:
        return [cls(value=status.value, label=status.label) for status in ComplaintStatus]


class CommentView(BaseResponseSchema):
    id: int
    author_id: str
    author_name: str
    content: str
    created_at: datetime

    @classmethod
    def from_comment(cls, comment: ComplaintComment) -> "CommentView":
        return cls(
            id=comment.id,
            author_id=comment.author_id,
            author_name=comment.author.display_name if comment.author else "",
            content=comment.content,
            created_at=comment.created_at,
        )


class ComplaintSummary(BaseResponseSchema):
    """List-row view of a complaint."""

    id: int
    title: str
    category: str
    status: ComplaintStatus
    submitter_id: str
    submitter_name: str
    assignee_id: Optional[str] = None
    assignee_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    escalated: bool = False
    escalated_at: Optional[datetime] = None

    @property
    def status_label(self) -> str:
        return self.status.label

    @classmethod
    def from_complaint(cls, complaint: Complaint) -> "ComplaintSummary":
        return cls(
            id=complaint.id,
            title=complaint.title,
            category=complaint.category,
            status=complaint.status,
            submitter_id=complaint.submitter_id,
            submitter_name=complaint.submitter.display_name if complaint.submitter else "",
            assignee_id=complaint.assignee_id,
            assignee_name=complaint.assignee.display_name if complaint.assignee else None,
            created_at=complaint.created_at,
            updated_at=complaint.updated_at,
            escalated=complaint.escalated,
            escalated_at=complaint.escalated_at,
        )


class ComplaintDetail(BaseResponseSchema):
    """Full view of one complaint for an actor allowed to read it."""

    complaint: ComplaintSummary
    description: str
    comments: List[CommentView] = Field(default_factory=list, description="Newest first")
    attachments: List[str] = Field(default_factory=list)
    can_update_status: bool = False
    status_options: List[StatusOption] = Field(default_factory=StatusOption.all)


class DepartmentComplaintList(BaseResponseSchema):
    """Oversight list for HODs and administrators."""

    complaints: List[ComplaintSummary] = Field(default_factory=list)
    teachers: List[UserOption] = Field(default_factory=list)
    students: List[UserOption] = Field(default_factory=list)
    status: Optional[ComplaintStatus] = None
    teacher_id: Optional[str] = None
    student_id: Optional[str] = None
