"""
Core complaint model with status and escalation tracking.

A complaint is created with status NEW by a Student, Teacher or HOD and
routed to a single assignee. The escalation flag may only be set while
the complaint is still NEW.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_complaints.models.base import BaseModel, UTCDateTime, utcnow
from campus_complaints.models.enums import ComplaintStatus

if TYPE_CHECKING:
    from campus_complaints.models.complaint_attachment import ComplaintAttachment
    from campus_complaints.models.complaint_comment import ComplaintComment
    from campus_complaints.models.user import User

__all__ = ["Complaint"]

TITLE_MAX_LENGTH = 150
DESCRIPTION_MAX_LENGTH = 4000
CATEGORY_MAX_LENGTH = 100


class Complaint(BaseModel):
    """
    Grievance raised by one user and assigned to another.

    Attributes:
        title: Brief summary
        description: Full complaint text
        category: Free-text category (suggested values are not enforced)
        status: Current lifecycle status
        submitter_id: User who raised the complaint (immutable)
        assignee_id: User the complaint was routed to
        created_at: Creation timestamp
        updated_at: Last status change or comment
        escalated: Set by the escalation sweep while status is NEW
        escalated_at: When the escalation flag was raised
        version: Optimistic lock counter maintained by the ORM
    """

    __tablename__ = "complaints"
    __table_args__ = (
        Index("ix_complaints_submitter_id", "submitter_id"),
        Index("ix_complaints_assignee_id", "assignee_id"),
        Index("ix_complaints_escalation_due", "status", "escalated", "created_at"),
        CheckConstraint(
            "NOT escalated OR status = 'NEW'",
            name="check_escalated_only_when_new",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    description: Mapped[str] = mapped_column(String(DESCRIPTION_MAX_LENGTH), nullable=False)
    category: Mapped[str] = mapped_column(String(CATEGORY_MAX_LENGTH), nullable=False)

    status: Mapped[ComplaintStatus] = mapped_column(
        Enum(ComplaintStatus, name="complaint_status", native_enum=False, length=20),
        nullable=False,
        default=ComplaintStatus.NEW,
    )

    submitter_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )

    assignee_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    escalated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    escalated_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    submitter: Mapped["User"] = relationship(
        "User",
        foreign_keys=[submitter_id],
        back_populates="submitted_complaints",
        lazy="joined",
    )

    assignee: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[assignee_id],
        back_populates="assigned_complaints",
        lazy="joined",
    )

    comments: Mapped[List["ComplaintComment"]] = relationship(
        "ComplaintComment",
        back_populates="complaint",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ComplaintComment.id",
    )

    attachments: Mapped[List["ComplaintAttachment"]] = relationship(
        "ComplaintAttachment",
        back_populates="complaint",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def submitter_department_id(self) -> Optional[int]:
        return self.submitter.department_id if self.submitter is not None else None

    @property
    def assignee_department_id(self) -> Optional[int]:
        return self.assignee.department_id if self.assignee is not None else None

    def __repr__(self) -> str:
        return f"<Complaint id={self.id!r} status={self.status!r} escalated={self.escalated!r}>"
