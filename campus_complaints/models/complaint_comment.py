"""
Complaint comment model.

Comments are append-only: the core never edits or deletes them.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_complaints.models.base import BaseModel, UTCDateTime, utcnow

if TYPE_CHECKING:
    from campus_complaints.models.complaint import Complaint
    from campus_complaints.models.user import User

__all__ = ["ComplaintComment", "COMMENT_MAX_LENGTH"]

COMMENT_MAX_LENGTH = 2000


class ComplaintComment(BaseModel):
    """Discussion entry on a complaint."""

    __tablename__ = "complaint_comments"
    __table_args__ = (
        Index("ix_complaint_comments_complaint_created", "complaint_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    complaint_id: Mapped[int] = mapped_column(
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
    )

    author_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    content: Mapped[str] = mapped_column(String(COMMENT_MAX_LENGTH), nullable=False)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="comments")
    author: Mapped["User"] = relationship("User", lazy="joined")
