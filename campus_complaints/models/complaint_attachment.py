"""
Complaint attachment model.

Only the opaque path returned by the file storage is kept.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_complaints.models.base import BaseModel

if TYPE_CHECKING:
    from campus_complaints.models.complaint import Complaint

__all__ = ["ComplaintAttachment"]


class ComplaintAttachment(BaseModel):
    """Reference to a stored file belonging to a complaint."""

    __tablename__ = "complaint_attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    complaint_id: Mapped[int] = mapped_column(
        ForeignKey("complaints.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_path: Mapped[str] = mapped_column(String(500), nullable=False)

    complaint: Mapped["Complaint"] = relationship("Complaint", back_populates="attachments")
