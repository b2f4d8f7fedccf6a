"""
ORM models.

Importing this package registers every table on ``Base.metadata``.
"""

from campus_complaints.models.base import Base, BaseModel, UTCDateTime
from campus_complaints.models.enums import (
    FINISHED_STATUSES,
    OPEN_STATUSES,
    ComplaintStatus,
    UserRole,
)
from campus_complaints.models.department import Department
from campus_complaints.models.user import User
from campus_complaints.models.complaint import Complaint
from campus_complaints.models.complaint_comment import ComplaintComment
from campus_complaints.models.complaint_attachment import ComplaintAttachment

__all__ = [
    "Base",
    "BaseModel",
    "UTCDateTime",
    "ComplaintStatus",
    "UserRole",
    "OPEN_STATUSES",
    "FINISHED_STATUSES",
    "Department",
    "User",
    "Complaint",
    "ComplaintComment",
    "ComplaintAttachment",
]
