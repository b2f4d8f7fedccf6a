"""
Pydantic schemas for service input and output.
"""

from campus_complaints.schemas.complaint import (
    CommentView,
    ComplaintCreate,
    ComplaintDetail,
    ComplaintSummary,
    DepartmentComplaintList,
    RecipientOption,
    StatusOption,
    UserOption,
)
from campus_complaints.schemas.dashboard import (
    OversightDashboard,
    StudentDashboard,
    TeacherDashboard,
)
from campus_complaints.schemas.user import UserRegistration

__all__ = [
    "CommentView",
    "ComplaintCreate",
    "ComplaintDetail",
    "ComplaintSummary",
    "DepartmentComplaintList",
    "RecipientOption",
    "StatusOption",
    "UserOption",
    "StudentDashboard",
    "TeacherDashboard",
    "OversightDashboard",
    "UserRegistration",
]
