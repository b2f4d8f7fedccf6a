"""
Role-specific dashboard summaries.
"""

from typing import List, Optional

from pydantic import Field

from campus_complaints.models.enums import UserRole
from campus_complaints.schemas.base import BaseResponseSchema
from campus_complaints.schemas.complaint import ComplaintSummary

__all__ = [
    "StudentDashboard",
    "TeacherDashboard",
    "OversightDashboard",
]


class StudentDashboard(BaseResponseSchema):
    """Counts and recent activity for the complaints a student raised."""

    total: int = 0
    open: int = 0
    resolved: int = 0
    recent: List[ComplaintSummary] = Field(default_factory=list)


class TeacherDashboard(BaseResponseSchema):
    """Workload for the complaints routed to a teacher."""

    new: int = 0
    in_progress: int = 0
    resolved: int = 0
    pending: List[ComplaintSummary] = Field(default_factory=list)


class OversightDashboard(BaseResponseSchema):
    """Departmental (HOD) or institution-wide (Admin) overview."""

    role: UserRole
    department_id: Optional[int] = None
    total: int = 0
    resolved: int = 0
    average_resolution_hours: float = 0.0
    escalated: List[ComplaintSummary] = Field(default_factory=list)
    recent: List[ComplaintSummary] = Field(default_factory=list)
