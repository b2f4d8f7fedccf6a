"""
Dashboard service: role-specific complaint summaries.
"""

from typing import List, Optional, Union

from sqlalchemy.orm import Session

from campus_complaints.core.clock import Clock
from campus_complaints.models.complaint import Complaint
from campus_complaints.models.enums import FINISHED_STATUSES, OPEN_STATUSES, ComplaintStatus, UserRole
from campus_complaints.repositories.complaint_repository import ComplaintRepository
from campus_complaints.repositories.specifications import (
    AssignedTo,
    HasAnyStatus,
    HasStatus,
    SubmittedBy,
)
from campus_complaints.schemas.complaint import ComplaintSummary
from campus_complaints.schemas.dashboard import OversightDashboard, StudentDashboard, TeacherDashboard
from campus_complaints.services.base import BaseService, ServiceResult
from campus_complaints.services.common.permissions import Actor
from campus_complaints.services.complaint.visibility import role_spec

STUDENT_RECENT_LIMIT = 5
TEACHER_PENDING_LIMIT = 5
OVERSIGHT_LIST_LIMIT = 10

ACTIVE_WORK_STATUSES = frozenset({ComplaintStatus.IN_PROGRESS, ComplaintStatus.REOPENED})

Dashboard = Union[StudentDashboard, TeacherDashboard, OversightDashboard]


def average_resolution_hours(complaints: List[Complaint]) -> float:
    """
    Mean hours from creation to last update over finished complaints,
    rounded to two places. Complaints never updated are left out.
    """
    durations = [
        (c.updated_at - c.created_at).total_seconds() / 3600
        for c in complaints
        if c.updated_at is not None
    ]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 2)


class DashboardService(BaseService):
    """Builds the dashboard for whichever role the actor holds."""

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.complaints = ComplaintRepository(db_session)

    def overview(self, actor: Actor) -> ServiceResult[Dashboard]:
        """
        Role-specific overview.

        Returns:
            ServiceResult containing a StudentDashboard (students and users
            without a role), TeacherDashboard or OversightDashboard (HOD and
            admin)
        """
        try:
            role = actor.effective_role
            if role == UserRole.STUDENT:
                return ServiceResult.success(self._student(actor))
            if role == UserRole.TEACHER:
                return ServiceResult.success(self._teacher(actor))
            if role in (UserRole.HOD, UserRole.ADMIN):
                return ServiceResult.success(self._oversight(actor))
            raise ValueError(f"Unhandled role: {role!r}")
        except Exception as e:
            return self._handle_exception(e, "build dashboard", actor.user_id)

    def _student(self, actor: Actor) -> StudentDashboard:
        spec = SubmittedBy(actor.user_id)
        return StudentDashboard(
            total=self.complaints.count_by_specification(spec),
            open=self.complaints.count_by_specification(spec & HasAnyStatus(OPEN_STATUSES)),
            resolved=self.complaints.count_by_specification(spec & HasAnyStatus(FINISHED_STATUSES)),
            recent=self._summaries(self.complaints.find_visible(spec, limit=STUDENT_RECENT_LIMIT)),
        )

    def _teacher(self, actor: Actor) -> TeacherDashboard:
        spec = AssignedTo(actor.user_id)
        pending = self.complaints.find_visible(
            spec & HasAnyStatus(OPEN_STATUSES),
            limit=TEACHER_PENDING_LIMIT,
        )
        return TeacherDashboard(
            new=self.complaints.count_by_specification(spec & HasStatus(ComplaintStatus.NEW)),
            in_progress=self.complaints.count_by_specification(spec & HasAnyStatus(ACTIVE_WORK_STATUSES)),
            resolved=self.complaints.count_by_specification(spec & HasAnyStatus(FINISHED_STATUSES)),
            pending=self._summaries(pending),
        )

    def _oversight(self, actor: Actor) -> OversightDashboard:
        # Same scope as the role's visibility: department for HOD, all for admin.
        spec = role_spec(actor)
        finished = self.complaints.find_finished(spec)
        return OversightDashboard(
            role=actor.effective_role,
            department_id=actor.department_id,
            total=self.complaints.count_by_specification(spec),
            resolved=len(finished),
            average_resolution_hours=average_resolution_hours(finished),
            escalated=self._summaries(self.complaints.find_escalated(spec, limit=OVERSIGHT_LIST_LIMIT)),
            recent=self._summaries(self.complaints.find_visible(spec, limit=OVERSIGHT_LIST_LIMIT)),
        )

    @staticmethod
    def _summaries(complaints: List[Complaint]) -> List[ComplaintSummary]:
        return [ComplaintSummary.from_complaint(c) for c in complaints]


__all__ = ["DashboardService", "average_resolution_hours"]
