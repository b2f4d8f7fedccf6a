"""
Complaint repository: persistence queries for complaints and comments.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func

from campus_complaints.models.complaint import Complaint
from campus_complaints.models.complaint_comment import ComplaintComment
from campus_complaints.models.enums import FINISHED_STATUSES
from campus_complaints.repositories.base_repository import BaseRepository
from campus_complaints.repositories.specifications import (
    EscalationDue,
    HasAnyStatus,
    IsEscalated,
    Specification,
)

# Newest first; the integer key breaks created_at ties in reverse insertion order.
NEWEST_FIRST = (Complaint.created_at.desc(), Complaint.id.desc())


class ComplaintRepository(BaseRepository[Complaint]):
    """Queries over complaints."""

    model = Complaint

    def find_visible(self, spec: Specification, limit: Optional[int] = None) -> List[Complaint]:
        """Complaints matching ``spec``, newest first."""
        return self.find_by_specification(spec, order_by=NEWEST_FIRST, limit=limit)

    def find_escalation_due(self, cutoff: datetime) -> List[Complaint]:
        """
        NEW complaints that are not escalated and were created at or
        before ``cutoff``, oldest first.
        """
        return self.find_by_specification(
            EscalationDue(cutoff),
            order_by=(Complaint.created_at.asc(), Complaint.id.asc()),
        )

    def find_escalated(self, spec: Specification, limit: int) -> List[Complaint]:
        """Escalated complaints within ``spec``, most recently escalated first."""
        return self.find_by_specification(
            spec & IsEscalated(),
            order_by=(
                func.coalesce(Complaint.escalated_at, Complaint.created_at).desc(),
                Complaint.id.desc(),
            ),
            limit=limit,
        )

    def find_finished(self, spec: Specification) -> List[Complaint]:
        """Resolved or closed complaints within ``spec``."""
        return self.find_by_specification(spec & HasAnyStatus(FINISHED_STATUSES))

    def comments_newest_first(self, complaint_id: int) -> List[ComplaintComment]:
        """Comments on a complaint, newest first."""
        return list(
            self.db.query(ComplaintComment)
            .filter(ComplaintComment.complaint_id == complaint_id)
            .order_by(ComplaintComment.created_at.desc(), ComplaintComment.id.desc())
            .all()
        )


__all__ = ["ComplaintRepository", "NEWEST_FIRST"]
