"""
Complaint domain services.

Policy core (pure, thread-safe):
- routing: role hierarchy and routing table
- recipient_resolver: eligible assignees for a new complaint
- visibility: which complaints an actor may list
- access_policy: per-complaint read and status-mutation rights
- lifecycle: status transitions, escalation flag and comments

Services (session-bound):
- ComplaintService, DashboardService, ComplaintEscalationService
"""

from campus_complaints.services.complaint.access_policy import (
    can_mutate_status,
    can_read,
    require_read,
    require_status_mutation,
)
from campus_complaints.services.complaint.complaint_escalation_service import (
    ComplaintEscalationService,
    EscalationReport,
)
from campus_complaints.services.complaint.complaint_service import ComplaintService
from campus_complaints.services.complaint.dashboard_service import DashboardService
from campus_complaints.services.complaint.lifecycle import (
    add_comment,
    apply_status_transition,
    mark_escalated,
    parse_status,
)
from campus_complaints.services.complaint.recipient_resolver import resolve_recipients
from campus_complaints.services.complaint.visibility import Origin, filter_visible, visibility_spec

__all__ = [
    "can_read",
    "can_mutate_status",
    "require_read",
    "require_status_mutation",
    "add_comment",
    "apply_status_transition",
    "mark_escalated",
    "parse_status",
    "resolve_recipients",
    "Origin",
    "filter_visible",
    "visibility_spec",
    "ComplaintService",
    "DashboardService",
    "ComplaintEscalationService",
    "EscalationReport",
]
