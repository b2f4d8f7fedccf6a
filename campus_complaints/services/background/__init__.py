"""
Background services.

- EscalationScheduler: periodic escalation sweep on its own thread
"""

from campus_complaints.services.background.escalation_scheduler import (
    EscalationScheduler,
    SchedulerConfig,
    next_deadline,
)

__all__ = ["EscalationScheduler", "SchedulerConfig", "next_deadline"]
