"""
Complaint escalation sweep.

Flags NEW complaints that nobody has picked up within the threshold. One
sweep is one transaction: either every due complaint is flagged or none is.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from campus_complaints.config.logging import get_logger
from campus_complaints.config.settings import Settings, get_settings
from campus_complaints.core.clock import Clock, SystemClock
from campus_complaints.core.exceptions import SweepError
from campus_complaints.db.session import SessionFactory
from campus_complaints.repositories.complaint_repository import ComplaintRepository
from campus_complaints.services.common.unit_of_work import UnitOfWork
from campus_complaints.services.complaint.lifecycle import mark_escalated


@dataclass
class EscalationReport:
    """Outcome of one sweep."""
    run_at: datetime
    cutoff: datetime
    escalated_count: int
    complaint_ids: List[int] = field(default_factory=list)


class ComplaintEscalationService:
    """
    Time-based escalation of neglected complaints.

    Runs without an actor: the sweep is a system action.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        clock: Optional[Clock] = None,
        threshold: Optional[timedelta] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize escalation service.

        Args:
            session_factory: Factory for the sweep's own session
            clock: Time source for ``now`` and the cutoff
            threshold: Age at which a NEW complaint is escalated
                (``ESCALATION_THRESHOLD_HOURS`` by default)
            settings: Application settings (cached settings by default)
        """
        settings = settings or get_settings()
        self._session_factory = session_factory
        self.clock: Clock = clock or SystemClock()
        self.threshold = threshold or timedelta(hours=settings.ESCALATION_THRESHOLD_HOURS)
        self._logger = get_logger(self.__class__.__name__)

    def run_sweep(self) -> EscalationReport:
        """
        Escalate every NEW, unescalated complaint created at or before
        ``now - threshold``.

        Returns:
            EscalationReport with the flagged complaint ids

        Raises:
            SweepError: If the run failed; nothing was committed
        """
        now = self.clock.now()
        cutoff = now - self.threshold

        try:
            with UnitOfWork(self._session_factory) as uow:
                repo = uow.get_repo(ComplaintRepository)
                due = repo.find_escalation_due(cutoff)
                for complaint in due:
                    mark_escalated(complaint, now)
                complaint_ids = [complaint.id for complaint in due]
        except Exception as e:
            self._logger.error(
                f"Escalation sweep failed: {e}",
                exc_info=True,
                extra={"run_at": now.isoformat(), "cutoff": cutoff.isoformat()},
            )
            raise SweepError(
                f"Escalation sweep failed: {e}",
                details={"run_at": now.isoformat(), "error_type": type(e).__name__},
            ) from e

        report = EscalationReport(
            run_at=now,
            cutoff=cutoff,
            escalated_count=len(complaint_ids),
            complaint_ids=complaint_ids,
        )

        if report.escalated_count:
            self._logger.warning(
                f"Escalated {report.escalated_count} complaint(s) older than {self.threshold}",
                extra={"escalated_count": report.escalated_count, "complaint_ids": complaint_ids},
            )
        else:
            self._logger.info("Escalation sweep found no stale complaints", extra={"escalated_count": 0})

        return report


__all__ = ["ComplaintEscalationService", "EscalationReport"]
