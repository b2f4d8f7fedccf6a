"""
Application entry point.

Builds the composition root from settings and runs the escalation worker
until it receives SIGINT or SIGTERM.
"""

from __future__ import annotations

import logging
import signal
import threading
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from campus_complaints.config.logging import setup_logging
from campus_complaints.config.settings import Settings, get_settings
from campus_complaints.core.clock import Clock, SystemClock
from campus_complaints.db.init_db import init_db
from campus_complaints.db.seed import seed_defaults
from campus_complaints.db.session import create_db_engine, create_session_factory
from campus_complaints.services.background.escalation_scheduler import EscalationScheduler, SchedulerConfig
from campus_complaints.services.complaint.complaint_escalation_service import ComplaintEscalationService
from campus_complaints.services.complaint.complaint_service import ComplaintService
from campus_complaints.services.complaint.dashboard_service import DashboardService
from campus_complaints.services.file.file_storage import FileStorage, LocalFileStorage
from campus_complaints.services.users.user_service import UserService

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """
    Composition root.

    Owns the engine, the session factory, the shared clock and file
    storage, and the escalation scheduler's lifetime.
    """

    settings: Settings
    engine: Engine
    session_factory: sessionmaker
    clock: Clock
    file_storage: FileStorage
    escalation_service: ComplaintEscalationService
    scheduler: EscalationScheduler
    shutdown_event: threading.Event = field(default_factory=threading.Event)

    # ------------------------------------------------------------------ #
    # Per-request services
    # ------------------------------------------------------------------ #
    def new_session(self) -> Session:
        return self.session_factory()

    def complaint_service(self, db: Session) -> ComplaintService:
        return ComplaintService(db, clock=self.clock, file_storage=self.file_storage, settings=self.settings)

    def dashboard_service(self, db: Session) -> DashboardService:
        return DashboardService(db, clock=self.clock)

    def user_service(self, db: Session) -> UserService:
        return UserService(db, clock=self.clock)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def start(self) -> None:
        """Create the schema, seed defaults and start the scheduler as configured."""
        init_db(self.engine)

        if self.settings.SEED_DEFAULT_DATA:
            with self.session_factory() as db:
                seed_defaults(db)

        if self.settings.ESCALATION_ENABLED:
            self.scheduler.start()
        else:
            logger.info("Escalation scheduler disabled by configuration")

    def stop(self) -> None:
        """Stop the scheduler and release database connections."""
        self.shutdown_event.set()
        if self.scheduler.is_running:
            self.scheduler.stop()
        self.engine.dispose()
        logger.info(f"{self.settings.APP_NAME} stopped")


def build_application(
    settings: Optional[Settings] = None,
    *,
    engine: Optional[Engine] = None,
    clock: Optional[Clock] = None,
    file_storage: Optional[FileStorage] = None,
) -> Application:
    """
    Wire the application from settings.

    Any collaborator can be passed in to replace the configured one.
    """
    settings = settings or get_settings()
    engine = engine or create_db_engine(settings.DATABASE_URL, settings.DATABASE_ECHO)
    session_factory = create_session_factory(engine)
    clock = clock or SystemClock()
    file_storage = file_storage or LocalFileStorage.from_settings(settings)

    escalation_service = ComplaintEscalationService(session_factory, clock=clock, settings=settings)
    scheduler = EscalationScheduler(
        escalation_service.run_sweep,
        SchedulerConfig.from_settings(settings),
    )

    return Application(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        clock=clock,
        file_storage=file_storage,
        escalation_service=escalation_service,
        scheduler=scheduler,
    )


def main() -> None:
    """Run the background worker until SIGINT or SIGTERM."""
    settings = get_settings()
    setup_logging(settings)

    app = build_application(settings)

    def _request_shutdown(signum, frame) -> None:
        logger.info(f"Received signal {signum}, shutting down")
        app.shutdown_event.set()

    signal.signal(signal.SIGINT, _request_shutdown)
    signal.signal(signal.SIGTERM, _request_shutdown)

    app.start()
    logger.info(f"{settings.APP_NAME} running in {settings.ENVIRONMENT} mode")
    try:
        while not app.shutdown_event.wait(1.0):
            pass
    finally:
        app.stop()


if __name__ == "__main__":
    main()
