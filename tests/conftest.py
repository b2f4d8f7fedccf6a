# tests/conftest.py
"""
Shared fixtures.

Each test gets its own SQLite database file under ``tmp_path`` built from the
real models, a frozen clock, and small factories for departments, users and
complaints. Pure policy tests use ``make_stub`` objects and never touch the
database.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Optional

import pytest

from campus_complaints.config.settings import Settings
from campus_complaints.db.init_db import init_db
from campus_complaints.db.session import create_db_engine, create_session_factory
from campus_complaints.models import Complaint, ComplaintStatus, Department, User, UserRole
from campus_complaints.services.common.permissions import Actor

T0 = datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = T0):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ENVIRONMENT="testing",
        DATABASE_URL=f"sqlite:///{tmp_path / 'complaints.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        MAX_UPLOAD_SIZE=1024,
        ALLOWED_EXTENSIONS={"pdf", "png", "txt"},
        ESCALATION_ENABLED=False,
        SEED_DEFAULT_DATA=False,
    )


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings.DATABASE_URL, echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# --------------------------------------------------------------------------- #
# Factories
# --------------------------------------------------------------------------- #


@pytest.fixture
def make_department(db):
    def _make(name: str) -> Department:
        department = Department(name=name)
        db.add(department)
        db.commit()
        return department

    return _make


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(
        role: Optional[UserRole],
        department: Optional[Department] = None,
        first_name: Optional[str] = None,
        last_name: str = "User",
    ) -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@college.edu",
            first_name=first_name or f"{role.label if role else 'Nobody'}{counter['n']}",
            last_name=last_name,
            role=role,
            department_id=department.id if department is not None else None,
            created_at=T0,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_complaint(db):
    def _make(
        submitter: User,
        assignee: Optional[User],
        created_at: datetime = T0,
        status: ComplaintStatus = ComplaintStatus.NEW,
        title: str = "Projector broken",
        category: str = "Infrastructure",
        escalated: bool = False,
        escalated_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> Complaint:
        complaint = Complaint(
            title=title,
            description="The projector in room 101 does not turn on.",
            category=category,
            status=status,
            submitter_id=submitter.id,
            assignee_id=assignee.id if assignee is not None else None,
            created_at=created_at,
            updated_at=updated_at,
            escalated=escalated,
            escalated_at=escalated_at,
        )
        db.add(complaint)
        db.commit()
        return complaint

    return _make


def actor_for(user: User) -> Actor:
    return Actor.from_user(user)


def make_stub(
    id: int = 1,
    submitter_id: str = "student",
    assignee_id: Optional[str] = "teacher",
    submitter_department_id: Optional[int] = None,
    assignee_department_id: Optional[int] = None,
    status: ComplaintStatus = ComplaintStatus.NEW,
    created_at: datetime = T0,
    escalated: bool = False,
    escalated_at: Optional[datetime] = None,
    updated_at: Optional[datetime] = None,
) -> SimpleNamespace:
    """Complaint-shaped object for policy tests that need no database."""
    return SimpleNamespace(
        id=id,
        submitter_id=submitter_id,
        assignee_id=assignee_id,
        submitter_department_id=submitter_department_id,
        assignee_department_id=assignee_department_id,
        status=status,
        created_at=created_at,
        escalated=escalated,
        escalated_at=escalated_at,
        updated_at=updated_at,
    )
