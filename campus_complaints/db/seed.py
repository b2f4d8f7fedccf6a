"""
Idempotent seeding of default reference data.

Creates the default departments, a system administrator and one HOD per
department. Existing rows are left untouched, so it is safe to run on
every start.
"""
import logging
import re
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from campus_complaints.models import Department, User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENTS = (
    "Computer Engineering",
    "Electrical Engineering",
    "Mechanical Engineering",
    "Library",
)

ADMIN_EMAIL = "admin@campus-complaints.local"
HOD_EMAIL_TEMPLATE = "{slug}.hod@campus-complaints.local"


def generate_slug(value: str) -> str:
    """Lowercase, non-alphanumerics collapsed to single hyphens."""
    if not value or not value.strip():
        return "department"
    slug = re.sub(r"[^0-9a-z]+", "-", value.strip().lower())
    return slug.strip("-") or "department"


def ensure_departments(db: Session, names: Iterable[str] = DEFAULT_DEPARTMENTS) -> List[Department]:
    """Create the default departments when the table is empty."""
    existing = list(db.scalars(select(Department).order_by(Department.id)))
    if existing:
        return existing

    departments = [Department(name=name) for name in names]
    db.add_all(departments)
    db.flush()
    logger.info(f"Seeded {len(departments)} departments")
    return departments


def ensure_admin(db: Session) -> User:
    """Create the system administrator if missing."""
    admin = db.scalar(select(User).where(User.email == ADMIN_EMAIL))
    if admin is not None:
        return admin

    admin = User(
        email=ADMIN_EMAIL,
        first_name="System",
        last_name="Admin",
        role=UserRole.ADMIN,
    )
    db.add(admin)
    db.flush()
    logger.info(f"Seeded administrator {ADMIN_EMAIL}")
    return admin


def ensure_hods(db: Session) -> List[User]:
    """Create one HOD per department if missing."""
    created: List[User] = []
    for department in db.scalars(select(Department).order_by(Department.id)):
        email = HOD_EMAIL_TEMPLATE.format(slug=generate_slug(department.name))
        if db.scalar(select(User).where(User.email == email)) is not None:
            continue

        hod = User(
            email=email,
            first_name=department.name,
            last_name="HOD",
            role=UserRole.HOD,
            department_id=department.id,
        )
        db.add(hod)
        created.append(hod)

    if created:
        db.flush()
        logger.info(f"Seeded {len(created)} HOD accounts")
    return created


def seed_defaults(db: Session) -> None:
    """Run every seeding step and commit."""
    try:
        ensure_departments(db)
        ensure_admin(db)
        ensure_hods(db)
        db.commit()
    except Exception:
        db.rollback()
        logger.error("Seeding default data failed", exc_info=True)
        raise
