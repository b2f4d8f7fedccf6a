"""
Enumerations shared by models, schemas and the policy core.
"""

import enum
from typing import Optional


class UserRole(str, enum.Enum):
    """Primary role of an actor."""
    ADMIN = "admin"
    HOD = "hod"
    TEACHER = "teacher"
    STUDENT = "student"

    @property
    def label(self) -> str:
        return _ROLE_LABELS[self]


_ROLE_LABELS = {
    UserRole.ADMIN: "Admin",
    UserRole.HOD: "HOD",
    UserRole.TEACHER: "Teacher",
    UserRole.STUDENT: "Student",
}


class ComplaintStatus(int, enum.Enum):
    """
    Complaint resolution status.

    Values are ordinal-stable and used as the external representation.
    """
    NEW = 0
    IN_PROGRESS = 1
    RESOLVED = 2
    CLOSED = 3
    REOPENED = 4

    @property
    def label(self) -> str:
        """Display label, e.g. ``InProgress``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def is_open(self) -> bool:
        return self in OPEN_STATUSES

    @property
    def is_finished(self) -> bool:
        return self in FINISHED_STATUSES

    @classmethod
    def from_token(cls, token: Optional[str]) -> Optional["ComplaintStatus"]:
        """
        Look up a status by label, name or ordinal.

        Matching ignores case, underscores, hyphens and spaces so that
        ``InProgress``, ``in_progress`` and ``1`` all resolve to the same
        member. Returns None for anything unrecognized.
        """
        if token is None:
            return None
        if isinstance(token, cls):
            return token
        text = str(token).strip()
        if not text:
            return None
        if text.isdigit():
            try:
                return cls(int(text))
            except ValueError:
                return None
        key = text.replace("_", "").replace("-", "").replace(" ", "").lower()
        for member in cls:
            if member.name.replace("_", "").lower() == key:
                return member
        return None


OPEN_STATUSES = frozenset({ComplaintStatus.NEW, ComplaintStatus.IN_PROGRESS, ComplaintStatus.REOPENED})
FINISHED_STATUSES = frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.CLOSED})


__all__ = ["UserRole", "ComplaintStatus", "OPEN_STATUSES", "FINISHED_STATUSES"]
