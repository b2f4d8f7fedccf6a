"""
User profile model.

Stores the identity attributes the policy core needs (role and
department). Credentials live with the identity provider, not here.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
from uuid import uuid4

from sqlalchemy import Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_complaints.models.base import BaseModel, UTCDateTime, utcnow
from campus_complaints.models.enums import UserRole

if TYPE_CHECKING:
    from campus_complaints.models.complaint import Complaint
    from campus_complaints.models.department import Department

__all__ = ["User"]


class User(BaseModel):
    """
    Participant in the complaint workflow.

    Attributes:
        email: Unique login/contact address
        first_name: Given name
        last_name: Family name
        role: Primary role; None is treated as least-privileged
        department_id: Optional department membership
    """

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_role_department", "role", "department_id"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
        comment="Primary key (UUID)",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")

    role: Mapped[Optional[UserRole]] = mapped_column(
        Enum(UserRole, name="user_role", native_enum=False, length=20),
        nullable=True,
        comment="Primary role of the user",
    )

    department_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False, default=utcnow)

    department: Mapped[Optional["Department"]] = relationship(
        "Department",
        back_populates="users",
        lazy="joined",
    )

    submitted_complaints: Mapped[List["Complaint"]] = relationship(
        "Complaint",
        back_populates="submitter",
        foreign_keys="Complaint.submitter_id",
    )

    assigned_complaints: Mapped[List["Complaint"]] = relationship(
        "Complaint",
        back_populates="assignee",
        foreign_keys="Complaint.assignee_id",
    )

    @property
    def display_name(self) -> str:
        """Full name as shown in recipient pickers."""
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User id={self.id!r} role={self.role!r}>"
