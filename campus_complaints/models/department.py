"""
Department model.

Departments scope Teacher and HOD visibility and complaint routing.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from campus_complaints.models.base import BaseModel

if TYPE_CHECKING:
    from campus_complaints.models.user import User

__all__ = ["Department"]


class Department(BaseModel):
    """Organizational unit with a globally unique name."""

    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        comment="Department name (globally unique)",
    )

    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="department",
    )

    def __repr__(self) -> str:
        return f"<Department id={self.id!r} name={self.name!r}>"
