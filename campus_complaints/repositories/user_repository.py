"""
User repository: lookups by email, role and department.
"""

from typing import Iterable, List, Optional

from sqlalchemy import select

from campus_complaints.models.enums import UserRole
from campus_complaints.models.user import User
from campus_complaints.repositories.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):
    """Read access to user profiles."""

    model = User

    def get_by_email(self, email: str) -> Optional[User]:
        """Find a user by exact (case-insensitive) email."""
        return self.db.scalar(select(User).where(User.email == email.strip().lower()))

    def find_by_roles(self, roles: Iterable[UserRole]) -> List[User]:
        """
        Users holding any of ``roles``.

        Returns:
            Users ordered by first name, last name, id
        """
        roles = list(roles)
        if not roles:
            return []
        stmt = (
            select(User)
            .where(User.role.in_(roles))
            .order_by(User.first_name, User.last_name, User.id)
        )
        return list(self.db.scalars(stmt).unique())

    def find_department_members(self, department_id: Optional[int], role: UserRole) -> List[User]:
        """Users with ``role`` in a department; none when the department is unknown."""
        if department_id is None:
            return []
        stmt = (
            select(User)
            .where(User.role == role, User.department_id == department_id)
            .order_by(User.first_name, User.last_name, User.id)
        )
        return list(self.db.scalars(stmt).unique())


__all__ = ["UserRepository"]
