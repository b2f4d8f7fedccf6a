"""
Department repository.
"""

from typing import List, Optional

from sqlalchemy import select

from campus_complaints.models.department import Department
from campus_complaints.repositories.base_repository import BaseRepository


class DepartmentRepository(BaseRepository[Department]):
    """Read access to departments."""

    model = Department

    def list_all(self) -> List[Department]:
        """All departments ordered by name."""
        return list(self.db.scalars(select(Department).order_by(Department.name)).unique())

    def get_by_name(self, name: str) -> Optional[Department]:
        return self.db.scalar(select(Department).where(Department.name == name))


__all__ = ["DepartmentRepository"]
