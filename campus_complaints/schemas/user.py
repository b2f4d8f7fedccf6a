"""
User registration schema.
"""

from typing import Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from campus_complaints.models.enums import UserRole
from campus_complaints.schemas.base import BaseCreateSchema

__all__ = ["UserRegistration", "SELF_SERVICE_ROLES"]

# Roles that may sign up on their own; HODs and admins are provisioned.
SELF_SERVICE_ROLES = frozenset({UserRole.STUDENT, UserRole.TEACHER})


class UserRegistration(BaseCreateSchema):
    """
    Profile data for a new user.

    Students and Teachers must belong to a department.
    """

    email: EmailStr = Field(..., description="Email address (must be unique)")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = Field(default=UserRole.STUDENT)
    department_id: Optional[int] = Field(default=None)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase and trim whitespace."""
        return v.lower().strip()

    @model_validator(mode="after")
    def require_department_for_members(self) -> "UserRegistration":
        if self.role in SELF_SERVICE_ROLES and self.department_id is None:
            raise ValueError(f"{self.role.label} registration requires a department")
        return self
