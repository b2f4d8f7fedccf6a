"""
Actor identity and role helpers.

The identity collaborator resolves the current user into an ``Actor``;
every policy decision is taken from the actor's role and department.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from campus_complaints.core.exceptions import AuthorizationError
from campus_complaints.models.enums import UserRole

if TYPE_CHECKING:
    from campus_complaints.models.user import User


@dataclass(frozen=True)
class Actor:
    """
    Represents an authenticated user in the service layer.

    Attributes:
        user_id: Unique identifier for the user
        role: Primary role, or None when the user was never given one
        department_id: Department membership, if any
    """
    user_id: str
    role: Optional[UserRole] = None
    department_id: Optional[int] = None

    @classmethod
    def from_user(cls, user: "User") -> "Actor":
        """Build an actor from a persisted user profile."""
        return cls(user_id=user.id, role=user.role, department_id=user.department_id)

    @property
    def effective_role(self) -> UserRole:
        """Role used for policy decisions; a missing role is least-privileged."""
        return self.role if self.role is not None else UserRole.STUDENT

    def has_any_role(self, roles: Iterable[UserRole]) -> bool:
        """Check if actor has any of the specified roles."""
        return self.effective_role in set(roles)


def role_in(actor: Actor, allowed_roles: Iterable[UserRole]) -> bool:
    """
    Check if actor's role is in the allowed set.

    Example:
        >>> if role_in(actor, [UserRole.ADMIN, UserRole.HOD]):
        ...     # Allow access
    """
    return actor.has_any_role(allowed_roles)


def require_role(
    actor: Actor,
    allowed_roles: Iterable[UserRole],
    *,
    error_message: Optional[str] = None,
) -> None:
    """
    Assert that actor has one of the allowed roles.

    Raises:
        AuthorizationError: If actor lacks required role
    """
    allowed_roles = list(allowed_roles)
    if not role_in(actor, allowed_roles):
        roles_str = ", ".join(r.label for r in allowed_roles)
        msg = error_message or (
            f"User {actor.user_id} with role '{actor.effective_role.label}' "
            f"does not have one of required roles: {roles_str}"
        )
        raise AuthorizationError(msg, required_permission=roles_str)


__all__ = ["Actor", "role_in", "require_role"]
