"""
Role hierarchy and routing table.

Defines which roles a creator may route a complaint to and how the
creator's department narrows the candidates.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from campus_complaints.models.enums import UserRole


class DepartmentScope(str, Enum):
    """How the creator's department constrains candidates."""

    # Same department only; a creator without a department gets nobody.
    SAME_DEPARTMENT = "same_department"
    # Same department, or anyone when the creator has no department.
    SAME_OR_ANY = "same_or_any"
    ANY = "any"


@dataclass(frozen=True)
class RoutingRule:
    """One candidate role reachable from a creator role."""

    candidate_role: UserRole
    scope: DepartmentScope

    def admits(self, creator_department_id: Optional[int], candidate_department_id: Optional[int]) -> bool:
        """Check the department constraint for one candidate."""
        if self.scope is DepartmentScope.ANY:
            return True
        if creator_department_id is None:
            return self.scope is DepartmentScope.SAME_OR_ANY
        return candidate_department_id == creator_department_id


ROUTING_TABLE: Mapping[UserRole, Tuple[RoutingRule, ...]] = {
    UserRole.STUDENT: (
        RoutingRule(UserRole.TEACHER, DepartmentScope.SAME_DEPARTMENT),
        RoutingRule(UserRole.HOD, DepartmentScope.SAME_OR_ANY),
    ),
    UserRole.TEACHER: (
        RoutingRule(UserRole.HOD, DepartmentScope.SAME_OR_ANY),
    ),
    UserRole.HOD: (
        RoutingRule(UserRole.ADMIN, DepartmentScope.ANY),
    ),
    UserRole.ADMIN: (),
}

_unrouted = set(UserRole) - set(ROUTING_TABLE)
if _unrouted:
    raise RuntimeError(f"Routing table is missing roles: {sorted(r.value for r in _unrouted)}")

# Recipient groups are listed in routing order, lowest rank first.
GROUP_RANK: Mapping[UserRole, int] = {
    UserRole.TEACHER: 0,
    UserRole.HOD: 1,
    UserRole.ADMIN: 2,
}

GROUP_LABELS: Mapping[UserRole, str] = {
    UserRole.TEACHER: "Teachers",
    UserRole.HOD: "Heads of Department",
    UserRole.ADMIN: "Administrators",
}


def rules_for(role: UserRole) -> Tuple[RoutingRule, ...]:
    """Routing rules for a creator role."""
    return ROUTING_TABLE[role]


def candidate_roles(role: UserRole) -> Tuple[UserRole, ...]:
    """Roles a creator with ``role`` may route to."""
    return tuple(rule.candidate_role for rule in rules_for(role))


__all__ = [
    "DepartmentScope",
    "RoutingRule",
    "ROUTING_TABLE",
    "GROUP_RANK",
    "GROUP_LABELS",
    "rules_for",
    "candidate_roles",
]
