"""
Recipient resolver.

Enumerates the users a creating actor may route a new complaint to,
grouped by role in routing order.
"""

from typing import Iterable, List, Optional

from campus_complaints.models.user import User
from campus_complaints.schemas.complaint import RecipientOption
from campus_complaints.services.common.permissions import Actor
from campus_complaints.services.complaint.routing import GROUP_LABELS, GROUP_RANK, rules_for


def resolve_recipients(actor: Actor, candidates: Iterable[User]) -> List[RecipientOption]:
    """
    Eligible recipients for a complaint raised by ``actor``.

    Args:
        actor: Creating actor
        candidates: Users to consider, typically every user holding one of
            the actor's candidate roles

    Returns:
        Options without duplicate ids, ordered Teachers, then Heads of
        Department, then Administrators, and by display name and id within
        each group. An empty list is a valid result.
    """
    rules = {rule.candidate_role: rule for rule in rules_for(actor.effective_role)}
    if not rules:
        return []

    seen = set()
    eligible: List[User] = []
    for candidate in candidates:
        if candidate.id in seen or candidate.role not in rules:
            continue
        if not rules[candidate.role].admits(actor.department_id, candidate.department_id):
            continue
        seen.add(candidate.id)
        eligible.append(candidate)

    eligible.sort(key=lambda user: (GROUP_RANK[user.role], user.display_name, user.id))

    return [
        RecipientOption(
            id=user.id,
            display_name=user.display_name,
            group_label=GROUP_LABELS[user.role],
        )
        for user in eligible
    ]


def find_option(options: Iterable[RecipientOption], recipient_id: Optional[str]) -> Optional[RecipientOption]:
    """The option with ``recipient_id``, or None."""
    if recipient_id is None:
        return None
    return next((option for option in options if option.id == recipient_id), None)


__all__ = ["resolve_recipients", "find_option"]
