"""Shared service-layer helpers: actor identity and unit of work."""

from campus_complaints.services.common.permissions import Actor, require_role, role_in
from campus_complaints.services.common.unit_of_work import TransactionError, UnitOfWork

__all__ = ["Actor", "require_role", "role_in", "TransactionError", "UnitOfWork"]
