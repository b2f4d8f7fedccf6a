"""
Repository layer: specifications and model-specific query objects.
"""

from campus_complaints.repositories.base_repository import BaseRepository
from campus_complaints.repositories.complaint_repository import ComplaintRepository, NEWEST_FIRST
from campus_complaints.repositories.department_repository import DepartmentRepository
from campus_complaints.repositories.specifications import (
    AndSpecification,
    AssignedTo,
    EscalationDue,
    HasAnyStatus,
    HasStatus,
    InDepartment,
    IsEscalated,
    MatchAll,
    NotSpecification,
    OrSpecification,
    Specification,
    SubmittedBy,
)
from campus_complaints.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "ComplaintRepository",
    "DepartmentRepository",
    "UserRepository",
    "NEWEST_FIRST",
    "Specification",
    "AndSpecification",
    "OrSpecification",
    "NotSpecification",
    "MatchAll",
    "SubmittedBy",
    "AssignedTo",
    "InDepartment",
    "HasStatus",
    "HasAnyStatus",
    "IsEscalated",
    "EscalationDue",
]
