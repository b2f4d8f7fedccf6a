"""
Base service infrastructure: result objects and the common service base.
"""

from campus_complaints.services.base.base_service import BaseService
from campus_complaints.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
