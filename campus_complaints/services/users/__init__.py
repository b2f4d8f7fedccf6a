"""
User-facing services.

- UserService:
    Profile registration and actor resolution.
"""

from campus_complaints.services.users.user_service import UserService

__all__ = ["UserService"]
