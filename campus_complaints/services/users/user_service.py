"""
User service: profile registration and actor resolution.

Credentials are held by the identity provider; this service only keeps
the profile attributes the complaint policy needs.
"""

from typing import Any, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_complaints.core.clock import Clock
from campus_complaints.core.exceptions import DuplicateEntryError, ValidationError
from campus_complaints.models.user import User
from campus_complaints.repositories.department_repository import DepartmentRepository
from campus_complaints.repositories.user_repository import UserRepository
from campus_complaints.schemas.user import UserRegistration
from campus_complaints.services.base import BaseService, ServiceResult
from campus_complaints.services.common.permissions import Actor


class UserService(BaseService):
    """Creates user profiles and resolves them into actors."""

    def __init__(self, db_session: Session, clock: Optional[Clock] = None):
        super().__init__(db_session, clock)
        self.users = UserRepository(db_session)
        self.departments = DepartmentRepository(db_session)

    def register(self, request: Union[UserRegistration, Dict[str, Any]]) -> ServiceResult[User]:
        """
        Create a user profile.

        Args:
            request: Registration data; Students and Teachers need a department

        Returns:
            ServiceResult containing the new user, VALIDATION_ERROR or
            ALREADY_EXISTS when the email is taken
        """
        try:
            if not isinstance(request, UserRegistration):
                try:
                    request = UserRegistration.model_validate(request)
                except PydanticValidationError as exc:
                    raise ValidationError.from_pydantic(exc, "Invalid registration") from exc

            if request.department_id is not None and self.departments.get_by_id(request.department_id) is None:
                raise ValidationError(
                    f"Department {request.department_id} does not exist",
                    field="department_id",
                )

            if self.users.get_by_email(request.email) is not None:
                raise DuplicateEntryError("User", "email", request.email)

            user = User(
                email=request.email,
                first_name=request.first_name,
                last_name=request.last_name,
                role=request.role,
                department_id=request.department_id,
                created_at=self.clock.now(),
            )
            try:
                with self.transaction():
                    self.users.add(user)
            except IntegrityError as exc:
                # Lost a race with a concurrent registration of the same email.
                raise DuplicateEntryError("User", "email", request.email) from exc

            self._logger.info(f"Registered {user.role.label} {user.id}")
            return ServiceResult.success(user, message="User registered successfully")
        except Exception as e:
            return self._handle_exception(e, "register user")

    def resolve_actor(self, user_id: str) -> ServiceResult[Actor]:
        """
        Identity lookup for the policy core.

        Returns:
            ServiceResult containing the actor, or NOT_FOUND
        """
        try:
            user = self.users.get_or_raise(user_id)
            return ServiceResult.success(Actor.from_user(user))
        except Exception as e:
            return self._handle_exception(e, "resolve actor", user_id)


__all__ = ["UserService"]
