"""User registration and actor resolution."""

import pytest

from campus_complaints.models import User, UserRole
from campus_complaints.services.base import ErrorCode
from campus_complaints.services.common.permissions import Actor
from campus_complaints.services.users.user_service import UserService
from tests.conftest import T0


@pytest.fixture
def service(db, clock):
    return UserService(db, clock=clock)


@pytest.fixture
def cs(make_department):
    return make_department("Computer Science")


def registration(department_id, **overrides):
    data = {
        "email": "Priya.Shah@College.EDU",
        "first_name": "Priya",
        "last_name": "Shah",
        "role": UserRole.STUDENT,
        "department_id": department_id,
    }
    data.update(overrides)
    return data


def test_register_student(db, service, cs):
    result = service.register(registration(cs.id))

    assert result.is_success
    user = db.get(User, result.data.id)
    assert user.email == "priya.shah@college.edu"
    assert user.role == UserRole.STUDENT
    assert user.department_id == cs.id
    assert user.created_at == T0


@pytest.mark.parametrize("role", [UserRole.STUDENT, UserRole.TEACHER])
def test_students_and_teachers_need_a_department(service, role):
    result = service.register(registration(None, role=role))

    assert result.error_code == ErrorCode.VALIDATION_ERROR


def test_admin_may_register_without_department(service):
    result = service.register(registration(None, role=UserRole.ADMIN, email="dean@college.edu"))

    assert result.is_success
    assert result.data.department_id is None


def test_unknown_department(service):
    result = service.register(registration(999))

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert result.error.field == "department_id"


def test_invalid_email(service, cs):
    result = service.register(registration(cs.id, email="not-an-email"))

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert "email" in result.error.details["field_errors"]


def test_duplicate_email_is_case_insensitive(service, cs):
    assert service.register(registration(cs.id)).is_success

    again = service.register(registration(cs.id, email="PRIYA.SHAH@college.edu"))

    assert again.error_code == ErrorCode.ALREADY_EXISTS


def test_resolve_actor(service, make_user, cs):
    hod = make_user(UserRole.HOD, cs)

    actor = service.resolve_actor(hod.id).unwrap()

    assert actor == Actor(hod.id, UserRole.HOD, cs.id)


def test_resolve_unknown_actor(service):
    assert service.resolve_actor("ghost").error_code == ErrorCode.NOT_FOUND
