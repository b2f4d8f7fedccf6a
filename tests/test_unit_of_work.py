"""UnitOfWork transaction handling."""

import pytest
from sqlalchemy import func, select

from campus_complaints.models import Department
from campus_complaints.repositories.department_repository import DepartmentRepository
from campus_complaints.services.common.unit_of_work import UnitOfWork


def count_departments(session_factory):
    with session_factory() as session:
        return session.scalar(select(func.count()).select_from(Department))


def test_commits_on_success(session_factory):
    with UnitOfWork(session_factory) as uow:
        uow.get_repo(DepartmentRepository).add(Department(name="Physics"))

    assert uow.is_committed
    assert uow.session is None
    assert count_departments(session_factory) == 1


def test_rolls_back_on_error(session_factory):
    uow = UnitOfWork(session_factory)

    with pytest.raises(RuntimeError):
        with uow:
            uow.get_repo(DepartmentRepository).add(Department(name="Physics"))
            raise RuntimeError("boom")

    assert uow.is_rolled_back
    assert count_departments(session_factory) == 0


def test_no_auto_commit(session_factory):
    with UnitOfWork(session_factory, auto_commit=False) as uow:
        uow.get_repo(DepartmentRepository).add(Department(name="Physics"))

    assert not uow.is_committed
    assert count_departments(session_factory) == 0


def test_repositories_are_cached_per_context(session_factory):
    with UnitOfWork(session_factory) as uow:
        assert uow.get_repo(DepartmentRepository) is uow.get_repo(DepartmentRepository)
        assert uow.get_repo(DepartmentRepository).db is uow.session


def test_outside_context_is_an_error(session_factory):
    uow = UnitOfWork(session_factory)

    with pytest.raises(RuntimeError):
        uow.get_repo(DepartmentRepository)
    with pytest.raises(RuntimeError):
        uow.commit()
