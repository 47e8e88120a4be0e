"""
Unit tests for SQLAlchemyUnitOfWork (writer), using factories.
"""

from __future__ import annotations

import pytest

from gymkeep.models import User
from gymkeep.uow import SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


class TestSQLAlchemyUnitOfWorkWriter:
    def test_writer_uow_commits_on_success(self, db, session):
        """
        GIVEN a writer UoW
        WHEN a user is added through its repository and the block exits cleanly
        THEN the row is visible afterwards.
        """
        initial = session.query(User).count()

        with SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())

        assert session.query(User).count() == initial + 1

    def test_writer_uow_rolls_back_on_exception(self, db, session):
        """
        GIVEN a writer UoW
        WHEN an exception is raised inside the block
        THEN nothing is persisted and the exception propagates.
        """
        initial = session.query(User).count()

        with pytest.raises(RuntimeError), SQLAlchemyUnitOfWork() as uow:
            uow.users.add(UserFactory.build())
            raise RuntimeError("boom")

        assert session.query(User).count() == initial

    def test_repositories_share_the_session(self, db, session):
        with SQLAlchemyUnitOfWork() as uow:
            assert uow.plans.session is uow.set_logs.session is uow.session
