"""Read-only unit of work: write guards apply on every dialect."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from gymkeep.models.user import User
from gymkeep.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from gymkeep.uow import SQLAlchemyUnitOfWork as RWuow
from tests.factories.user import UserFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_blocks_orm_flush_writes(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_blocks_core_dml(self, db, session):
        email = UserFactory.build().email
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(
                text("INSERT INTO users (email, username) VALUES (:email, 'x')"), {"email": email}
            )

    def test_allows_reads(self, db, session):
        with RWuow() as uow:
            uow.users.add(UserFactory.build())

        with ROuow() as uow:
            assert uow.users.count() >= 1

    def test_disallows_commit(self, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_mutation_never_persists(self, db, session):
        with RWuow() as uow:
            user = uow.users.add(UserFactory.build())
            user_id = user.id

        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            u = uow.session.get(User, user_id)
            original_email = u.email
            u.email = "mutated-in-ro@example.com"
            uow.session.flush()

        with RWuow() as uow:
            assert uow.session.get(User, user_id).email == original_email
