"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Services commit and
roll back their own savepoints inside that outer transaction.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from gymkeep.core.extensions import db as _db  # Flask-SQLAlchemy instance
from gymkeep.factory import create_app  # application factory under test
from gymkeep.services._shared.base import ServiceContext


class TestConfig:
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Retries transient store failures without sleeping.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    STORE_RETRY_ATTEMPTS = 3
    STORE_RETRY_MAX_WAIT_S = 0.0
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied and logging
        noise reduced.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture begins a top-level transaction and an outer SAVEPOINT per test.
    The session joins with ``create_savepoint``: every service commit releases
    the session's own inner SAVEPOINT and every rollback returns to it, while
    the outer one (SQLite would otherwise COMMIT on releasing the outermost
    SAVEPOINT) keeps the whole test undoable.
    """
    # 1) Top-level transaction plus the outer SAVEPOINT
    top_trans = connection.begin()
    connection.begin_nested()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    scoped = scoped_session(SessionFactory)

    # 3) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


class FrozenClock:
    """Injectable clock returning a fixed instant that tests can advance."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 3, 2, 18, 0, tzinfo=UTC))


@pytest.fixture()
def ctx_for():
    """Build a :class:`ServiceContext` acting as the given user (or its id)."""

    def _make(user) -> ServiceContext:
        return ServiceContext(actor_id=getattr(user, "id", user))

    return _make


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
