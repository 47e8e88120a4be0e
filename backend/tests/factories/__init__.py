"""Factory Boy helpers wired to the transactional test session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Hold the session handed over by the ``session`` fixture."""

    _session = None

    @classmethod
    def set(cls, session):
        cls._session = session

    @classmethod
    def get(cls):
        """Return the registered session.

        Raises
        ------
        RuntimeError
            If a factory runs outside a test that requested ``session``.
        """
        if cls._session is None:
            raise RuntimeError("Factories session not set. Did you pass the 'session' fixture?")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Persist through the per-test session and flush so ids are assigned."""

    class Meta:
        abstract = True
        # A callable keeps Factory Boy lazy: the fixture swaps the session per test.
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
