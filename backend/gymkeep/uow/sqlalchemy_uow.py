"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from contextlib import suppress

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from gymkeep.core.extensions import db
from gymkeep.repositories import (
    CalorieCalculationRepository,
    DifficultyLevelRepository,
    ExerciseRegionRepository,
    ExerciseRepository,
    PlanExerciseRepository,
    SessionExerciseRepository,
    SetLogRepository,
    UserRepository,
    UserSettingRepository,
    WorkoutPlanRepository,
    WorkoutSessionRepository,
)
from gymkeep.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.user_settings = UserSettingRepository(session=self.session)
        self.calorie_calculations = CalorieCalculationRepository(session=self.session)
        self.difficulty_levels = DifficultyLevelRepository(session=self.session)
        self.regions = ExerciseRegionRepository(session=self.session)
        self.exercises = ExerciseRepository(session=self.session)
        self.plans = WorkoutPlanRepository(session=self.session)
        self.plan_exercises = PlanExerciseRepository(session=self.session)
        self.workout_sessions = WorkoutSessionRepository(session=self.session)
        self.session_exercises = SessionExerciseRepository(session=self.session)
        self.set_logs = SetLogRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    SQLAlchemy-backed UoW using the Flask-scoped session.

    Every repository shares one session, so cascades planned by the integrity
    coordinator and the root write land in the same transaction.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session begins lazily on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    - Applies ``SET TRANSACTION ISOLATION LEVEL`` and ``READ ONLY`` when it owns
      the transaction and the dialect supports them.
    - Installs write guards on the session (``before_flush``) and on the
      connection (``before_cursor_execute``) in every case.
    - Always rolls back on exit; :meth:`commit` raises.

    Parameters
    ----------
    isolation_level:
        Optional isolation hint (``"READ COMMITTED"`` by default).
    enforce_db_readonly:
        Issue ``SET TRANSACTION READ ONLY`` on PostgreSQL/MySQL.

    Notes
    -----
    SQLite has neither directive; the guards still block writes there.
    """

    _WRITE_PREFIXES = (
        "insert",
        "update",
        "delete",
        "merge",
        "alter",
        "drop",
        "truncate",
        "create",
        "replace",
        "grant",
        "revoke",
    )
    _ISOLATION_LEVELS = ("READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE", "READ UNCOMMITTED")

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly

        self._conn: Connection | None = None
        self._txn_ctx: SessionTransaction | None = None
        self._listeners_installed = False

    # ----------------------------- Context Manager -----------------------------

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """Open (or attach to) a transaction and install the write guards.

        When the session already has a transaction (autobegin, or the test
        fixture's outer transaction) the scope attaches to it and skips the
        ``SET TRANSACTION`` directives; the guards still apply.
        """
        self._txn_ctx = None
        self._conn = None

        try:
            txn_ctx = self.session.begin()
            txn_ctx.__enter__()
            self._txn_ctx = txn_ctx
        except InvalidRequestError:
            pass

        self._conn = self.session.connection()
        dialect = self._conn.dialect.name

        self._install_listeners()

        if self._txn_ctx is not None and dialect != "sqlite":
            try:
                if self.isolation_level:
                    iso = self.isolation_level.upper().strip()
                    if iso not in self._ISOLATION_LEVELS:
                        current_app.logger.warning(
                            "Unknown isolation_level '%s'; attempting as-is.", iso
                        )
                    self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {iso}"))

                if self.enforce_db_readonly and dialect in ("postgresql", "mysql", "mariadb"):
                    self.session.execute(text("SET TRANSACTION READ ONLY"))
            except SQLAlchemyError as exc:
                current_app.logger.warning(
                    "SET TRANSACTION directives failed (%s). Falling back to guards-only.", exc
                )

        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        """Remove guards; roll back only a transaction this scope owns."""
        try:
            if self._txn_ctx is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                try:
                    self._txn_ctx.__exit__(exc_type, exc, tb)
                finally:
                    self._txn_ctx = None
        finally:
            self._remove_listeners()
            self._conn = None

    # ----------------------------- Public API ---------------------------------

    def commit(self) -> None:
        """
        :raises RuntimeError: always; read-only scopes never commit.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # ----------------------------- Guards & Listeners --------------------------

    def _install_listeners(self) -> None:
        if self._listeners_installed:
            return

        def _before_flush(session, flush_context, instances):
            if session.new or session.dirty or session.deleted:
                raise RuntimeError(
                    "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
                )

        event.listen(self.session, "before_flush", _before_flush)

        def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            first_token = statement.lstrip().split(None, 1)[0].lower() if statement else ""
            if first_token.startswith(self._WRITE_PREFIXES):
                raise RuntimeError(
                    f"Read-only UnitOfWork: SQL statement blocked: {first_token.upper()}"
                )

        target = self._conn if self._conn is not None else self.session.get_bind()
        event.listen(target, "before_cursor_execute", _before_cursor_execute)

        self._ro__before_flush = _before_flush
        self._ro__before_cursor_execute = _before_cursor_execute
        self._listeners_installed = True

    def _remove_listeners(self) -> None:
        if not self._listeners_installed:
            return

        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._ro__before_flush)

        with suppress(InvalidRequestError):
            target = self._conn if self._conn is not None else self.session.get_bind()
            event.remove(target, "before_cursor_execute", self._ro__before_cursor_execute)

        self._listeners_installed = False
