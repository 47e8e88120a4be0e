"""Workout session repositories: sessions and their executed exercises."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute

from gymkeep.models.set_log import SetLog
from gymkeep.models.workout import SessionExercise, WorkoutSession
from gymkeep.repositories.base import BaseRepository, nulls_last_order


class WorkoutSessionRepository(BaseRepository[WorkoutSession]):
    """
    Persistence-only repository for
    :class:`gymkeep.models.workout.WorkoutSession`.

    - Read patterns: by user and ``started_at`` window, newest first.
    - Summary aggregates (exercise and completed-set counts) are computed in
      SQL so listing does not load every set row.
    """

    model = WorkoutSession

    # ----------------------------- Whitelists ---------------------------------
    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "started_at": self.model.started_at,
            "duration_minutes": self.model.duration_minutes,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {
            "id": self.model.id,
            "user_id": self.model.user_id,
            "plan_id": self.model.plan_id,
        }

    def _updatable_fields(self) -> set[str]:
        # started_at and user_id are immutable after creation
        return {"duration_minutes", "notes"}

    # ----------------------------- Listing ------------------------------------
    def list_for_user_with_stats(
        self,
        user_id: int,
        *,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[tuple[WorkoutSession, int, int]]:
        """Return ``(session, exercise_count, completed_sets)`` rows, newest first.

        :param user_id: Owning user.
        :type user_id: int
        :param date_from: Inclusive lower bound on ``started_at``.
        :type date_from: datetime | None
        :param date_to: Inclusive upper bound on ``started_at``.
        :type date_to: datetime | None
        :rtype: list[tuple[WorkoutSession, int, int]]
        """
        exercise_counts = (
            select(SessionExercise.session_id, func.count(SessionExercise.id).label("n"))
            .group_by(SessionExercise.session_id)
            .subquery()
        )
        completed_counts = (
            select(SessionExercise.session_id, func.count(SetLog.id).label("n"))
            .join(SetLog, SetLog.session_exercise_id == SessionExercise.id)
            .where(SetLog.is_completed.is_(True))
            .group_by(SessionExercise.session_id)
            .subquery()
        )
        stmt: Select[Any] = (
            select(
                self.model,
                func.coalesce(exercise_counts.c.n, 0),
                func.coalesce(completed_counts.c.n, 0),
            )
            .outerjoin(exercise_counts, exercise_counts.c.session_id == self.model.id)
            .outerjoin(completed_counts, completed_counts.c.session_id == self.model.id)
            .where(self.model.user_id == user_id)
        )
        if date_from is not None:
            stmt = stmt.where(self.model.started_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(self.model.started_at <= date_to)
        stmt = stmt.order_by(self.model.started_at.desc(), self.model.id.desc())
        return [(row[0], int(row[1]), int(row[2])) for row in self.session.execute(stmt).all()]


class SessionExerciseRepository(BaseRepository[SessionExercise]):
    """Persist :class:`SessionExercise` rows and compute their positions."""

    model = SessionExercise

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "order_in_session": self.model.order_in_session}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {
            "id": self.model.id,
            "session_id": self.model.session_id,
            "exercise_id": self.model.exercise_id,
            "plan_exercise_id": self.model.plan_exercise_id,
        }

    def _updatable_fields(self) -> set[str]:
        return {"order_in_session"}

    def list_ordered(self, session_id: int) -> list[SessionExercise]:
        """Session rows by ``order_in_session`` (nulls last) then id."""
        stmt = (
            select(self.model)
            .where(self.model.session_id == session_id)
            .order_by(*nulls_last_order(self.model.order_in_session), self.model.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    def get_in_session(self, session_id: int, session_exercise_id: int) -> SessionExercise | None:
        stmt = select(self.model).where(
            and_(self.model.id == session_exercise_id, self.model.session_id == session_id)
        )
        return cast(SessionExercise | None, self.session.execute(stmt).scalars().first())

    def next_order(self, session_id: int) -> int:
        """Return ``max(order_in_session) + 1``, or ``1`` for an empty session."""
        q = select(func.coalesce(func.max(self.model.order_in_session), 0) + 1).where(
            self.model.session_id == session_id
        )
        return int(self.session.execute(q).scalar_one())
