"""Workout session models (actual executions)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from gymkeep.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Exercise
    from .plan import PlanExercise, WorkoutPlan
    from .set_log import SetLog
    from .user import User


class WorkoutSession(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    One timestamped execution of a workout, optionally derived from a plan.

    Lifecycle
    ---------
    ``started_at`` is assigned once at creation. The session is *active*
    while ``duration_minutes`` is ``None`` and *ended* afterwards; there is
    no way back. The plan link is provenance only: it is nulled when the plan
    is deleted while the session keeps its own exercise and set rows.
    """

    __tablename__ = "workout_sessions"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_minutes: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)
    plan_id: Mapped[int | None] = mapped_column(
        ForeignKey("workout_plans.id", ondelete="SET NULL")
    )

    __table_args__ = (
        Index("ix_ws_user_started", "user_id", "started_at"),
        Index("ix_ws_plan", "plan_id"),
    )

    # Relationships
    user: Mapped[User] = relationship("User", passive_deletes="all")
    plan: Mapped[WorkoutPlan | None] = relationship(
        "WorkoutPlan", passive_deletes="all", lazy="selectin"
    )
    exercises: Mapped[list[SessionExercise]] = relationship(
        "SessionExercise", back_populates="session", passive_deletes="all", lazy="selectin"
    )

    @property
    def is_ended(self) -> bool:
        """Return ``True`` once a duration has been recorded."""
        return self.duration_minutes is not None

    @validates("duration_minutes")
    def _validate_duration(self, key: str, value: int | None) -> int | None:
        if value is not None and int(value) < 0:
            raise ValueError("WorkoutSession.duration_minutes must be >= 0")
        return value


class SessionExercise(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Executed exercise inside a session.

    ``plan_exercise_id`` is set when the row was materialized from a plan and
    ``None`` when it was added by hand or its plan row was later deleted.
    """

    __tablename__ = "session_exercises"

    session_id: Mapped[int] = mapped_column(
        ForeignKey("workout_sessions.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False
    )
    order_in_session: Mapped[int | None] = mapped_column(Integer)
    plan_exercise_id: Mapped[int | None] = mapped_column(
        ForeignKey("plan_exercises.id", ondelete="SET NULL")
    )

    __table_args__ = (
        Index("ix_se_session", "session_id"),
        Index("ix_se_exercise", "exercise_id"),
        Index("ix_se_plan_exercise", "plan_exercise_id"),
    )

    # Relationships
    session: Mapped[WorkoutSession] = relationship("WorkoutSession", back_populates="exercises")
    exercise: Mapped[Exercise] = relationship("Exercise", lazy="selectin")
    plan_exercise: Mapped[PlanExercise | None] = relationship(
        "PlanExercise", passive_deletes="all"
    )
    set_logs: Mapped[list[SetLog]] = relationship(
        "SetLog", back_populates="session_exercise", passive_deletes="all", lazy="selectin"
    )
