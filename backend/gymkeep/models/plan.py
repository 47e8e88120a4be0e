"""Workout plan templates (ordered exercise prescriptions)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from gymkeep.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .catalog import Exercise
    from .user import User


class WorkoutPlan(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    User-owned reusable template.

    Notes
    -----
    - Deleting a plan removes its :class:`PlanExercise` rows; sessions started
      from it survive with ``plan_id`` cleared. The propagation is executed by
      :mod:`gymkeep.services.integrity`, the ``ondelete`` clauses mirror it
      at the store level.
    """

    __tablename__ = "workout_plans"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (Index("ix_workout_plans_user", "user_id"),)

    # Relationships
    user: Mapped[User] = relationship("User", passive_deletes="all")
    exercises: Mapped[list[PlanExercise]] = relationship(
        "PlanExercise", back_populates="plan", passive_deletes="all", lazy="selectin"
    )


class PlanExercise(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """One exercise prescription (sets x reps) inside a plan."""

    __tablename__ = "plan_exercises"

    plan_id: Mapped[int] = mapped_column(
        ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id", ondelete="RESTRICT"), nullable=False
    )
    sets: Mapped[int] = mapped_column(Integer, nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)
    rest_seconds: Mapped[int | None] = mapped_column(Integer)
    order_in_plan: Mapped[int | None] = mapped_column(Integer)

    __table_args__ = (
        # Same exercise twice in a plan is rejected by the service, not the schema.
        Index("ix_plan_exercises_plan_exercise", "plan_id", "exercise_id"),
        CheckConstraint("sets >= 1", name="sets_positive"),
        CheckConstraint("reps >= 1", name="reps_positive"),
    )

    # Relationships
    plan: Mapped[WorkoutPlan] = relationship("WorkoutPlan", back_populates="exercises")
    exercise: Mapped[Exercise] = relationship("Exercise", lazy="selectin")

    @validates("sets", "reps")
    def _validate_positive(self, key: str, value: int) -> int:
        """Reject prescriptions below one set or one rep."""
        if value is None or int(value) < 1:
            raise ValueError(f"PlanExercise.{key} must be >= 1")
        return int(value)

    @validates("rest_seconds")
    def _validate_rest(self, key: str, value: int | None) -> int | None:
        if value is not None and int(value) < 0:
            raise ValueError("PlanExercise.rest_seconds must be >= 0")
        return value
