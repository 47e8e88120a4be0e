"""Per-set execution logs (actual performed sets)."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    UniqueConstraint,
    false,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from gymkeep.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .workout import SessionExercise

#: Name of the store-level uniqueness guard on ``(session_exercise_id, set_number)``.
SET_NUMBER_UNIQUE = "uq_set_logs_session_exercise_set"


class SetLog(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Recorded outcome of one numbered set within a session exercise.

    ``completed_at`` is derived from ``is_completed``: the service stamps it
    whenever a set is submitted as completed and clears it otherwise.
    """

    __tablename__ = "set_logs"

    session_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("session_exercises.id", ondelete="CASCADE"), nullable=False
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))
    reps_completed: Mapped[int | None] = mapped_column(Integer)
    is_completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint("session_exercise_id", "set_number", name=SET_NUMBER_UNIQUE),
        CheckConstraint("set_number >= 1", name="set_number_positive"),
    )

    session_exercise: Mapped[SessionExercise] = relationship(
        "SessionExercise", back_populates="set_logs"
    )

    @validates("set_number")
    def _validate_set_number(self, key: str, value: int) -> int:
        """Set numbers are 1-based."""
        if value is None or int(value) < 1:
            raise ValueError("SetLog.set_number must be >= 1")
        return int(value)

    @validates("reps_completed")
    def _validate_reps(self, key: str, value: int | None) -> int | None:
        if value is not None and int(value) < 0:
            raise ValueError("SetLog.reps_completed must be >= 0")
        return value

    @validates("weight")
    def _validate_weight(self, key: str, value: Decimal | float | None) -> Decimal | None:
        if value is None:
            return None
        weight = Decimal(str(value))
        if weight < 0:
            raise ValueError("SetLog.weight must be >= 0")
        return weight
