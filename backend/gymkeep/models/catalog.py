"""Exercise catalog models: difficulty levels, body regions and exercises."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymkeep.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class DifficultyLevel(PKMixin, ReprMixin, db.Model):
    """Reference list of difficulty levels (e.g. beginner, advanced)."""

    __tablename__ = "difficulty_levels"

    name: Mapped[str] = mapped_column(String(60), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_difficulty_levels_name"),)


class ExerciseRegion(PKMixin, ReprMixin, db.Model):
    """Reference list of body regions an exercise targets."""

    __tablename__ = "exercise_regions"

    name: Mapped[str] = mapped_column(String(60), nullable=False)

    __table_args__ = (UniqueConstraint("name", name="uq_exercise_regions_name"),)


class Exercise(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Shared catalog exercise.

    Plans and sessions reference exercises but never own them. Both the
    difficulty level and the region are restricted: they cannot be deleted
    while an exercise points at them.
    """

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    video_url: Mapped[str | None] = mapped_column(String(255))
    image_url: Mapped[str | None] = mapped_column(String(255))

    difficulty_level_id: Mapped[int] = mapped_column(
        ForeignKey("difficulty_levels.id", ondelete="RESTRICT"), nullable=False
    )
    region_id: Mapped[int] = mapped_column(
        ForeignKey("exercise_regions.id", ondelete="RESTRICT"), nullable=False
    )

    __table_args__ = (
        Index("ix_exercises_name", "name"),
        Index("ix_exercises_level_region", "difficulty_level_id", "region_id"),
        CheckConstraint("length(name) > 0", name="name_not_empty"),
    )

    difficulty_level: Mapped[DifficultyLevel] = relationship("DifficultyLevel", lazy="selectin")
    region: Mapped[ExerciseRegion] = relationship("ExerciseRegion", lazy="selectin")
