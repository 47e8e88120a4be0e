"""User-owned satellite records: settings, achievements, calorie calculations."""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
    false,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from gymkeep.core.extensions import db

from .base import PKMixin, ReprMixin


class UserSetting(PKMixin, ReprMixin, db.Model):
    """Per-user preferences (one row per user, created lazily)."""

    __tablename__ = "user_settings"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    daily_goal: Mapped[int | None] = mapped_column(Integer)
    is_dark_mode: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    notifications_enabled: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    notification_time: Mapped[time | None] = mapped_column(Time)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (UniqueConstraint("user_id", name="uq_user_settings_user"),)


class Achievement(PKMixin, ReprMixin, db.Model):
    """Milestone reached by a user."""

    __tablename__ = "achievements"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    achieved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("ix_achievements_user", "user_id"),)


class CalorieCalculation(PKMixin, ReprMixin, db.Model):
    """Stored inputs and results of a daily energy estimate."""

    __tablename__ = "calorie_calculations"

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    height_cm: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    weight_kg: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    gender: Mapped[str] = mapped_column(String(20), nullable=False)
    activity_level: Mapped[str] = mapped_column(String(40), nullable=False)
    goal: Mapped[str] = mapped_column(String(40), nullable=False)
    tdee: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    adjusted_calories: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (Index("ix_calorie_calculations_user", "user_id"),)

    @validates("age", "height_cm", "weight_kg")
    def _validate_inputs(self, key: str, value):
        """Body measurements must be positive."""
        if value is None or Decimal(str(value)) <= 0:
            raise ValueError(f"CalorieCalculation.{key} must be > 0")
        return int(value) if key == "age" else Decimal(str(value))

    @validates("tdee", "adjusted_calories")
    def _validate_results(self, key: str, value):
        if value is None or Decimal(str(value)) < 0:
            raise ValueError(f"CalorieCalculation.{key} must be >= 0")
        return Decimal(str(value))
