"""Repositories for user-owned satellite rows."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from gymkeep.models.account import CalorieCalculation, UserSetting
from gymkeep.repositories.base import BaseRepository


class UserSettingRepository(BaseRepository[UserSetting]):
    """One settings row per user, created on first write."""

    model = UserSetting

    def _filterable_fields(self):
        return {"user_id": UserSetting.user_id}

    def _updatable_fields(self):
        return {"daily_goal", "is_dark_mode", "notifications_enabled", "notification_time"}

    def get_by_user(self, user_id: int) -> UserSetting | None:
        stmt = select(UserSetting).where(UserSetting.user_id == user_id)
        return cast(UserSetting | None, self.session.execute(stmt).scalars().first())

    def get_by_user_for_update(self, user_id: int) -> UserSetting | None:
        stmt = select(UserSetting).where(UserSetting.user_id == user_id).with_for_update()
        return cast(UserSetting | None, self.session.execute(stmt).scalars().first())


class CalorieCalculationRepository(BaseRepository[CalorieCalculation]):
    """Append-only history of a user's calorie calculations."""

    model = CalorieCalculation

    def _sortable_fields(self):
        return {"id": CalorieCalculation.id, "calculated_at": CalorieCalculation.calculated_at}

    def _filterable_fields(self):
        return {"user_id": CalorieCalculation.user_id}

    def list_for_user(self, user_id: int) -> list[CalorieCalculation]:
        """Newest first; ties broken by id, newest first as well."""
        stmt = (
            select(CalorieCalculation)
            .where(CalorieCalculation.user_id == user_id)
            .order_by(CalorieCalculation.calculated_at.desc(), CalorieCalculation.id.desc())
        )
        return list(self.session.execute(stmt).scalars().all())
