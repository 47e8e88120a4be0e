from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time


@dataclass(frozen=True, slots=True)
class UserCreateIn:
    email: str
    username: str


@dataclass(frozen=True, slots=True)
class UserOut:
    id: int
    email: str
    username: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class SettingsUpdateIn:
    """Partial settings update; ``None`` keeps the stored (or default) value."""

    daily_goal: int | None = None
    is_dark_mode: bool | None = None
    notifications_enabled: bool | None = None
    notification_time: time | None = None


@dataclass(frozen=True, slots=True)
class SettingsOut:
    user_id: int
    daily_goal: int | None
    is_dark_mode: bool
    notifications_enabled: bool
    notification_time: time | None
