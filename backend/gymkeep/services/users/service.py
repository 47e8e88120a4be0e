from __future__ import annotations

import logging

from gymkeep.models import User, UserSetting
from gymkeep.services._shared.base import BaseService
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import ConflictError, NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.uow import retry_transient

from .dto import SettingsOut, SettingsUpdateIn, UserCreateIn, UserOut

logger = logging.getLogger(__name__)

#: Values reported for a user that never saved settings.
DEFAULT_SETTINGS = {
    "daily_goal": None,
    "is_dark_mode": False,
    "notifications_enabled": True,
    "notification_time": None,
}


def _user_to_out(row: User) -> UserOut:
    return UserOut(id=row.id, email=row.email, username=row.username, created_at=row.created_at)


def _settings_to_out(user_id: int, row: UserSetting | None) -> SettingsOut:
    if row is None:
        return SettingsOut(user_id=user_id, **DEFAULT_SETTINGS)
    return SettingsOut(
        user_id=user_id,
        daily_goal=row.daily_goal,
        is_dark_mode=row.is_dark_mode,
        notifications_enabled=row.notifications_enabled,
        notification_time=row.notification_time,
    )


class UserService(BaseService):
    """
    Identity rows and per-user settings.

    Registration proper (credentials) belongs to the authentication
    collaborator; this service only records the identity every owned
    aggregate points to, and deletes it with everything it owns.
    """

    def create_user(self, dto: UserCreateIn) -> UserOut:
        """
        :raises ConflictError: Email or username already taken.
        """
        with self.store_errors("User"), self.rw_uow() as uow:
            if uow.users.identity_taken(dto.email, dto.username):
                raise ConflictError("User", "email or username already in use")
            user = uow.users.add(User(email=dto.email, username=dto.username))
            uow.session.refresh(user)
            logger.info("User created", extra={"user_id": user.id})
            return _user_to_out(user)

    @retry_transient
    def get_user(self, user_id: int) -> UserOut:
        self.ensure_owner(user_id, entity="User", key=user_id)
        with self.store_errors("User"), self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return _user_to_out(user)

    @retry_transient
    def delete_user(self, user_id: int) -> DeleteOut:
        """Delete the acting user with plans, sessions and satellite rows."""
        self.ensure_owner(user_id, entity="User", key=user_id)
        with self.store_errors("User"), self.rw_uow() as uow:
            if uow.users.get_for_update(user_id) is None:
                raise NotFoundError("User", user_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(User, [user_id]))
            return DeleteOut(
                entity="User", entity_id=user_id, deleted=result.deleted, nulled=result.nulled
            )

    # ------------------------------ Settings -----------------------------

    @retry_transient
    def get_settings(self, user_id: int) -> SettingsOut:
        """Stored settings, or :data:`DEFAULT_SETTINGS` when none were saved."""
        self.ensure_owner(user_id, entity="User", key=user_id)
        with self.store_errors("UserSetting"), self.ro_uow() as uow:
            if uow.users.get(user_id) is None:
                raise NotFoundError("User", user_id)
            return _settings_to_out(user_id, uow.user_settings.get_by_user(user_id))

    @retry_transient
    def update_settings(self, user_id: int, dto: SettingsUpdateIn) -> SettingsOut:
        """Upsert the single settings row; omitted fields keep their value."""
        self.ensure_owner(user_id, entity="User", key=user_id)
        with self.store_errors("UserSetting"), self.rw_uow() as uow:
            if uow.users.get_for_update(user_id) is None:
                raise NotFoundError("User", user_id)

            row = uow.user_settings.get_by_user_for_update(user_id)
            if row is None:
                row = uow.user_settings.add(UserSetting(user_id=user_id, **DEFAULT_SETTINGS))

            updates = {
                key: getattr(dto, key)
                for key in DEFAULT_SETTINGS
                if getattr(dto, key) is not None
            }
            if updates:
                uow.user_settings.assign_updates(row, updates)

            logger.info(
                "User settings saved", extra={"user_id": user_id, "fields": sorted(updates)}
            )
            return _settings_to_out(user_id, row)
