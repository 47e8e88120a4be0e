"""User repository (identity lookups only)."""

from __future__ import annotations

from typing import cast

from sqlalchemy import or_, select

from gymkeep.models.user import User
from gymkeep.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`."""

    model = User

    # ---------------------------- Whitelists ----------------------------

    def _sortable_fields(self):
        return {
            "id": User.id,
            "email": User.email,
            "username": User.username,
            "created_at": User.created_at,
        }

    def _filterable_fields(self):
        return {
            "email": User.email,
            "username": User.username,
        }

    def _updatable_fields(self):
        return {"email", "username"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        return cast(User | None, self.session.execute(stmt).scalars().first())

    def identity_taken(self, email: str, username: str) -> bool:
        """Return ``True`` when either the email or the username is in use."""
        stmt = select(User.id).where(
            or_(User.email == email.lower().strip(), User.username == username.strip())
        )
        return self.session.execute(stmt).first() is not None
