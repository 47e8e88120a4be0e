from __future__ import annotations

import logging
from datetime import UTC, datetime

from gymkeep.services._shared.base import BaseService, as_utc
from gymkeep.services._shared.errors import NotFoundError
from gymkeep.uow import retry_transient

from ._converters import session_to_detail, session_to_summary
from .dto import SessionDetailOut, SessionListIn, SessionSummaryOut

logger = logging.getLogger(__name__)


def _to_utc(value: datetime | None) -> datetime | None:
    """Compare window bounds in UTC; naive values are taken as UTC already."""
    return as_utc(value).astimezone(UTC) if value is not None else None


class SessionQueryService(BaseService):
    """Read-only projections of the acting user's sessions."""

    @retry_transient
    def get_session(self, session_id: int) -> SessionDetailOut:
        """Session with exercises in session order and sets by set number."""
        with self.store_errors("WorkoutSession"), self.ro_uow() as uow:
            workout_session = uow.workout_sessions.get(session_id)
            if workout_session is None:
                raise NotFoundError("WorkoutSession", session_id)
            self.ensure_owner(workout_session.user_id, entity="WorkoutSession", key=session_id)
            return session_to_detail(workout_session)

    @retry_transient
    def list_sessions(self, dto: SessionListIn | None = None) -> list[SessionSummaryOut]:
        """Newest first, optionally bounded (inclusive) on ``started_at``."""
        dto = dto or SessionListIn()
        actor_id = self.require_actor()
        with self.store_errors("WorkoutSession"), self.ro_uow() as uow:
            rows = uow.workout_sessions.list_for_user_with_stats(
                actor_id, date_from=_to_utc(dto.date_from), date_to=_to_utc(dto.date_to)
            )
            logger.debug("Listed sessions", extra={"user_id": actor_id, "count": len(rows)})
            return [
                session_to_summary(ws, exercise_count=n_ex, completed_sets=n_done)
                for ws, n_ex, n_done in rows
            ]
