from __future__ import annotations

import logging

from gymkeep.models.set_log import SetLog
from gymkeep.models.workout import SessionExercise
from gymkeep.repositories.set_log import SetLogRepository
from gymkeep.services._shared.base import BaseService
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.services.sessions._converters import set_log_to_out
from gymkeep.uow import retry_transient

from .dto import LogSetIn, LogSetOut, SetLogOut

logger = logging.getLogger(__name__)


class SetLogService(BaseService):
    """
    Record per-set performance.

    :meth:`log_set` is an upsert keyed by ``(session_exercise_id, set_number)``:
    pre-materialized blank sets and ad hoc sets are handled the same way.
    Ended sessions still accept corrections.
    """

    @retry_transient
    def log_set(self, dto: LogSetIn) -> LogSetOut:
        """
        Insert or update one set.

        ``completed_at`` is stamped with the current time on every call that
        submits ``is_completed=True`` (including true to true) and cleared on
        every call that submits ``False``. The parent session exercise is
        locked ``FOR UPDATE`` so concurrent calls for the same exercise
        serialize; the unique key guarantees a single row per set number.

        :raises NotFoundError: Session exercise missing or not owned.
        :raises ValueError: ``set_number`` below 1, negative reps or weight.
        """
        if dto.set_number < 1:
            raise ValueError("set_number must be >= 1")

        with self.store_errors("SetLog"), self.rw_uow() as uow:
            parent = self._owned_parent(
                uow.session_exercises.get_for_update, dto.session_exercise_id
            )

            repo: SetLogRepository = uow.set_logs
            row, created = repo.upsert_log(
                session_exercise_id=parent.id,
                set_number=dto.set_number,
                weight=dto.weight,
                reps_completed=dto.reps_completed,
                is_completed=dto.is_completed,
                completed_at=self.clock() if dto.is_completed else None,
            )
            logger.info(
                "Set logged",
                extra={
                    "session_exercise_id": parent.id,
                    "set_number": dto.set_number,
                    "is_completed": dto.is_completed,
                    "created": created,
                },
            )
            return LogSetOut(set_log=set_log_to_out(row), created=created)

    @retry_transient
    def get_set_log(self, set_log_id: int) -> SetLogOut:
        with self.store_errors("SetLog"), self.ro_uow() as uow:
            row = uow.set_logs.get(set_log_id)
            if row is None:
                raise NotFoundError("SetLog", set_log_id)
            self.ensure_owner(
                row.session_exercise.session.user_id, entity="SetLog", key=set_log_id
            )
            return set_log_to_out(row)

    @retry_transient
    def list_set_logs(self, session_exercise_id: int) -> list[SetLogOut]:
        """Sets of one session exercise ordered by set number."""
        with self.store_errors("SetLog"), self.ro_uow() as uow:
            parent = self._owned_parent(uow.session_exercises.get, session_exercise_id)
            return [set_log_to_out(r) for r in uow.set_logs.list_for_session_exercise(parent.id)]

    @retry_transient
    def delete_set_log(self, set_log_id: int) -> DeleteOut:
        with self.store_errors("SetLog"), self.rw_uow() as uow:
            row = uow.set_logs.get_for_update(set_log_id)
            if row is None:
                raise NotFoundError("SetLog", set_log_id)
            self.ensure_owner(
                row.session_exercise.session.user_id, entity="SetLog", key=set_log_id
            )
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(SetLog, [set_log_id]))
            return DeleteOut(
                entity="SetLog", entity_id=set_log_id, deleted=result.deleted, nulled=result.nulled
            )

    # ------------------------------ Internals ----------------------------

    def _owned_parent(self, fetch, session_exercise_id: int) -> SessionExercise:
        parent = fetch(session_exercise_id)
        if parent is None:
            raise NotFoundError("SessionExercise", session_exercise_id)
        self.ensure_owner(
            parent.session.user_id, entity="SessionExercise", key=session_exercise_id
        )
        return parent
