from __future__ import annotations

import logging

from gymkeep.models.workout import SessionExercise, WorkoutSession
from gymkeep.repositories.workout import SessionExerciseRepository
from gymkeep.services._shared.base import BaseService
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import InvalidReferenceError, NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.uow import SQLAlchemyUnitOfWork, retry_transient

from ._converters import session_exercise_to_out, session_order_key
from .dto import SessionExerciseAddIn, SessionExerciseOut

logger = logging.getLogger(__name__)


class SessionExerciseService(BaseService):
    """Manage exercises inside a session (ad hoc additions and removals)."""

    def add_exercise(self, dto: SessionExerciseAddIn) -> SessionExerciseOut:
        """
        Add an exercise to a session with no set logs.

        ``order_in_session`` defaults to ``max + 1``. A ``plan_exercise_id``
        may only point at a row of the plan the session was started from.

        :raises NotFoundError: Session missing or not owned.
        :raises InvalidReferenceError: Unknown exercise, or a plan exercise
            outside the session's plan.
        """
        with self.store_errors("SessionExercise"), self.rw_uow() as uow:
            workout_session = self._locked_session(uow, dto.session_id)
            repo: SessionExerciseRepository = uow.session_exercises

            if uow.exercises.get_for_share(dto.exercise_id) is None:
                raise InvalidReferenceError("Exercise", dto.exercise_id, "exercise does not exist")

            if dto.plan_exercise_id is not None:
                plan_exercise = uow.plan_exercises.get_for_share(dto.plan_exercise_id)
                if (
                    plan_exercise is None
                    or workout_session.plan_id is None
                    or plan_exercise.plan_id != workout_session.plan_id
                ):
                    raise InvalidReferenceError(
                        "PlanExercise",
                        dto.plan_exercise_id,
                        "not part of the plan this session was started from",
                    )

            order = (
                dto.order_in_session
                if dto.order_in_session is not None
                else repo.next_order(workout_session.id)
            )
            row = repo.add(
                SessionExercise(
                    session_id=workout_session.id,
                    exercise_id=dto.exercise_id,
                    order_in_session=order,
                    plan_exercise_id=dto.plan_exercise_id,
                )
            )
            logger.info(
                "Session exercise added",
                extra={
                    "session_id": workout_session.id,
                    "session_exercise_id": row.id,
                    "order_in_session": order,
                },
            )
            return session_exercise_to_out(row, with_sets=False)

    @retry_transient
    def get_session_exercise(self, session_exercise_id: int) -> SessionExerciseOut:
        with self.store_errors("SessionExercise"), self.ro_uow() as uow:
            row = uow.session_exercises.get(session_exercise_id)
            if row is None:
                raise NotFoundError("SessionExercise", session_exercise_id)
            self.ensure_owner(
                row.session.user_id, entity="SessionExercise", key=session_exercise_id
            )
            return session_exercise_to_out(row)

    @retry_transient
    def list_session_exercises(self, session_id: int) -> list[SessionExerciseOut]:
        with self.store_errors("SessionExercise"), self.ro_uow() as uow:
            workout_session = uow.workout_sessions.get(session_id)
            if workout_session is None:
                raise NotFoundError("WorkoutSession", session_id)
            self.ensure_owner(workout_session.user_id, entity="WorkoutSession", key=session_id)
            rows = sorted(workout_session.exercises, key=session_order_key)
            return [session_exercise_to_out(r) for r in rows]

    @retry_transient
    def remove_exercise(self, session_id: int, session_exercise_id: int) -> DeleteOut:
        """Remove one exercise from a session together with its set logs."""
        with self.store_errors("SessionExercise"), self.rw_uow() as uow:
            self._locked_session(uow, session_id)
            if uow.session_exercises.get_in_session(session_id, session_exercise_id) is None:
                raise NotFoundError("SessionExercise", session_exercise_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(SessionExercise, [session_exercise_id]))
            return DeleteOut(
                entity="SessionExercise",
                entity_id=session_exercise_id,
                deleted=result.deleted,
                nulled=result.nulled,
            )

    # ------------------------------ Internals ----------------------------

    def _locked_session(self, uow: SQLAlchemyUnitOfWork, session_id: int) -> WorkoutSession:
        workout_session = uow.workout_sessions.get_for_update(session_id)
        if workout_session is None:
            raise NotFoundError("WorkoutSession", session_id)
        self.ensure_owner(workout_session.user_id, entity="WorkoutSession", key=session_id)
        return workout_session
