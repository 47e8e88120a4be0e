from __future__ import annotations

import logging
import math

from gymkeep.models.workout import WorkoutSession
from gymkeep.repositories.workout import WorkoutSessionRepository
from gymkeep.services._shared.base import BaseService, as_utc
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import ConflictError, NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.uow import SQLAlchemyUnitOfWork, retry_transient

from ._converters import session_to_summary
from .dto import SessionEndIn, SessionFreeIn, SessionFromPlanIn, SessionStartOut, SessionSummaryOut
from .materializer import PlanMaterializer

logger = logging.getLogger(__name__)


class SessionLifecycleService(BaseService):
    """
    Start, end and delete workout sessions.

    A session is *active* until :meth:`end_session` records its duration and
    *ended* afterwards. There is no way back; deletion is allowed from both
    states.
    """

    def start_from_plan(self, dto: SessionFromPlanIn) -> SessionStartOut:
        """
        Start a session and copy the plan's prescriptions into it.

        Plan rows whose exercise vanished are skipped and reported in
        ``skipped_plan_exercise_ids``; the session is still created.

        :raises NotFoundError: Plan missing or owned by another user.
        """
        actor_id = self.require_actor()
        with self.store_errors("WorkoutSession"), self.rw_uow() as uow:
            plan = uow.plans.get_for_share(dto.plan_id)
            if plan is None:
                raise NotFoundError("WorkoutPlan", dto.plan_id)
            self.ensure_owner(plan.user_id, entity="WorkoutPlan", key=dto.plan_id)

            workout_session = self._new_session(uow, actor_id, dto.notes, plan_id=plan.id)
            result = PlanMaterializer(uow).materialize(
                workout_session, uow.plan_exercises.list_ordered(plan.id)
            )

            logger.info(
                "Session started from plan",
                extra={
                    "session_id": workout_session.id,
                    "plan_id": plan.id,
                    "materialized": len(result.created),
                    "skipped": len(result.skipped_plan_exercise_ids),
                },
            )
            return SessionStartOut(
                session=session_to_summary(
                    workout_session, exercise_count=len(result.created), completed_sets=0
                ),
                skipped_plan_exercise_ids=list(result.skipped_plan_exercise_ids),
            )

    def start_free(self, dto: SessionFreeIn | None = None) -> SessionStartOut:
        """Start an empty session with no plan link."""
        dto = dto or SessionFreeIn()
        actor_id = self.require_actor()
        with self.store_errors("WorkoutSession"), self.rw_uow() as uow:
            workout_session = self._new_session(uow, actor_id, dto.notes, plan_id=None)
            logger.info("Session started", extra={"session_id": workout_session.id})
            return SessionStartOut(
                session=session_to_summary(workout_session, exercise_count=0, completed_sets=0),
                skipped_plan_exercise_ids=[],
            )

    def end_session(self, dto: SessionEndIn) -> SessionSummaryOut:
        """
        Record the duration and move the session to *ended*.

        Without an explicit duration the elapsed whole minutes since
        ``started_at`` are stored (floored, never negative).

        Not retried on transient failures: the transition is one-way, so a
        retry after a commit that did land would report ``ConflictError``
        for a session that ended. Callers seeing :class:`TransientStoreError`
        should re-read the session before ending it again.

        :raises ConflictError: The session is already ended.
        """
        with self.store_errors("WorkoutSession"), self.rw_uow() as uow:
            repo: WorkoutSessionRepository = uow.workout_sessions
            workout_session = self._locked_session(uow, dto.session_id)
            if workout_session.is_ended:
                raise ConflictError("WorkoutSession", "session already ended")

            duration = dto.duration_minutes
            if duration is None:
                elapsed = self.clock() - as_utc(workout_session.started_at)
                duration = max(0, math.floor(elapsed.total_seconds() / 60))

            updates: dict[str, object] = {"duration_minutes": duration}
            if dto.notes is not None:
                updates["notes"] = dto.notes
            repo.assign_updates(workout_session, updates)

            exercises = workout_session.exercises
            completed = sum(1 for se in exercises for log in se.set_logs if log.is_completed)
            logger.info(
                "Session ended",
                extra={"session_id": workout_session.id, "duration_minutes": duration},
            )
            return session_to_summary(
                workout_session, exercise_count=len(exercises), completed_sets=completed
            )

    @retry_transient
    def delete_session(self, session_id: int) -> DeleteOut:
        """Delete a session with its exercises and set logs."""
        with self.store_errors("WorkoutSession"), self.rw_uow() as uow:
            self._locked_session(uow, session_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(WorkoutSession, [session_id]))
            return DeleteOut(
                entity="WorkoutSession",
                entity_id=session_id,
                deleted=result.deleted,
                nulled=result.nulled,
            )

    # ------------------------------ Internals ----------------------------

    def _new_session(
        self, uow: SQLAlchemyUnitOfWork, user_id: int, notes: str | None, *, plan_id: int | None
    ) -> WorkoutSession:
        if uow.users.get_for_share(user_id) is None:
            raise NotFoundError("User", user_id)
        return uow.workout_sessions.add(
            WorkoutSession(user_id=user_id, started_at=self.clock(), notes=notes, plan_id=plan_id)
        )

    def _locked_session(self, uow: SQLAlchemyUnitOfWork, session_id: int) -> WorkoutSession:
        workout_session = uow.workout_sessions.get_for_update(session_id)
        if workout_session is None:
            raise NotFoundError("WorkoutSession", session_id)
        self.ensure_owner(workout_session.user_id, entity="WorkoutSession", key=session_id)
        return workout_session
