"""Copy a plan's prescriptions into a freshly started session."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError

from gymkeep.models.plan import PlanExercise
from gymkeep.models.workout import SessionExercise, WorkoutSession
from gymkeep.uow import SQLAlchemyUnitOfWork

logger = logging.getLogger(__name__)


class _EntrySkipped(Exception):
    """Abort one entry's savepoint without failing the whole start."""


@dataclass(slots=True)
class MaterializationResult:
    created: list[SessionExercise] = field(default_factory=list)
    skipped_plan_exercise_ids: list[int] = field(default_factory=list)


class PlanMaterializer:
    """
    Materialize plan exercises into session exercises with blank set logs.

    Each plan row is processed inside its own SAVEPOINT on the caller's unit
    of work: the session exercise and its ``sets`` numbered set logs land
    together or not at all, so numbering is always ``1..sets`` or absent.
    A failing row is skipped and reported; it never aborts the session.
    """

    def __init__(self, uow: SQLAlchemyUnitOfWork) -> None:
        self.uow = uow

    def materialize(
        self, workout_session: WorkoutSession, plan_exercises: Iterable[PlanExercise]
    ) -> MaterializationResult:
        """
        :param workout_session: Flushed session receiving the rows.
        :param plan_exercises: Plan rows already in plan order.
        :returns: Created session exercises and skipped plan row ids.
        """
        result = MaterializationResult()
        for plan_exercise in plan_exercises:
            try:
                with self.uow.session.begin_nested():
                    created = self._copy(workout_session.id, plan_exercise)
            except (_EntrySkipped, IntegrityError) as exc:
                result.skipped_plan_exercise_ids.append(plan_exercise.id)
                logger.warning(
                    "Plan exercise skipped during materialization",
                    extra={
                        "session_id": workout_session.id,
                        "plan_exercise_id": plan_exercise.id,
                        "exercise_id": plan_exercise.exercise_id,
                        "reason": str(exc),
                    },
                )
                continue
            result.created.append(created)
        return result

    def _copy(self, session_id: int, plan_exercise: PlanExercise) -> SessionExercise:
        if self.uow.exercises.get_for_share(plan_exercise.exercise_id) is None:
            raise _EntrySkipped(f"exercise {plan_exercise.exercise_id} no longer exists")

        order = plan_exercise.order_in_plan
        if order is None:
            order = self.uow.session_exercises.next_order(session_id)

        row = SessionExercise(
            session_id=session_id,
            exercise_id=plan_exercise.exercise_id,
            plan_exercise_id=plan_exercise.id,
            order_in_session=order,
        )
        self.uow.session_exercises.add(row)
        self.uow.set_logs.create_blank_sets(row.id, plan_exercise.sets)
        return row
