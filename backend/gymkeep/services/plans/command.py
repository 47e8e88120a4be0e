from __future__ import annotations

import logging

from gymkeep.models.plan import PlanExercise, WorkoutPlan
from gymkeep.repositories.plan import PlanExerciseRepository, WorkoutPlanRepository
from gymkeep.services._shared.base import BaseService
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import ConflictError, InvalidReferenceError, NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.uow import SQLAlchemyUnitOfWork, retry_transient

from ._converters import plan_exercise_to_out, plan_to_out
from .dto import (
    PlanCreateIn,
    PlanExerciseAddIn,
    PlanExerciseOut,
    PlanExerciseUpdateIn,
    PlanOut,
    PlanUpdateIn,
)

logger = logging.getLogger(__name__)


class PlanCommandService(BaseService):
    """Orchestrate plan mutations enforcing ownership and prescription rules."""

    def create_plan(self, dto: PlanCreateIn) -> PlanOut:
        """Create an empty plan for the acting user.

        :raises NotFoundError: Unknown user, or a user other than the actor.
        """
        self.ensure_owner(dto.user_id, entity="User", key=dto.user_id)

        with self.store_errors("WorkoutPlan"), self.rw_uow() as uow:
            if uow.users.get_for_share(dto.user_id) is None:
                raise NotFoundError("User", dto.user_id)

            plan = uow.plans.add(
                WorkoutPlan(user_id=dto.user_id, name=dto.name.strip(), description=dto.description)
            )
            uow.session.refresh(plan)
            logger.info("Plan created", extra={"plan_id": plan.id, "user_id": dto.user_id})
            return plan_to_out(plan)

    @retry_transient
    def update_plan(self, dto: PlanUpdateIn) -> PlanOut:
        """Update name/description after locking the plan."""
        with self.store_errors("WorkoutPlan"), self.rw_uow() as uow:
            plan = self._locked_plan(uow, dto.plan_id)

            updates: dict[str, object] = {}
            if dto.name is not None:
                updates["name"] = dto.name.strip()
            if dto.description is not None:
                updates["description"] = dto.description
            if updates:
                uow.plans.assign_updates(plan, updates)

            logger.info("Plan updated", extra={"plan_id": plan.id, "fields": sorted(updates)})
            return plan_to_out(plan)

    @retry_transient
    def delete_plan(self, plan_id: int) -> DeleteOut:
        """
        Delete a plan and its prescriptions.

        Sessions started from the plan are kept with ``plan_id`` cleared, and
        their exercises lose the ``plan_exercise_id`` back-reference.
        """
        with self.store_errors("WorkoutPlan"), self.rw_uow() as uow:
            self._locked_plan(uow, plan_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(WorkoutPlan, [plan_id]))
            return DeleteOut(
                entity="WorkoutPlan", entity_id=plan_id, deleted=result.deleted, nulled=result.nulled
            )

    # ------------------------------ Prescriptions ------------------------

    def add_exercise(self, dto: PlanExerciseAddIn) -> PlanExerciseOut:
        """
        Append (or place) an exercise in a plan.

        The plan is locked ``FOR UPDATE`` and the exercise ``FOR SHARE`` so a
        concurrent catalog delete either waits or is rejected by the store.

        :raises NotFoundError: Plan missing or not owned.
        :raises InvalidReferenceError: Exercise does not exist.
        :raises ConflictError: Exercise already prescribed in this plan.
        :raises ValueError: ``sets``/``reps`` below 1 or negative rest.
        """
        with self.store_errors("PlanExercise"), self.rw_uow() as uow:
            self._locked_plan(uow, dto.plan_id)
            repo: PlanExerciseRepository = uow.plan_exercises

            if uow.exercises.get_for_share(dto.exercise_id) is None:
                raise InvalidReferenceError("Exercise", dto.exercise_id, "exercise does not exist")
            if repo.exercise_in_plan(dto.plan_id, dto.exercise_id):
                raise ConflictError("PlanExercise", "exercise already in plan")

            order = dto.order_in_plan if dto.order_in_plan is not None else repo.next_order(dto.plan_id)
            row = repo.add(
                PlanExercise(
                    plan_id=dto.plan_id,
                    exercise_id=dto.exercise_id,
                    sets=dto.sets,
                    reps=dto.reps,
                    rest_seconds=dto.rest_seconds,
                    order_in_plan=order,
                )
            )
            logger.info(
                "Plan exercise added",
                extra={"plan_id": dto.plan_id, "plan_exercise_id": row.id, "order_in_plan": order},
            )
            return plan_exercise_to_out(row)

    @retry_transient
    def update_exercise(self, dto: PlanExerciseUpdateIn) -> PlanExerciseOut:
        """
        Replace a prescription's sets, reps, rest and order.

        :raises NotFoundError: Plan not owned, or the row is not in that plan.
        :raises InvalidReferenceError: Replacement exercise does not exist.
        :raises ConflictError: Replacement exercise already in the plan.
        """
        with self.store_errors("PlanExercise"), self.rw_uow() as uow:
            self._locked_plan(uow, dto.plan_id)
            repo: PlanExerciseRepository = uow.plan_exercises
            row = repo.get_in_plan_for_update(dto.plan_id, dto.plan_exercise_id)
            if row is None:
                raise NotFoundError("PlanExercise", dto.plan_exercise_id)

            updates: dict[str, object] = {
                "sets": dto.sets,
                "reps": dto.reps,
                "rest_seconds": dto.rest_seconds,
                "order_in_plan": dto.order_in_plan,
            }
            if dto.exercise_id is not None and dto.exercise_id != row.exercise_id:
                if uow.exercises.get_for_share(dto.exercise_id) is None:
                    raise InvalidReferenceError(
                        "Exercise", dto.exercise_id, "exercise does not exist"
                    )
                if repo.exercise_in_plan(dto.plan_id, dto.exercise_id, exclude_id=row.id):
                    raise ConflictError("PlanExercise", "exercise already in plan")
                updates["exercise_id"] = dto.exercise_id

            repo.assign_updates(row, updates)
            uow.session.refresh(row)
            logger.info(
                "Plan exercise updated",
                extra={"plan_id": dto.plan_id, "plan_exercise_id": row.id},
            )
            return plan_exercise_to_out(row)

    @retry_transient
    def remove_exercise(self, plan_id: int, plan_exercise_id: int) -> DeleteOut:
        """Remove a prescription; session exercises keep their data, back-reference cleared."""
        with self.store_errors("PlanExercise"), self.rw_uow() as uow:
            self._locked_plan(uow, plan_id)
            if uow.plan_exercises.get_in_plan(plan_id, plan_exercise_id) is None:
                raise NotFoundError("PlanExercise", plan_exercise_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(PlanExercise, [plan_exercise_id]))
            return DeleteOut(
                entity="PlanExercise",
                entity_id=plan_exercise_id,
                deleted=result.deleted,
                nulled=result.nulled,
            )

    # ------------------------------ Internals ----------------------------

    def _locked_plan(self, uow: SQLAlchemyUnitOfWork, plan_id: int) -> WorkoutPlan:
        repo: WorkoutPlanRepository = uow.plans
        plan = repo.get_for_update(plan_id)
        if plan is None:
            raise NotFoundError("WorkoutPlan", plan_id)
        self.ensure_owner(plan.user_id, entity="WorkoutPlan", key=plan_id)
        return plan
