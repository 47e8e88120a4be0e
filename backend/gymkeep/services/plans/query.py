from __future__ import annotations

import logging

from gymkeep.services._shared.base import BaseService
from gymkeep.services._shared.errors import NotFoundError
from gymkeep.uow import retry_transient

from ._converters import plan_exercise_to_out, plan_to_out, plan_to_summary
from .dto import PlanExerciseOut, PlanOut, PlanSummaryOut

logger = logging.getLogger(__name__)


class PlanQueryService(BaseService):
    """Read-only projections of the acting user's plans."""

    @retry_transient
    def get_plan(self, plan_id: int) -> PlanOut:
        with self.store_errors("WorkoutPlan"), self.ro_uow() as uow:
            plan = uow.plans.get(plan_id)
            if plan is None:
                raise NotFoundError("WorkoutPlan", plan_id)
            self.ensure_owner(plan.user_id, entity="WorkoutPlan", key=plan_id)
            return plan_to_out(plan)

    @retry_transient
    def list_plans(self) -> list[PlanSummaryOut]:
        """Acting user's plans, newest first, with prescription counts."""
        actor_id = self.require_actor()
        with self.store_errors("WorkoutPlan"), self.ro_uow() as uow:
            rows = uow.plans.list_for_user_with_counts(actor_id)
            logger.debug("Listed plans", extra={"user_id": actor_id, "count": len(rows)})
            return [plan_to_summary(plan, count) for plan, count in rows]

    @retry_transient
    def list_exercises(self, plan_id: int) -> list[PlanExerciseOut]:
        with self.store_errors("PlanExercise"), self.ro_uow() as uow:
            plan = uow.plans.get(plan_id)
            if plan is None:
                raise NotFoundError("WorkoutPlan", plan_id)
            self.ensure_owner(plan.user_id, entity="WorkoutPlan", key=plan_id)
            return [plan_exercise_to_out(r) for r in uow.plan_exercises.list_ordered(plan_id)]
