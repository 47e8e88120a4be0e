"""Plan reads: ordering, counts and ownership."""

from __future__ import annotations

import pytest

from gymkeep.services._shared.errors import NotFoundError
from gymkeep.services.plans import PlanQueryService
from tests.factories.plan import PlanExerciseFactory, WorkoutPlanFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def owner(session):
    return UserFactory()


@pytest.fixture()
def service(owner, ctx_for) -> PlanQueryService:
    return PlanQueryService(ctx=ctx_for(owner))


class TestPlanQueryService:
    def test_get_plan_orders_exercises_nulls_last(self, service, owner):
        plan = WorkoutPlanFactory(user=owner)
        loose = PlanExerciseFactory(plan=plan, order_in_plan=None)
        second = PlanExerciseFactory(plan=plan, order_in_plan=2)
        first = PlanExerciseFactory(plan=plan, order_in_plan=1)

        out = service.get_plan(plan.id)

        assert [e.id for e in out.exercises] == [first.id, second.id, loose.id]
        assert out.user_id == owner.id

    def test_list_plans_only_returns_own_with_counts(self, service, owner):
        mine = WorkoutPlanFactory(user=owner)
        PlanExerciseFactory(plan=mine)
        WorkoutPlanFactory()

        out = service.list_plans()

        assert [(p.id, p.exercise_count) for p in out] == [(mine.id, 1)]

    def test_list_exercises_matches_plan_order(self, service, owner):
        plan = WorkoutPlanFactory(user=owner)
        b = PlanExerciseFactory(plan=plan, order_in_plan=5)
        a = PlanExerciseFactory(plan=plan, order_in_plan=2)

        assert [e.id for e in service.list_exercises(plan.id)] == [a.id, b.id]

    def test_foreign_plan_is_not_found(self, service, session):
        plan_id = WorkoutPlanFactory().id
        session.commit()

        with pytest.raises(NotFoundError):
            service.get_plan(plan_id)
        with pytest.raises(NotFoundError):
            service.list_exercises(plan_id)

    def test_anonymous_listing_is_not_found(self, session):
        with pytest.raises(NotFoundError):
            PlanQueryService().list_plans()
