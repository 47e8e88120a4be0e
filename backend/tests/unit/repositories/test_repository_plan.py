"""Plan repositories: ordering, duplicate detection and listing counts."""

from __future__ import annotations

import pytest

from gymkeep.repositories.plan import PlanExerciseRepository, WorkoutPlanRepository
from tests.factories.catalog import ExerciseFactory
from tests.factories.plan import PlanExerciseFactory, WorkoutPlanFactory
from tests.factories.user import UserFactory


class TestPlanExerciseRepository:
    @pytest.fixture()
    def repo(self) -> PlanExerciseRepository:
        return PlanExerciseRepository()

    def test_next_order_empty_plan_is_one(self, repo, session):
        plan = WorkoutPlanFactory()
        assert repo.next_order(plan.id) == 1

    def test_next_order_does_not_fill_gaps(self, repo, session):
        plan = WorkoutPlanFactory()
        PlanExerciseFactory(plan=plan, order_in_plan=1)
        PlanExerciseFactory(plan=plan, order_in_plan=3)
        assert repo.next_order(plan.id) == 4

    def test_list_ordered_puts_nulls_last(self, repo, session):
        plan = WorkoutPlanFactory()
        unordered = PlanExerciseFactory(plan=plan, order_in_plan=None)
        second = PlanExerciseFactory(plan=plan, order_in_plan=2)
        first = PlanExerciseFactory(plan=plan, order_in_plan=1)

        assert [r.id for r in repo.list_ordered(plan.id)] == [first.id, second.id, unordered.id]

    def test_exercise_in_plan_honours_exclusion(self, repo, session):
        row = PlanExerciseFactory()
        assert repo.exercise_in_plan(row.plan_id, row.exercise_id) is True
        assert repo.exercise_in_plan(row.plan_id, row.exercise_id, exclude_id=row.id) is False
        assert repo.exercise_in_plan(row.plan_id, ExerciseFactory().id) is False

    def test_get_in_plan_scopes_to_plan(self, repo, session):
        row = PlanExerciseFactory()
        other_plan = WorkoutPlanFactory()
        assert repo.get_in_plan(row.plan_id, row.id) is row
        assert repo.get_in_plan(other_plan.id, row.id) is None


class TestWorkoutPlanRepository:
    def test_list_for_user_with_counts(self, session):
        owner = UserFactory()
        empty = WorkoutPlanFactory(user=owner)
        full = WorkoutPlanFactory(user=owner)
        PlanExerciseFactory(plan=full)
        PlanExerciseFactory(plan=full)
        WorkoutPlanFactory()  # someone else's

        rows = WorkoutPlanRepository().list_for_user_with_counts(owner.id)

        counts = {plan.id: n for plan, n in rows}
        assert counts == {empty.id: 0, full.id: 2}
