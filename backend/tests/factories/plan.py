"""Factory Boy definitions for workout plans and their prescriptions."""

from __future__ import annotations

import factory

from gymkeep.models.plan import PlanExercise, WorkoutPlan
from tests.factories import BaseFactory
from tests.factories.catalog import ExerciseFactory
from tests.factories.user import UserFactory


class WorkoutPlanFactory(BaseFactory):
    """Build persisted :class:`gymkeep.models.plan.WorkoutPlan`."""

    class Meta:
        model = WorkoutPlan

    id = None
    user = factory.SubFactory(UserFactory)
    user_id = factory.SelfAttribute("user.id")
    name = factory.Sequence(lambda n: f"Plan {n}")
    description = factory.Faker("sentence")


class PlanExerciseFactory(BaseFactory):
    """Build persisted :class:`gymkeep.models.plan.PlanExercise` (3x10 by default)."""

    class Meta:
        model = PlanExercise

    id = None
    plan = factory.SubFactory(WorkoutPlanFactory)
    plan_id = factory.SelfAttribute("plan.id")
    exercise = factory.SubFactory(ExerciseFactory)
    exercise_id = factory.SelfAttribute("exercise.id")
    sets = 3
    reps = 10
    rest_seconds = 90
    order_in_plan = factory.Sequence(lambda n: n + 1)
