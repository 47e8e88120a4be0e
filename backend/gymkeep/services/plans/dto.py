from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class PlanExerciseOut:
    """One prescription inside a plan, with the catalog name resolved."""

    id: int
    plan_id: int
    exercise_id: int
    exercise_name: str | None
    sets: int
    reps: int
    rest_seconds: int | None
    order_in_plan: int | None


@dataclass(frozen=True, slots=True)
class PlanOut:
    """Plan detail with prescriptions ordered by ``order_in_plan`` (nulls last)."""

    id: int
    user_id: int
    name: str
    description: str | None
    created_at: datetime
    exercises: list[PlanExerciseOut]


@dataclass(frozen=True, slots=True)
class PlanSummaryOut:
    id: int
    name: str
    description: str | None
    created_at: datetime
    exercise_count: int


# ------------------------------ Input DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class PlanCreateIn:
    user_id: int
    name: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class PlanUpdateIn:
    plan_id: int
    name: str | None = None
    description: str | None = None


@dataclass(frozen=True, slots=True)
class PlanExerciseAddIn:
    plan_id: int
    exercise_id: int
    sets: int
    reps: int
    rest_seconds: int | None = None
    order_in_plan: int | None = None


@dataclass(frozen=True, slots=True)
class PlanExerciseUpdateIn:
    """Replace a prescription's values; ``exercise_id`` swaps the exercise when given."""

    plan_id: int
    plan_exercise_id: int
    sets: int
    reps: int
    rest_seconds: int | None = None
    order_in_plan: int | None = None
    exercise_id: int | None = None
