from __future__ import annotations

from gymkeep.models.plan import PlanExercise, WorkoutPlan

from .dto import PlanExerciseOut, PlanOut, PlanSummaryOut


def plan_order_key(row: PlanExercise) -> tuple[bool, int, int]:
    """``order_in_plan`` ascending with unordered rows last, id as tiebreaker."""
    return (row.order_in_plan is None, row.order_in_plan or 0, row.id)


def plan_exercise_to_out(row: PlanExercise) -> PlanExerciseOut:
    return PlanExerciseOut(
        id=row.id,
        plan_id=row.plan_id,
        exercise_id=row.exercise_id,
        exercise_name=row.exercise.name if row.exercise is not None else None,
        sets=row.sets,
        reps=row.reps,
        rest_seconds=row.rest_seconds,
        order_in_plan=row.order_in_plan,
    )


def plan_to_out(row: WorkoutPlan) -> PlanOut:
    exercises = sorted(row.exercises, key=plan_order_key)
    return PlanOut(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        description=row.description,
        created_at=row.created_at,
        exercises=[plan_exercise_to_out(ex) for ex in exercises],
    )


def plan_to_summary(row: WorkoutPlan, exercise_count: int) -> PlanSummaryOut:
    return PlanSummaryOut(
        id=row.id,
        name=row.name,
        description=row.description,
        created_at=row.created_at,
        exercise_count=exercise_count,
    )
