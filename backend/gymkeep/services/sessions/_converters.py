from __future__ import annotations

from operator import attrgetter

from gymkeep.models.set_log import SetLog
from gymkeep.models.workout import SessionExercise, WorkoutSession
from gymkeep.services._shared.base import as_utc
from gymkeep.services.set_logs.dto import SetLogOut

from .dto import SessionDetailOut, SessionExerciseOut, SessionSummaryOut


def session_order_key(row: SessionExercise) -> tuple[bool, int, int]:
    return (row.order_in_session is None, row.order_in_session or 0, row.id)


def set_log_to_out(row: SetLog) -> SetLogOut:
    return SetLogOut(
        id=row.id,
        session_exercise_id=row.session_exercise_id,
        set_number=row.set_number,
        weight=row.weight,
        reps_completed=row.reps_completed,
        is_completed=row.is_completed,
        completed_at=as_utc(row.completed_at) if row.completed_at is not None else None,
    )


def session_exercise_to_out(row: SessionExercise, *, with_sets: bool = True) -> SessionExerciseOut:
    sets = sorted(row.set_logs, key=attrgetter("set_number", "id")) if with_sets else []
    return SessionExerciseOut(
        id=row.id,
        session_id=row.session_id,
        exercise_id=row.exercise_id,
        exercise_name=row.exercise.name if row.exercise is not None else None,
        order_in_session=row.order_in_session,
        plan_exercise_id=row.plan_exercise_id,
        set_logs=[set_log_to_out(s) for s in sets],
    )


def session_to_summary(
    row: WorkoutSession, *, exercise_count: int, completed_sets: int
) -> SessionSummaryOut:
    return SessionSummaryOut(
        id=row.id,
        started_at=as_utc(row.started_at),
        duration_minutes=row.duration_minutes,
        notes=row.notes,
        plan_id=row.plan_id,
        plan_name=row.plan.name if row.plan is not None else None,
        exercise_count=exercise_count,
        completed_sets=completed_sets,
    )


def session_to_detail(row: WorkoutSession) -> SessionDetailOut:
    exercises = sorted(row.exercises, key=session_order_key)
    return SessionDetailOut(
        id=row.id,
        user_id=row.user_id,
        started_at=as_utc(row.started_at),
        duration_minutes=row.duration_minutes,
        notes=row.notes,
        plan_id=row.plan_id,
        plan_name=row.plan.name if row.plan is not None else None,
        is_ended=row.is_ended,
        exercises=[session_exercise_to_out(se) for se in exercises],
    )
