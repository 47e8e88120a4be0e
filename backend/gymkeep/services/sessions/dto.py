from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from gymkeep.services.set_logs.dto import SetLogOut

# ------------------------------ Input DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class SessionFromPlanIn:
    plan_id: int
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class SessionFreeIn:
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class SessionEndIn:
    """
    End an active session.

    :param duration_minutes: Explicit duration; computed from ``started_at``
        when omitted.
    :param notes: Replaces stored notes only when given.
    """

    session_id: int
    duration_minutes: int | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class SessionListIn:
    """Inclusive ``started_at`` window; either bound may be omitted."""

    date_from: datetime | None = None
    date_to: datetime | None = None


@dataclass(frozen=True, slots=True)
class SessionExerciseAddIn:
    session_id: int
    exercise_id: int
    order_in_session: int | None = None
    plan_exercise_id: int | None = None


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class SessionExerciseOut:
    """Executed exercise with its sets ordered by set number."""

    id: int
    session_id: int
    exercise_id: int
    exercise_name: str | None
    order_in_session: int | None
    plan_exercise_id: int | None
    set_logs: list[SetLogOut] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class SessionSummaryOut:
    id: int
    started_at: datetime
    duration_minutes: int | None
    notes: str | None
    plan_id: int | None
    plan_name: str | None
    exercise_count: int
    completed_sets: int

    @property
    def is_ended(self) -> bool:
        return self.duration_minutes is not None


@dataclass(frozen=True, slots=True)
class SessionStartOut:
    """
    Newly started session.

    ``skipped_plan_exercise_ids`` lists plan rows that could not be copied
    (exercise gone, or the insert failed); the session exists regardless.
    """

    session: SessionSummaryOut
    skipped_plan_exercise_ids: list[int]


@dataclass(frozen=True, slots=True)
class SessionDetailOut:
    id: int
    user_id: int
    started_at: datetime
    duration_minutes: int | None
    notes: str | None
    plan_id: int | None
    plan_name: str | None
    is_ended: bool
    exercises: list[SessionExerciseOut]
