from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class LogSetIn:
    """
    Submitted outcome of one set.

    ``weight`` and ``reps_completed`` replace the stored values (``None``
    clears them). ``completed_at`` is never accepted: it follows
    ``is_completed``.
    """

    session_exercise_id: int
    set_number: int
    is_completed: bool
    weight: Decimal | float | None = None
    reps_completed: int | None = None


@dataclass(frozen=True, slots=True)
class SetLogOut:
    id: int
    session_exercise_id: int
    set_number: int
    weight: Decimal | None
    reps_completed: int | None
    is_completed: bool
    completed_at: datetime | None


@dataclass(frozen=True, slots=True)
class LogSetOut:
    set_log: SetLogOut
    created: bool
