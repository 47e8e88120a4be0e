"""Plans service layer exposing orchestration services and DTOs."""

from __future__ import annotations

from .command import PlanCommandService
from .dto import (
    PlanCreateIn,
    PlanExerciseAddIn,
    PlanExerciseOut,
    PlanExerciseUpdateIn,
    PlanOut,
    PlanSummaryOut,
    PlanUpdateIn,
)
from .query import PlanQueryService

__all__ = [
    "PlanCommandService",
    "PlanQueryService",
    # DTOs
    "PlanCreateIn",
    "PlanExerciseAddIn",
    "PlanExerciseOut",
    "PlanExerciseUpdateIn",
    "PlanOut",
    "PlanSummaryOut",
    "PlanUpdateIn",
]
