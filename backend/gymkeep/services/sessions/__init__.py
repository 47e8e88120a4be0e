"""Sessions service layer: lifecycle, materialization, reads and exercises."""

from __future__ import annotations

from .dto import (
    SessionDetailOut,
    SessionEndIn,
    SessionExerciseAddIn,
    SessionExerciseOut,
    SessionFreeIn,
    SessionFromPlanIn,
    SessionListIn,
    SessionStartOut,
    SessionSummaryOut,
)
from .exercises import SessionExerciseService
from .lifecycle import SessionLifecycleService
from .materializer import MaterializationResult, PlanMaterializer
from .query import SessionQueryService

__all__ = [
    "MaterializationResult",
    "PlanMaterializer",
    "SessionExerciseService",
    "SessionLifecycleService",
    "SessionQueryService",
    # DTOs
    "SessionDetailOut",
    "SessionEndIn",
    "SessionExerciseAddIn",
    "SessionExerciseOut",
    "SessionFreeIn",
    "SessionFromPlanIn",
    "SessionListIn",
    "SessionStartOut",
    "SessionSummaryOut",
]
