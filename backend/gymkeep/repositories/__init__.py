"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from gymkeep.repositories.base import BaseRepository, nulls_last_order
from gymkeep.repositories.account import CalorieCalculationRepository, UserSettingRepository
from gymkeep.repositories.catalog import (
    DifficultyLevelRepository,
    ExerciseRegionRepository,
    ExerciseRepository,
)
from gymkeep.repositories.plan import PlanExerciseRepository, WorkoutPlanRepository
from gymkeep.repositories.set_log import SetLogRepository
from gymkeep.repositories.user import UserRepository
from gymkeep.repositories.workout import SessionExerciseRepository, WorkoutSessionRepository

__all__ = [
    # Base
    "BaseRepository",
    "nulls_last_order",
    # Domain
    "CalorieCalculationRepository",
    "DifficultyLevelRepository",
    "ExerciseRegionRepository",
    "ExerciseRepository",
    "PlanExerciseRepository",
    "SessionExerciseRepository",
    "SetLogRepository",
    "UserRepository",
    "UserSettingRepository",
    "WorkoutPlanRepository",
    "WorkoutSessionRepository",
]
