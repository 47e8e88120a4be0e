from gymkeep.models.account import Achievement, CalorieCalculation, UserSetting
from gymkeep.models.catalog import DifficultyLevel, Exercise, ExerciseRegion
from gymkeep.models.plan import PlanExercise, WorkoutPlan
from gymkeep.models.set_log import SetLog
from gymkeep.models.user import User
from gymkeep.models.workout import SessionExercise, WorkoutSession

__all__ = [
    "Achievement",
    "CalorieCalculation",
    "DifficultyLevel",
    "Exercise",
    "ExerciseRegion",
    "PlanExercise",
    "SessionExercise",
    "SetLog",
    "User",
    "UserSetting",
    "WorkoutPlan",
    "WorkoutSession",
]
