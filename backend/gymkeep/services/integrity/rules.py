"""Delete propagation rules for the plan/session/exercise/set hierarchy.

Each entry reads "when a row of *key* is deleted, rows of *dependent* whose
*column* points at it are cascaded, nulled or block the delete". The schema
declares the same actions as ``ondelete`` clauses; this table is what the
services actually execute.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from gymkeep.models import (
    Achievement,
    CalorieCalculation,
    DifficultyLevel,
    Exercise,
    ExerciseRegion,
    PlanExercise,
    SessionExercise,
    SetLog,
    User,
    UserSetting,
    WorkoutPlan,
    WorkoutSession,
)


class DeleteAction(StrEnum):
    CASCADE = "cascade"
    SET_NULL = "set_null"
    RESTRICT = "restrict"


@dataclass(frozen=True, slots=True)
class DeleteRule:
    """One foreign key seen from the referenced side."""

    dependent: type
    column: str
    action: DeleteAction


DELETE_RULES: dict[type, tuple[DeleteRule, ...]] = {
    User: (
        DeleteRule(WorkoutPlan, "user_id", DeleteAction.CASCADE),
        DeleteRule(WorkoutSession, "user_id", DeleteAction.CASCADE),
        DeleteRule(UserSetting, "user_id", DeleteAction.CASCADE),
        DeleteRule(Achievement, "user_id", DeleteAction.CASCADE),
        DeleteRule(CalorieCalculation, "user_id", DeleteAction.CASCADE),
    ),
    WorkoutPlan: (
        DeleteRule(PlanExercise, "plan_id", DeleteAction.CASCADE),
        DeleteRule(WorkoutSession, "plan_id", DeleteAction.SET_NULL),
    ),
    PlanExercise: (
        DeleteRule(SessionExercise, "plan_exercise_id", DeleteAction.SET_NULL),
    ),
    WorkoutSession: (
        DeleteRule(SessionExercise, "session_id", DeleteAction.CASCADE),
    ),
    SessionExercise: (
        DeleteRule(SetLog, "session_exercise_id", DeleteAction.CASCADE),
    ),
    Exercise: (
        DeleteRule(PlanExercise, "exercise_id", DeleteAction.RESTRICT),
        DeleteRule(SessionExercise, "exercise_id", DeleteAction.RESTRICT),
    ),
    DifficultyLevel: (
        DeleteRule(Exercise, "difficulty_level_id", DeleteAction.RESTRICT),
    ),
    ExerciseRegion: (
        DeleteRule(Exercise, "region_id", DeleteAction.RESTRICT),
    ),
}


def rules_for(model: type) -> tuple[DeleteRule, ...]:
    return DELETE_RULES.get(model, ())
