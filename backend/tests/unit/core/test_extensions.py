"""Store-level referential integrity on the default SQLite engine."""

from __future__ import annotations

import pytest
from sqlalchemy import delete, text
from sqlalchemy.exc import IntegrityError

from gymkeep.models import Exercise, PlanExercise, User, WorkoutPlan
from tests.factories.plan import PlanExerciseFactory


def test_foreign_keys_pragma_is_on(session):
    assert session.execute(text("PRAGMA foreign_keys")).scalar_one() == 1


def test_raw_delete_of_referenced_exercise_is_rejected(session):
    pe = PlanExerciseFactory()

    with pytest.raises(IntegrityError):
        session.execute(delete(Exercise).where(Exercise.id == pe.exercise_id))


def test_raw_user_delete_cascades_in_the_store(session):
    pe = PlanExerciseFactory()
    user_id = pe.plan.user_id
    plan_id = pe.plan_id
    session.expunge_all()

    session.execute(delete(User).where(User.id == user_id))

    assert session.query(WorkoutPlan).filter_by(id=plan_id).count() == 0
    assert session.query(PlanExercise).filter_by(plan_id=plan_id).count() == 0
