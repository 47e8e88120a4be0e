"""Delete planning and execution: cascade, set-null and restrict rules."""

from __future__ import annotations

import logging

import pytest
from sqlalchemy import inspect as sa_inspect

from gymkeep.models import (
    DifficultyLevel,
    Exercise,
    PlanExercise,
    SessionExercise,
    SetLog,
    User,
    WorkoutPlan,
    WorkoutSession,
)
from gymkeep.services._shared.errors import IntegrityViolationError
from gymkeep.services.integrity import DELETE_RULES, DeleteAction, IntegrityCoordinator, StepKind
from tests.factories.plan import PlanExerciseFactory, WorkoutPlanFactory
from tests.factories.user import AchievementFactory, UserFactory, UserSettingFactory
from tests.factories.workout import SessionExerciseFactory, SetLogFactory, WorkoutSessionFactory


@pytest.fixture()
def graph(session):
    """A plan with two prescriptions and one session materialized from it (3 + 2 sets)."""
    user = UserFactory()
    plan = WorkoutPlanFactory(user=user)
    pe1 = PlanExerciseFactory(plan=plan, sets=3, order_in_plan=1)
    pe2 = PlanExerciseFactory(plan=plan, sets=2, order_in_plan=2)
    ws = WorkoutSessionFactory(user=user, plan_id=plan.id)
    se1 = SessionExerciseFactory(
        session=ws, exercise=pe1.exercise, plan_exercise_id=pe1.id, order_in_session=1
    )
    se2 = SessionExerciseFactory(
        session=ws, exercise=pe2.exercise, plan_exercise_id=pe2.id, order_in_session=2
    )
    logs = [SetLogFactory(session_exercise=se1, set_number=n) for n in (1, 2, 3)]
    logs += [SetLogFactory(session_exercise=se2, set_number=n) for n in (1, 2)]
    return {
        "user": user,
        "plan": plan,
        "plan_exercises": [pe1, pe2],
        "session": ws,
        "session_exercises": [se1, se2],
        "set_logs": logs,
    }


@pytest.fixture()
def coordinator(session) -> IntegrityCoordinator:
    return IntegrityCoordinator(session)


class TestRules:
    def test_every_foreign_key_has_a_matching_rule(self, db):
        """Each FK in the schema has one rule whose action equals its ``ondelete``."""
        ondelete = {
            DeleteAction.CASCADE: "CASCADE",
            DeleteAction.SET_NULL: "SET NULL",
            DeleteAction.RESTRICT: "RESTRICT",
        }
        declared = {
            (rule.dependent.__table__.name, rule.column, ondelete[rule.action])
            for rules in DELETE_RULES.values()
            for rule in rules
        }
        schema = {
            (table.name, fk.parent.name, fk.ondelete)
            for table in db.metadata.sorted_tables
            for fk in table.foreign_keys
        }
        assert declared == schema


class TestPlanning:
    def test_session_delete_plan_lists_children_leaf_first(self, coordinator, graph):
        plan = coordinator.plan(WorkoutSession, [graph["session"].id])

        assert plan.rows_to_delete() == {
            "set_logs": 5,
            "session_exercises": 2,
            "workout_sessions": 1,
        }
        tables = [step.table for step in plan.steps]
        assert tables.index("set_logs") < tables.index("session_exercises")
        assert tables[-1] == "workout_sessions"

    def test_plan_delete_nulls_before_deleting(self, coordinator, graph):
        plan = coordinator.plan(WorkoutPlan, [graph["plan"].id])

        kinds = [(step.kind, step.table, step.column) for step in plan.steps]
        assert kinds == [
            (StepKind.SET_NULL, "session_exercises", "plan_exercise_id"),
            (StepKind.DELETE, "plan_exercises", None),
            (StepKind.SET_NULL, "workout_sessions", "plan_id"),
            (StepKind.DELETE, "workout_plans", None),
        ]

    def test_restrict_blocks_with_dependent_counts(self, coordinator, graph, caplog):
        exercise_id = graph["plan_exercises"][0].exercise_id
        caplog.set_level(logging.WARNING, logger="gymkeep.services.integrity.coordinator")

        with pytest.raises(IntegrityViolationError) as excinfo:
            coordinator.plan(Exercise, [exercise_id])

        assert excinfo.value.dependents == {"plan_exercises": 1, "session_exercises": 1}
        assert any("restrict" in r.getMessage() for r in caplog.records)

    def test_planning_is_read_only(self, coordinator, graph, session):
        coordinator.plan(User, [graph["user"].id])
        assert session.query(SetLog).count() >= 5
        assert session.get(WorkoutPlan, graph["plan"].id) is not None


class TestExecution:
    def test_session_delete_removes_all_seven_dependents(self, coordinator, graph, session):
        ws_id = graph["session"].id

        result = coordinator.delete(WorkoutSession, [ws_id])

        dependents = {t: n for t, n in result.deleted.items() if t != "workout_sessions"}
        assert sum(dependents.values()) == 7
        assert result.deleted == {"set_logs": 5, "session_exercises": 2, "workout_sessions": 1}
        assert session.query(SessionExercise).filter_by(session_id=ws_id).count() == 0
        assert session.query(WorkoutSession).filter_by(id=ws_id).count() == 0
        # plan side untouched
        assert session.query(PlanExercise).filter_by(plan_id=graph["plan"].id).count() == 2

    def test_plan_delete_keeps_sessions_and_clears_links(self, coordinator, graph, session):
        ws = graph["session"]
        se1, se2 = graph["session_exercises"]

        result = coordinator.delete(WorkoutPlan, [graph["plan"].id])

        assert result.deleted == {"plan_exercises": 2, "workout_plans": 1}
        assert result.nulled == {
            "session_exercises.plan_exercise_id": 2,
            "workout_sessions.plan_id": 1,
        }
        # loaded instances were expired, so they reload the cleared columns
        assert ws.plan_id is None
        assert se1.plan_exercise_id is None and se2.plan_exercise_id is None
        assert session.query(SetLog).count() >= 5

    def test_deleted_rows_are_evicted_from_the_session(self, coordinator, graph):
        se1 = graph["session_exercises"][0]
        log = graph["set_logs"][0]

        coordinator.delete(SessionExercise, [se1.id])

        assert sa_inspect(se1).detached
        assert sa_inspect(log).detached

    def test_user_delete_cascades_everything_owned(self, coordinator, graph, session):
        user = graph["user"]
        UserSettingFactory(user_id=user.id)
        AchievementFactory(user_id=user.id)
        stranger_plan = WorkoutPlanFactory()

        result = coordinator.delete(User, [user.id])

        assert result.deleted["users"] == 1
        assert result.deleted["user_settings"] == 1
        assert result.deleted["achievements"] == 1
        assert result.deleted["workout_plans"] == 1
        assert result.deleted["set_logs"] == 5
        assert session.query(User).filter_by(id=user.id).count() == 0
        assert session.query(WorkoutPlan).filter_by(id=stranger_plan.id).count() == 1

    def test_unreferenced_lookup_deletes_cleanly(self, coordinator, session):
        level = DifficultyLevel(name="Lonely")
        session.add(level)
        session.flush()

        result = coordinator.delete(DifficultyLevel, [level.id])

        assert result.deleted == {"difficulty_levels": 1}
