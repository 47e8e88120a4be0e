"""Session repositories: summary aggregates, windows and positions."""

from __future__ import annotations

from datetime import UTC, datetime

from gymkeep.repositories.workout import SessionExerciseRepository, WorkoutSessionRepository
from tests.factories.user import UserFactory
from tests.factories.workout import (
    SessionExerciseFactory,
    SetLogFactory,
    WorkoutSessionFactory,
)


def _at(day: int) -> datetime:
    return datetime(2026, 3, day, 8, 0, tzinfo=UTC)


class TestWorkoutSessionRepository:
    def test_stats_count_exercises_and_completed_sets(self, session):
        ws = WorkoutSessionFactory()
        se1 = SessionExerciseFactory(session=ws)
        SessionExerciseFactory(session=ws)
        SetLogFactory(session_exercise=se1, set_number=1, is_completed=True)
        SetLogFactory(session_exercise=se1, set_number=2, is_completed=False)

        [(row, exercise_count, completed)] = WorkoutSessionRepository().list_for_user_with_stats(
            ws.user_id
        )

        assert row.id == ws.id
        assert exercise_count == 2
        assert completed == 1

    def test_window_is_inclusive_and_newest_first(self, session):
        user = UserFactory()
        early = WorkoutSessionFactory(user=user, started_at=_at(1))
        middle = WorkoutSessionFactory(user=user, started_at=_at(5))
        WorkoutSessionFactory(user=user, started_at=_at(9))

        rows = WorkoutSessionRepository().list_for_user_with_stats(
            user.id, date_from=_at(1), date_to=_at(5)
        )

        assert [r[0].id for r in rows] == [middle.id, early.id]


class TestSessionExerciseRepository:
    def test_next_order(self, session):
        ws = WorkoutSessionFactory()
        repo = SessionExerciseRepository()
        assert repo.next_order(ws.id) == 1

        SessionExerciseFactory(session=ws, order_in_session=1)
        SessionExerciseFactory(session=ws, order_in_session=3)
        assert repo.next_order(ws.id) == 4

    def test_get_in_session(self, session):
        se = SessionExerciseFactory()
        repo = SessionExerciseRepository()
        assert repo.get_in_session(se.session_id, se.id) is se
        assert repo.get_in_session(WorkoutSessionFactory().id, se.id) is None
