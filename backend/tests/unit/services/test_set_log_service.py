"""Set logging: upsert semantics, completion stamps and ownership."""

from __future__ import annotations

from decimal import Decimal

import pytest

from gymkeep.models import SetLog
from gymkeep.services._shared.errors import NotFoundError
from gymkeep.services.set_logs.dto import LogSetIn
from gymkeep.services.set_logs.service import SetLogService
from tests.factories.user import UserFactory
from tests.factories.workout import SessionExerciseFactory, SetLogFactory, WorkoutSessionFactory


@pytest.fixture()
def owner(session):
    return UserFactory()


@pytest.fixture()
def service(owner, ctx_for, clock) -> SetLogService:
    return SetLogService(ctx=ctx_for(owner), clock=clock)


@pytest.fixture()
def session_exercise(owner):
    return SessionExerciseFactory(session=WorkoutSessionFactory(user=owner))


def _rows(session, se_id):
    return session.query(SetLog).filter_by(session_exercise_id=se_id).all()


class TestLogSet:
    def test_first_call_inserts_with_timestamp(self, service, session_exercise, clock):
        out = service.log_set(
            LogSetIn(
                session_exercise_id=session_exercise.id,
                set_number=1,
                is_completed=True,
                weight=82.5,
                reps_completed=8,
            )
        )

        assert out.created is True
        assert out.set_log.weight == Decimal("82.50")
        assert out.set_log.reps_completed == 8
        assert out.set_log.completed_at == clock.now

    def test_repeating_a_call_keeps_a_single_row(self, service, session_exercise, session, clock):
        dto = LogSetIn(
            session_exercise_id=session_exercise.id, set_number=2, is_completed=True, reps_completed=5
        )

        first = service.log_set(dto)
        clock.advance(minutes=3)
        second = service.log_set(dto)

        assert second.created is False
        assert second.set_log.id == first.set_log.id
        # completing again re-stamps the time
        assert second.set_log.completed_at == clock.now
        assert len(_rows(session, session_exercise.id)) == 1

    def test_uncompleting_clears_the_timestamp(self, service, session_exercise):
        base = {"session_exercise_id": session_exercise.id, "set_number": 1}
        service.log_set(LogSetIn(**base, is_completed=True, weight=50, reps_completed=10))

        out = service.log_set(LogSetIn(**base, is_completed=False))

        assert out.set_log.is_completed is False
        assert out.set_log.completed_at is None
        assert out.set_log.weight is None
        assert out.set_log.reps_completed is None

    def test_updates_a_materialized_blank_set(self, service, session_exercise, session):
        blank = SetLogFactory(session_exercise=session_exercise, set_number=1)

        out = service.log_set(
            LogSetIn(
                session_exercise_id=session_exercise.id,
                set_number=1,
                is_completed=True,
                reps_completed=12,
            )
        )

        assert out.created is False
        assert out.set_log.id == blank.id
        assert len(_rows(session, session_exercise.id)) == 1

    def test_beyond_prescription_creates_new_set(self, service, session_exercise, session):
        for n in (1, 2, 3):
            SetLogFactory(session_exercise=session_exercise, set_number=n)

        out = service.log_set(
            LogSetIn(session_exercise_id=session_exercise.id, set_number=4, is_completed=True)
        )

        assert out.created is True
        assert sorted(r.set_number for r in _rows(session, session_exercise.id)) == [1, 2, 3, 4]

    def test_ended_session_still_accepts_corrections(self, service, owner):
        se = SessionExerciseFactory(session=WorkoutSessionFactory(user=owner, duration_minutes=50))
        out = service.log_set(LogSetIn(session_exercise_id=se.id, set_number=1, is_completed=True))
        assert out.created is True

    @pytest.mark.parametrize("set_number", [0, -1])
    def test_set_number_below_one_is_rejected(self, service, session_exercise, set_number):
        with pytest.raises(ValueError):
            service.log_set(
                LogSetIn(
                    session_exercise_id=session_exercise.id,
                    set_number=set_number,
                    is_completed=False,
                )
            )

    def test_negative_reps_are_rejected(self, service, session_exercise):
        with pytest.raises(ValueError):
            service.log_set(
                LogSetIn(
                    session_exercise_id=session_exercise.id,
                    set_number=1,
                    is_completed=True,
                    reps_completed=-3,
                )
            )

    def test_foreign_session_exercise_is_not_found(self, service, session):
        se = SessionExerciseFactory()
        session.commit()

        with pytest.raises(NotFoundError):
            service.log_set(LogSetIn(session_exercise_id=se.id, set_number=1, is_completed=True))
        assert _rows(session, se.id) == []

    def test_unknown_session_exercise_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.log_set(LogSetIn(session_exercise_id=555_555, set_number=1, is_completed=True))


class TestReadAndDelete:
    def test_list_is_ordered_by_set_number(self, service, session_exercise):
        for n in (3, 1, 2):
            SetLogFactory(session_exercise=session_exercise, set_number=n)

        out = service.list_set_logs(session_exercise.id)

        assert [s.set_number for s in out] == [1, 2, 3]

    def test_get_foreign_log_is_not_found(self, service):
        log = SetLogFactory()
        with pytest.raises(NotFoundError):
            service.get_set_log(log.id)

    def test_delete_removes_only_that_set(self, service, session_exercise, session):
        gone = SetLogFactory(session_exercise=session_exercise, set_number=1)
        SetLogFactory(session_exercise=session_exercise, set_number=2)

        out = service.delete_set_log(gone.id)

        assert out.deleted == {"set_logs": 1}
        assert [r.set_number for r in _rows(session, session_exercise.id)] == [2]
