"""Calorie calculations: append-only history per user."""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from gymkeep.models import CalorieCalculation
from gymkeep.services._shared.errors import NotFoundError
from gymkeep.services.calories.dto import CalorieCalculationCreateIn
from gymkeep.services.calories.service import CalorieService
from gymkeep.services.users.service import UserService
from tests.factories.user import CalorieCalculationFactory, UserFactory


@pytest.fixture()
def user(session):
    return UserFactory()


@pytest.fixture()
def service(user, ctx_for, clock) -> CalorieService:
    return CalorieService(ctx=ctx_for(user), clock=clock)


def _create_in(user_id: int, **overrides) -> CalorieCalculationCreateIn:
    values = {
        "user_id": user_id,
        "age": 29,
        "height_cm": Decimal("165.00"),
        "weight_kg": Decimal("61.20"),
        "gender": "female",
        "activity_level": "active",
        "goal": "cut",
        "tdee": Decimal("2310.00"),
        "adjusted_calories": Decimal("1810.00"),
    }
    values.update(overrides)
    return CalorieCalculationCreateIn(**values)


class TestCreate:
    def test_stamps_service_clock(self, service, user, session):
        out = service.create_calculation(_create_in(user.id))

        assert out.calculated_at == datetime(2026, 3, 2, 18, 0, tzinfo=UTC)
        assert out.adjusted_calories == Decimal("1810.00")
        assert session.get(CalorieCalculation, out.id).user_id == user.id

    def test_for_someone_else_is_not_found(self, service, session):
        other = UserFactory()
        with pytest.raises(NotFoundError) as exc:
            service.create_calculation(_create_in(other.id))
        assert exc.value.entity == "User"

    def test_unknown_user_is_not_found(self, ctx_for, clock):
        with pytest.raises(NotFoundError):
            CalorieService(ctx=ctx_for(10_000_001), clock=clock).create_calculation(
                _create_in(10_000_001)
            )

    @pytest.mark.parametrize(
        "field, value",
        [("age", 0), ("weight_kg", Decimal("-1")), ("tdee", Decimal("-0.01"))],
    )
    def test_rejects_out_of_range_values(self, service, user, field, value):
        with pytest.raises(ValueError, match=field):
            service.create_calculation(_create_in(user.id, **{field: value}))


class TestRead:
    def test_list_is_newest_first(self, service, user, clock):
        first = service.create_calculation(_create_in(user.id))
        clock.advance(days=1)
        second = service.create_calculation(_create_in(user.id, goal="bulk"))
        clock.advance(days=1)
        third = service.create_calculation(_create_in(user.id, goal="maintain"))

        assert [c.id for c in service.list_calculations(user.id)] == [
            third.id,
            second.id,
            first.id,
        ]

    def test_list_excludes_other_users(self, service, user):
        CalorieCalculationFactory(user_id=UserFactory().id)
        assert service.list_calculations(user.id) == []

    def test_list_for_someone_else_is_not_found(self, service, session):
        with pytest.raises(NotFoundError):
            service.list_calculations(UserFactory().id)

    def test_get_own(self, service, user):
        row = CalorieCalculationFactory(user_id=user.id)
        assert service.get_calculation(user.id, row.id).tdee == Decimal("2650.00")

    def test_get_foreign_row_is_not_found(self, service, user):
        foreign = CalorieCalculationFactory(user_id=UserFactory().id)
        with pytest.raises(NotFoundError) as exc:
            service.get_calculation(user.id, foreign.id)
        assert exc.value.entity == "CalorieCalculation"


class TestDelete:
    def test_deletes_only_that_row(self, service, user, session):
        kept = CalorieCalculationFactory(user_id=user.id)
        gone = CalorieCalculationFactory(user_id=user.id)

        out = service.delete_calculation(user.id, gone.id)

        assert out.deleted == {"calorie_calculations": 1}
        assert session.get(CalorieCalculation, kept.id) is not None
        assert session.get(CalorieCalculation, gone.id) is None

    def test_foreign_row_is_not_found_and_kept(self, service, user, session):
        foreign_id = CalorieCalculationFactory(user_id=UserFactory().id).id
        session.commit()

        with pytest.raises(NotFoundError):
            service.delete_calculation(user.id, foreign_id)
        assert session.get(CalorieCalculation, foreign_id) is not None

    def test_user_delete_cascades(self, user, ctx_for, session):
        CalorieCalculationFactory(user_id=user.id)
        CalorieCalculationFactory(user_id=user.id)

        out = UserService(ctx=ctx_for(user)).delete_user(user.id)

        assert out.deleted["calorie_calculations"] == 2
        assert session.query(CalorieCalculation).count() == 0
