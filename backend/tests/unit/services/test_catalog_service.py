"""Catalog reads, writes and restrict-protected deletes."""

from __future__ import annotations

import pytest

from gymkeep.models import DifficultyLevel, Exercise, ExerciseRegion
from gymkeep.services._shared.errors import (
    IntegrityViolationError,
    InvalidReferenceError,
    NotFoundError,
)
from gymkeep.services.catalog.dto import ExerciseCreateIn, ExerciseListIn, ExerciseUpdateIn
from gymkeep.services.catalog.service import CatalogService
from tests.factories.catalog import DifficultyLevelFactory, ExerciseFactory, ExerciseRegionFactory
from tests.factories.plan import PlanExerciseFactory
from tests.factories.workout import SessionExerciseFactory


@pytest.fixture()
def service(session) -> CatalogService:
    return CatalogService()


class TestLookups:
    def test_levels_and_regions_sorted_by_name(self, service):
        DifficultyLevelFactory(name="Intermediate")
        DifficultyLevelFactory(name="Advanced")
        ExerciseRegionFactory(name="Legs")
        ExerciseRegionFactory(name="Chest")

        assert [lv.name for lv in service.list_difficulty_levels()][:2] == [
            "Advanced",
            "Intermediate",
        ]
        assert [r.name for r in service.list_regions()][:2] == ["Chest", "Legs"]

    def test_create_strips_names(self, service, session):
        out = service.create_region("  Core ")
        assert out.name == "Core"
        assert session.get(ExerciseRegion, out.id) is not None

    def test_unused_level_can_be_deleted(self, service, session):
        level = DifficultyLevelFactory()
        out = service.delete_difficulty_level(level.id)
        assert out.deleted == {"difficulty_levels": 1}
        assert session.get(DifficultyLevel, level.id) is None

    def test_level_in_use_is_restricted(self, service, session):
        exercise = ExerciseFactory()
        session.commit()

        with pytest.raises(IntegrityViolationError) as excinfo:
            service.delete_difficulty_level(exercise.difficulty_level_id)

        assert excinfo.value.dependents == {"exercises": 1}
        assert session.get(DifficultyLevel, exercise.difficulty_level_id) is not None

    def test_region_in_use_is_restricted(self, service, session):
        exercise = ExerciseFactory()
        session.commit()

        with pytest.raises(IntegrityViolationError):
            service.delete_region(exercise.region_id)
        assert session.get(ExerciseRegion, exercise.region_id) is not None

    def test_missing_lookup_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.delete_region(31337)


class TestExercises:
    def test_list_filters_by_region_and_name(self, service):
        legs = ExerciseRegionFactory(name="Legs")
        squat = ExerciseFactory(name="Front Squat", region=legs)
        ExerciseFactory(name="Split Squat")
        ExerciseFactory(name="Leg Curl", region=legs)

        out = service.list_exercises(ExerciseListIn(region_id=legs.id, name_contains="SQUAT"))

        assert [e.id for e in out] == [squat.id]
        assert out[0].region == "Legs"

    def test_create_resolves_classification(self, service):
        level = DifficultyLevelFactory(name="Beginner")
        region = ExerciseRegionFactory(name="Back")

        out = service.create_exercise(
            ExerciseCreateIn(
                name=" Seated Row ", difficulty_level_id=level.id, region_id=region.id
            )
        )

        assert out.name == "Seated Row"
        assert (out.difficulty_level, out.region) == ("Beginner", "Back")

    def test_create_with_unknown_region_is_invalid(self, service):
        level = DifficultyLevelFactory()
        with pytest.raises(InvalidReferenceError):
            service.create_exercise(
                ExerciseCreateIn(name="Ghost", difficulty_level_id=level.id, region_id=9999)
            )

    def test_update_changes_given_fields(self, service):
        exercise = ExerciseFactory(name="Row", description="Old")
        region = ExerciseRegionFactory(name="Upper Back")

        out = service.update_exercise(
            ExerciseUpdateIn(exercise_id=exercise.id, name="Cable Row", region_id=region.id)
        )

        assert out.name == "Cable Row"
        assert out.description == "Old"
        assert out.region == "Upper Back"

    def test_get_missing_exercise_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get_exercise(77777)

    def test_unreferenced_exercise_is_deleted(self, service, session):
        exercise = ExerciseFactory()
        service.delete_exercise(exercise.id)
        assert session.get(Exercise, exercise.id) is None

    @pytest.mark.parametrize("referenced_by", ["plan", "session"])
    def test_referenced_exercise_is_restricted(self, service, session, referenced_by):
        exercise = ExerciseFactory()
        if referenced_by == "plan":
            PlanExerciseFactory(exercise=exercise)
        else:
            SessionExerciseFactory(exercise=exercise)
        session.commit()

        with pytest.raises(IntegrityViolationError):
            service.delete_exercise(exercise.id)
        assert session.get(Exercise, exercise.id) is not None
