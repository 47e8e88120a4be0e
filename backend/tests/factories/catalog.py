"""Factory Boy definitions for the exercise catalog."""

from __future__ import annotations

import factory

from gymkeep.models.catalog import DifficultyLevel, Exercise, ExerciseRegion
from tests.factories import BaseFactory


class DifficultyLevelFactory(BaseFactory):
    class Meta:
        model = DifficultyLevel

    id = None
    name = factory.Sequence(lambda n: f"Level {n}")


class ExerciseRegionFactory(BaseFactory):
    class Meta:
        model = ExerciseRegion

    id = None
    name = factory.Sequence(lambda n: f"Region {n}")


class ExerciseFactory(BaseFactory):
    """Build persisted :class:`gymkeep.models.catalog.Exercise` with its lookups."""

    class Meta:
        model = Exercise

    id = None
    name = factory.Sequence(lambda n: f"Exercise {n}")
    description = factory.Faker("sentence")
    difficulty_level = factory.SubFactory(DifficultyLevelFactory)
    difficulty_level_id = factory.SelfAttribute("difficulty_level.id")
    region = factory.SubFactory(ExerciseRegionFactory)
    region_id = factory.SelfAttribute("region.id")
