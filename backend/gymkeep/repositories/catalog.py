"""Catalog repositories: difficulty levels, body regions and exercises."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import InstrumentedAttribute

from gymkeep.models.catalog import DifficultyLevel, Exercise, ExerciseRegion
from gymkeep.repositories.base import BaseRepository


class DifficultyLevelRepository(BaseRepository[DifficultyLevel]):
    model = DifficultyLevel

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "name": self.model.name}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {"name": self.model.name}

    def get_by_name(self, name: str) -> DifficultyLevel | None:
        return self.find_one(name=name)


class ExerciseRegionRepository(BaseRepository[ExerciseRegion]):
    model = ExerciseRegion

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "name": self.model.name}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {"name": self.model.name}

    def get_by_name(self, name: str) -> ExerciseRegion | None:
        return self.find_one(name=name)


class ExerciseRepository(BaseRepository[Exercise]):
    """
    Persistence-only repository for :class:`gymkeep.models.catalog.Exercise`.

    Level and region are loaded through the model's ``selectin`` relationships,
    so listings need no extra eager options.
    """

    model = Exercise

    # ----------------------------- Whitelists ---------------------------------
    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "name": self.model.name,
            "created_at": self.model.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {
            "id": self.model.id,
            "difficulty_level_id": self.model.difficulty_level_id,
            "region_id": self.model.region_id,
        }

    def _updatable_fields(self) -> set[str]:
        return {
            "name",
            "description",
            "video_url",
            "image_url",
            "difficulty_level_id",
            "region_id",
        }

    # ----------------------------- Search -------------------------------------
    def search(
        self,
        *,
        difficulty_level_id: int | None = None,
        region_id: int | None = None,
        name_contains: str | None = None,
    ) -> list[Exercise]:
        """Filter the catalog by level, region and a case-insensitive name fragment.

        :returns: Matching exercises ordered by name then id.
        :rtype: list[Exercise]
        """
        stmt: Select[Any] = select(self.model)
        if difficulty_level_id is not None:
            stmt = stmt.where(self.model.difficulty_level_id == difficulty_level_id)
        if region_id is not None:
            stmt = stmt.where(self.model.region_id == region_id)
        if name_contains:
            pattern = f"%{name_contains.strip().lower()}%"
            stmt = stmt.where(func.lower(self.model.name).like(pattern))
        stmt = stmt.order_by(self.model.name.asc(), self.model.id.asc())
        return list(self.session.execute(stmt).scalars().all())
