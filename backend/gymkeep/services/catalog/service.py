from __future__ import annotations

import logging

from gymkeep.models import DifficultyLevel, Exercise, ExerciseRegion
from gymkeep.services._shared.base import BaseService
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import InvalidReferenceError, NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.uow import SQLAlchemyUnitOfWork, retry_transient

from .dto import ExerciseCreateIn, ExerciseListIn, ExerciseOut, ExerciseUpdateIn, LookupOut

logger = logging.getLogger(__name__)


def exercise_to_out(row: Exercise) -> ExerciseOut:
    return ExerciseOut(
        id=row.id,
        name=row.name,
        description=row.description,
        video_url=row.video_url,
        image_url=row.image_url,
        difficulty_level_id=row.difficulty_level_id,
        difficulty_level=row.difficulty_level.name if row.difficulty_level else None,
        region_id=row.region_id,
        region=row.region.name if row.region else None,
    )


class CatalogService(BaseService):
    """
    Shared exercise catalog.

    Reads are open to every authenticated user. Deletes go through the
    integrity coordinator: an exercise referenced by any plan or session, and
    a level or region referenced by any exercise, cannot be removed.
    """

    # ------------------------------ Lookups ------------------------------

    @retry_transient
    def list_difficulty_levels(self) -> list[LookupOut]:
        with self.store_errors("DifficultyLevel"), self.ro_uow() as uow:
            rows = uow.difficulty_levels.list(sort=["name"])
            return [LookupOut(id=r.id, name=r.name) for r in rows]

    @retry_transient
    def list_regions(self) -> list[LookupOut]:
        with self.store_errors("ExerciseRegion"), self.ro_uow() as uow:
            rows = uow.regions.list(sort=["name"])
            return [LookupOut(id=r.id, name=r.name) for r in rows]

    def create_difficulty_level(self, name: str) -> LookupOut:
        with self.store_errors("DifficultyLevel"), self.rw_uow() as uow:
            row = uow.difficulty_levels.add(DifficultyLevel(name=name.strip()))
            logger.info("Difficulty level created", extra={"difficulty_level_id": row.id})
            return LookupOut(id=row.id, name=row.name)

    def create_region(self, name: str) -> LookupOut:
        with self.store_errors("ExerciseRegion"), self.rw_uow() as uow:
            row = uow.regions.add(ExerciseRegion(name=name.strip()))
            logger.info("Exercise region created", extra={"region_id": row.id})
            return LookupOut(id=row.id, name=row.name)

    @retry_transient
    def delete_difficulty_level(self, difficulty_level_id: int) -> DeleteOut:
        return self._delete(DifficultyLevel, difficulty_level_id)

    @retry_transient
    def delete_region(self, region_id: int) -> DeleteOut:
        return self._delete(ExerciseRegion, region_id)

    # ------------------------------ Exercises ----------------------------

    @retry_transient
    def list_exercises(self, dto: ExerciseListIn | None = None) -> list[ExerciseOut]:
        dto = dto or ExerciseListIn()
        with self.store_errors("Exercise"), self.ro_uow() as uow:
            rows = uow.exercises.search(
                difficulty_level_id=dto.difficulty_level_id,
                region_id=dto.region_id,
                name_contains=dto.name_contains,
            )
            return [exercise_to_out(r) for r in rows]

    @retry_transient
    def get_exercise(self, exercise_id: int) -> ExerciseOut:
        with self.store_errors("Exercise"), self.ro_uow() as uow:
            row = uow.exercises.get(exercise_id)
            if row is None:
                raise NotFoundError("Exercise", exercise_id)
            return exercise_to_out(row)

    def create_exercise(self, dto: ExerciseCreateIn) -> ExerciseOut:
        """Create a catalog exercise.

        :raises InvalidReferenceError: Unknown difficulty level or region.
        """
        with self.store_errors("Exercise"), self.rw_uow() as uow:
            self._check_classification(uow, dto.difficulty_level_id, dto.region_id)
            row = uow.exercises.add(
                Exercise(
                    name=dto.name.strip(),
                    description=dto.description,
                    video_url=dto.video_url,
                    image_url=dto.image_url,
                    difficulty_level_id=dto.difficulty_level_id,
                    region_id=dto.region_id,
                )
            )
            uow.session.refresh(row)
            logger.info("Exercise created", extra={"exercise_id": row.id})
            return exercise_to_out(row)

    @retry_transient
    def update_exercise(self, dto: ExerciseUpdateIn) -> ExerciseOut:
        with self.store_errors("Exercise"), self.rw_uow() as uow:
            row = uow.exercises.get_for_update(dto.exercise_id)
            if row is None:
                raise NotFoundError("Exercise", dto.exercise_id)

            self._check_classification(uow, dto.difficulty_level_id, dto.region_id)

            updates: dict[str, object] = {}
            for key in (
                "name",
                "description",
                "video_url",
                "image_url",
                "difficulty_level_id",
                "region_id",
            ):
                value = getattr(dto, key)
                if value is not None:
                    updates[key] = value
            if updates:
                uow.exercises.assign_updates(row, updates)
                uow.session.refresh(row)

            logger.info(
                "Exercise updated", extra={"exercise_id": row.id, "fields": sorted(updates)}
            )
            return exercise_to_out(row)

    @retry_transient
    def delete_exercise(self, exercise_id: int) -> DeleteOut:
        """
        :raises IntegrityViolationError: While any plan or session references it.
        """
        return self._delete(Exercise, exercise_id)

    # ------------------------------ Internals ----------------------------

    def _check_classification(
        self,
        uow: SQLAlchemyUnitOfWork,
        difficulty_level_id: int | None,
        region_id: int | None,
    ) -> None:
        if difficulty_level_id is not None and uow.difficulty_levels.get_for_share(
            difficulty_level_id
        ) is None:
            raise InvalidReferenceError(
                "DifficultyLevel", difficulty_level_id, "difficulty level does not exist"
            )
        if region_id is not None and uow.regions.get_for_share(region_id) is None:
            raise InvalidReferenceError("ExerciseRegion", region_id, "region does not exist")

    def _delete(self, model: type, entity_id: int) -> DeleteOut:
        entity = model.__name__
        with self.store_errors(entity), self.rw_uow() as uow:
            row = uow.session.get(model, entity_id, with_for_update=True)
            if row is None:
                raise NotFoundError(entity, entity_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(model, [entity_id]))
            return DeleteOut(
                entity=entity, entity_id=entity_id, deleted=result.deleted, nulled=result.nulled
            )
