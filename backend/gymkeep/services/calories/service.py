from __future__ import annotations

import logging

from gymkeep.models import CalorieCalculation
from gymkeep.services._shared.base import BaseService, as_utc
from gymkeep.services._shared.dto import DeleteOut
from gymkeep.services._shared.errors import NotFoundError
from gymkeep.services.integrity import IntegrityCoordinator
from gymkeep.uow import retry_transient

from .dto import CalorieCalculationCreateIn, CalorieCalculationOut

logger = logging.getLogger(__name__)


def _to_out(row: CalorieCalculation) -> CalorieCalculationOut:
    return CalorieCalculationOut(
        id=row.id,
        user_id=row.user_id,
        age=row.age,
        height_cm=row.height_cm,
        weight_kg=row.weight_kg,
        gender=row.gender,
        activity_level=row.activity_level,
        goal=row.goal,
        tdee=row.tdee,
        adjusted_calories=row.adjusted_calories,
        calculated_at=as_utc(row.calculated_at),
    )


class CalorieService(BaseService):
    """
    History of a user's calorie calculations.

    Rows are append-only: there is no update, a new calculation is a new
    row stamped with the service clock.
    """

    @retry_transient
    def list_calculations(self, user_id: int) -> list[CalorieCalculationOut]:
        """Newest first.

        :raises NotFoundError: Unknown user, or not the acting user.
        """
        self.ensure_owner(user_id, entity="User", key=user_id)
        with self.store_errors("CalorieCalculation"), self.ro_uow() as uow:
            if uow.users.get(user_id) is None:
                raise NotFoundError("User", user_id)
            return [_to_out(row) for row in uow.calorie_calculations.list_for_user(user_id)]

    @retry_transient
    def get_calculation(self, user_id: int, calculation_id: int) -> CalorieCalculationOut:
        self.ensure_owner(user_id, entity="CalorieCalculation", key=calculation_id)
        with self.store_errors("CalorieCalculation"), self.ro_uow() as uow:
            row = uow.calorie_calculations.get(calculation_id)
            if row is None or row.user_id != user_id:
                raise NotFoundError("CalorieCalculation", calculation_id)
            return _to_out(row)

    def create_calculation(self, dto: CalorieCalculationCreateIn) -> CalorieCalculationOut:
        """
        Store a calculation for ``dto.user_id``, stamped ``calculated_at=clock()``.

        :raises NotFoundError: Unknown user, or not the acting user.
        :raises ValueError: Non-positive measurements or negative results.
        """
        self.ensure_owner(dto.user_id, entity="User", key=dto.user_id)
        with self.store_errors("CalorieCalculation"), self.rw_uow() as uow:
            if uow.users.get_for_share(dto.user_id) is None:
                raise NotFoundError("User", dto.user_id)
            row = uow.calorie_calculations.add(
                CalorieCalculation(
                    user_id=dto.user_id,
                    age=dto.age,
                    height_cm=dto.height_cm,
                    weight_kg=dto.weight_kg,
                    gender=dto.gender,
                    activity_level=dto.activity_level,
                    goal=dto.goal,
                    tdee=dto.tdee,
                    adjusted_calories=dto.adjusted_calories,
                    calculated_at=self.clock(),
                )
            )
            logger.info(
                "Calorie calculation stored",
                extra={"user_id": dto.user_id, "calculation_id": row.id, "goal": dto.goal},
            )
            return _to_out(row)

    @retry_transient
    def delete_calculation(self, user_id: int, calculation_id: int) -> DeleteOut:
        self.ensure_owner(user_id, entity="CalorieCalculation", key=calculation_id)
        with self.store_errors("CalorieCalculation"), self.rw_uow() as uow:
            row = uow.calorie_calculations.get_for_update(calculation_id)
            if row is None or row.user_id != user_id:
                raise NotFoundError("CalorieCalculation", calculation_id)
            coordinator = IntegrityCoordinator(uow.session)
            result = coordinator.execute(coordinator.plan(CalorieCalculation, [calculation_id]))
            logger.info(
                "Calorie calculation deleted",
                extra={"user_id": user_id, "calculation_id": calculation_id},
            )
            return DeleteOut(
                entity="CalorieCalculation",
                entity_id=calculation_id,
                deleted=result.deleted,
                nulled=result.nulled,
            )
