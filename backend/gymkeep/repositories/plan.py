"""Plan repositories: plan templates and their ordered exercise prescriptions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import Select, and_, func, select
from sqlalchemy.orm import InstrumentedAttribute

from gymkeep.models.plan import PlanExercise, WorkoutPlan
from gymkeep.repositories.base import BaseRepository, nulls_last_order


class WorkoutPlanRepository(BaseRepository[WorkoutPlan]):
    """Persist :class:`WorkoutPlan` rows.

    Plan exercises ride along through the ``selectin`` collection; ownership
    checks stay in the service layer.
    """

    model = WorkoutPlan

    # ----------------------------- Whitelists ---------------------------------
    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "name": self.model.name,
            "created_at": self.model.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {"id": self.model.id, "user_id": self.model.user_id}

    def _updatable_fields(self) -> set[str]:
        return {"name", "description"}

    # ----------------------------- Listing ------------------------------------
    def list_for_user_with_counts(self, user_id: int) -> list[tuple[WorkoutPlan, int]]:
        """Return ``(plan, exercise_count)`` pairs for a user, newest first.

        :param user_id: Owning user.
        :type user_id: int
        :returns: Plans with the number of prescriptions each holds.
        :rtype: list[tuple[WorkoutPlan, int]]
        """
        counts = (
            select(PlanExercise.plan_id, func.count(PlanExercise.id).label("n"))
            .group_by(PlanExercise.plan_id)
            .subquery()
        )
        stmt: Select[Any] = (
            select(self.model, func.coalesce(counts.c.n, 0))
            .outerjoin(counts, counts.c.plan_id == self.model.id)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return [(row[0], int(row[1])) for row in self.session.execute(stmt).all()]


class PlanExerciseRepository(BaseRepository[PlanExercise]):
    """Persist :class:`PlanExercise` rows and compute their positions."""

    model = PlanExercise

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "order_in_plan": self.model.order_in_plan}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {
            "id": self.model.id,
            "plan_id": self.model.plan_id,
            "exercise_id": self.model.exercise_id,
        }

    def _updatable_fields(self) -> set[str]:
        return {"exercise_id", "sets", "reps", "rest_seconds", "order_in_plan"}

    # ----------------------------- Lookups ------------------------------------
    def get_in_plan(self, plan_id: int, plan_exercise_id: int) -> PlanExercise | None:
        """Return the row only when it belongs to ``plan_id``."""
        stmt = select(self.model).where(
            and_(self.model.id == plan_exercise_id, self.model.plan_id == plan_id)
        )
        return cast(PlanExercise | None, self.session.execute(stmt).scalars().first())

    def get_in_plan_for_update(self, plan_id: int, plan_exercise_id: int) -> PlanExercise | None:
        stmt = (
            select(self.model)
            .where(and_(self.model.id == plan_exercise_id, self.model.plan_id == plan_id))
            .with_for_update()
        )
        return cast(PlanExercise | None, self.session.execute(stmt).scalars().first())

    def exercise_in_plan(
        self, plan_id: int, exercise_id: int, *, exclude_id: int | None = None
    ) -> bool:
        """Return ``True`` when ``exercise_id`` is already prescribed in the plan."""
        stmt = select(self.model.id).where(
            and_(self.model.plan_id == plan_id, self.model.exercise_id == exercise_id)
        )
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        return self.session.execute(stmt.limit(1)).first() is not None

    def list_ordered(self, plan_id: int) -> list[PlanExercise]:
        """Plan rows by ``order_in_plan`` (nulls last) then id."""
        stmt = (
            select(self.model)
            .where(self.model.plan_id == plan_id)
            .order_by(*nulls_last_order(self.model.order_in_plan), self.model.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    # ----------------------------- Ordering -----------------------------------
    def next_order(self, plan_id: int) -> int:
        """Return ``max(order_in_plan) + 1``, or ``1`` for an empty plan.

        Gaps are not compacted: orders ``1, 3`` yield ``4``.
        """
        q = select(func.coalesce(func.max(self.model.order_in_plan), 0) + 1).where(
            self.model.plan_id == plan_id
        )
        return int(self.session.execute(q).scalar_one())
