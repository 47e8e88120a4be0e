from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, cast

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute

from gymkeep.models.set_log import SetLog
from gymkeep.repositories.base import BaseRepository


class SetLogRepository(BaseRepository[SetLog]):
    """
    Persistence-only repository for :class:`gymkeep.models.set_log.SetLog`.

    - Read patterns: by session exercise ordered by set number, by the
      ``(session_exercise_id, set_number)`` key.
    - Write patterns: bulk creation of empty numbered sets (materialization)
      and an upsert by the unique key.

    No business rules, no commits; services own transactions.
    """

    model = SetLog

    # ----------------------------- Whitelists ------------------------------------
    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "set_number": self.model.set_number,
            "completed_at": self.model.completed_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        return {
            "id": self.model.id,
            "session_exercise_id": self.model.session_exercise_id,
            "set_number": self.model.set_number,
            "is_completed": self.model.is_completed,
        }

    def _updatable_fields(self) -> set[str]:
        # Keys (session_exercise_id, set_number) are immutable.
        return {"weight", "reps_completed", "is_completed", "completed_at"}

    # --------------------------------- Reads -------------------------------------
    def get_by_key(self, session_exercise_id: int, set_number: int) -> SetLog | None:
        stmt = select(self.model).where(
            and_(
                self.model.session_exercise_id == session_exercise_id,
                self.model.set_number == set_number,
            )
        )
        return cast(SetLog | None, self.session.execute(stmt).scalars().first())

    def list_for_session_exercise(self, session_exercise_id: int) -> list[SetLog]:
        return self.list(
            filters={"session_exercise_id": session_exercise_id}, sort=["set_number"]
        )

    # --------------------------------- Creates -----------------------------------
    def create_blank_sets(self, session_exercise_id: int, count: int) -> list[SetLog]:
        """Stage ``count`` empty, uncompleted sets numbered ``1..count``.

        Nothing is flushed; the caller's savepoint decides when they land.
        """
        rows = [
            self.model(session_exercise_id=session_exercise_id, set_number=n, is_completed=False)
            for n in range(1, count + 1)
        ]
        self.session.add_all(rows)
        return rows

    # --------------------------------- Upsert ------------------------------------
    def upsert_log(
        self,
        *,
        session_exercise_id: int,
        set_number: int,
        weight: Decimal | float | None,
        reps_completed: int | None,
        is_completed: bool,
        completed_at: datetime | None,
    ) -> tuple[SetLog, bool]:
        """
        Insert or update by the unique key ``(session_exercise_id, set_number)``.

        Every value field is replaced with the submitted one. The insert runs in
        a SAVEPOINT: when a concurrent writer inserted the same key first, the
        unique constraint fires, the savepoint is rolled back and the winning
        row is updated instead, so the key never holds two rows.

        :returns: ``(row, created)``.
        :rtype: tuple[SetLog, bool]
        """
        values: dict[str, Any] = {
            "weight": weight,
            "reps_completed": reps_completed,
            "is_completed": is_completed,
            "completed_at": completed_at,
        }

        existing = self.get_by_key(session_exercise_id, set_number)
        if existing is not None:
            return self.assign_updates(existing, values), False

        row = self.model(session_exercise_id=session_exercise_id, set_number=set_number, **values)
        try:
            with self.session.begin_nested():
                self.session.add(row)
        except IntegrityError:
            existing = self.get_by_key(session_exercise_id, set_number)
            if existing is None:
                raise
            return self.assign_updates(existing, values), False
        return row, True
