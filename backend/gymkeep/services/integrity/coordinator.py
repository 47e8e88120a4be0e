"""
Plan and execute deletes according to :data:`DELETE_RULES`.

The coordinator works in two phases inside the caller's unit of work:

1. :meth:`IntegrityCoordinator.plan` walks the rules read-only, collecting the
   ids of every dependent row. Any restrict rule with live dependents aborts
   with :class:`IntegrityViolationError` before a single write is issued.
2. :meth:`IntegrityCoordinator.execute` applies the steps leaf-first: foreign
   keys are nulled before their targets disappear, children are deleted
   before parents, the root last.

Statements are bulk ``UPDATE``/``DELETE``; rows already loaded in the session
are expired or evicted afterwards.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from gymkeep.services._shared.errors import IntegrityViolationError

from .rules import DeleteAction, rules_for

logger = logging.getLogger(__name__)


class StepKind(StrEnum):
    DELETE = "delete"
    SET_NULL = "set_null"


@dataclass(frozen=True, slots=True)
class DeletionStep:
    kind: StepKind
    model: type
    ids: tuple[int, ...]
    column: str | None = None

    @property
    def table(self) -> str:
        return self.model.__table__.name


@dataclass(slots=True)
class DeletionPlan:
    """Ordered, already validated list of writes for one root delete."""

    root: type
    root_ids: tuple[int, ...]
    steps: list[DeletionStep] = field(default_factory=list)

    def rows_to_delete(self) -> dict[str, int]:
        counts: Counter[str] = Counter()
        for step in self.steps:
            if step.kind is StepKind.DELETE:
                counts[step.table] += len(step.ids)
        return dict(counts)


@dataclass(frozen=True, slots=True)
class DeletionResult:
    deleted: dict[str, int]
    nulled: dict[str, int]


class IntegrityCoordinator:
    """Apply cascade, set-null and restrict rules for deletes on one session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    # ------------------------------- Planning --------------------------------

    def plan(self, model: type, ids: Iterable[int]) -> DeletionPlan:
        """
        Compute the deletion plan for ``model`` rows ``ids``.

        :raises IntegrityViolationError: When a restrict rule has dependents;
            ``dependents`` maps each blocking table to its row count.
        """
        root_ids = tuple(sorted(set(ids)))
        plan = DeletionPlan(root=model, root_ids=root_ids)
        blockers: Counter[str] = Counter()

        self._collect(model, root_ids, plan.steps, blockers)
        if blockers:
            logger.warning(
                "Delete blocked by restrict rule",
                extra={
                    "entity": model.__name__,
                    "ids": list(root_ids),
                    "dependents": dict(blockers),
                },
            )
            raise IntegrityViolationError(
                model.__name__, "still referenced", dependents=dict(blockers)
            )

        if root_ids:
            plan.steps.append(DeletionStep(StepKind.DELETE, model, root_ids))
        return plan

    def _collect(
        self,
        model: type,
        ids: Sequence[int],
        steps: list[DeletionStep],
        blockers: Counter[str],
    ) -> None:
        if not ids:
            return
        for rule in rules_for(model):
            column = getattr(rule.dependent, rule.column)
            if rule.action is DeleteAction.RESTRICT:
                count = self.session.execute(
                    select(func.count()).select_from(rule.dependent).where(column.in_(ids))
                ).scalar_one()
                if count:
                    blockers[rule.dependent.__table__.name] += int(count)
                continue

            dependent_ids = self._ids_where(rule.dependent, column, ids)
            if not dependent_ids:
                continue
            if rule.action is DeleteAction.SET_NULL:
                steps.append(
                    DeletionStep(StepKind.SET_NULL, rule.dependent, dependent_ids, rule.column)
                )
            else:
                self._collect(rule.dependent, dependent_ids, steps, blockers)
                steps.append(DeletionStep(StepKind.DELETE, rule.dependent, dependent_ids))

    def _ids_where(self, model: type, column: Any, ids: Sequence[int]) -> tuple[int, ...]:
        stmt = select(model.id).where(column.in_(ids)).order_by(model.id)
        return tuple(self.session.execute(stmt).scalars().all())

    # ------------------------------- Execution -------------------------------

    def execute(self, plan: DeletionPlan) -> DeletionResult:
        """Apply a plan produced by :meth:`plan`; returns per-table row counts."""
        deleted: Counter[str] = Counter()
        nulled: Counter[str] = Counter()

        for step in plan.steps:
            model = step.model
            if step.kind is StepKind.SET_NULL:
                stmt = (
                    update(model)
                    .where(model.id.in_(step.ids))
                    .values({step.column: None})
                    .execution_options(synchronize_session=False)
                )
                nulled[f"{step.table}.{step.column}"] += self.session.execute(stmt).rowcount
            else:
                stmt = (
                    delete(model)
                    .where(model.id.in_(step.ids))
                    .execution_options(synchronize_session=False)
                )
                deleted[step.table] += self.session.execute(stmt).rowcount
            self._sync_identity_map(step)

        result = DeletionResult(deleted=dict(deleted), nulled=dict(nulled))
        logger.info(
            "Delete executed",
            extra={
                "entity": plan.root.__name__,
                "ids": list(plan.root_ids),
                "deleted": result.deleted,
                "nulled": result.nulled,
            },
        )
        return result

    def _sync_identity_map(self, step: DeletionStep) -> None:
        """Expire nulled columns and evict deleted rows already loaded in the session."""
        wanted = set(step.ids)
        # Identity keys carry the PK, so expired instances are matched without a refresh.
        loaded = [
            obj
            for key, obj in list(self.session.identity_map.items())
            if issubclass(key[0], step.model) and key[1][0] in wanted
        ]
        for obj in loaded:
            if step.kind is StepKind.SET_NULL:
                self.session.expire(obj, [step.column])
            else:
                self.session.expunge(obj)

    def delete(self, model: type, ids: Iterable[int]) -> DeletionResult:
        """Plan then execute in one call."""
        return self.execute(self.plan(model, ids))
