from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

from sqlalchemy.exc import DisconnectionError, IntegrityError, OperationalError

from gymkeep.services._shared.errors import (
    IntegrityViolationError,
    NotFoundError,
    TransientStoreError,
)
from gymkeep.services._shared.policies.common import is_owner
from gymkeep.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset on read)."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


@dataclass(slots=True)
class ServiceContext:
    """
    Carry cross-cutting request-scoped data.

    :param actor_id: Authenticated user id supplied by the auth collaborator.
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide read-only and read-write units of work.
    * Translate store failures into service errors.
    * Enforce ownership (mismatch is reported as not found).
    * Own the clock used for ``started_at``/``completed_at`` stamps.

    Notes
    -----
    - Services never touch the global session directly; always a Unit of Work.
    - Field-level rules live in the models' ``@validates`` hooks.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        :param clock: Returns the current aware datetime; injectable for tests.
        :type clock: Callable[[], datetime] | None
        """
        self.ctx = ctx or ServiceContext()
        self.clock = clock or utcnow

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    @contextmanager
    def store_errors(self, entity: str = "store") -> Iterator[None]:
        """
        Translate SQLAlchemy failures raised inside the block.

        Wrap it *around* the unit of work so commit-time failures are caught
        after the rollback has happened::

            with self.store_errors("WorkoutPlan"), self.rw_uow() as uow:
                ...

        :raises IntegrityViolationError: On ``IntegrityError``.
        :raises TransientStoreError: On connectivity or timeout failures.
        """
        try:
            yield
        except IntegrityError as exc:
            raise IntegrityViolationError(entity, str(exc.orig or exc)) from exc
        except (OperationalError, DisconnectionError) as exc:
            raise TransientStoreError(str(getattr(exc, "orig", None) or exc)) from exc

    # --------------------------- AuthZ --------------------------------

    def require_actor(self) -> int:
        """
        Return the acting user id.

        :raises NotFoundError: When the context carries no actor.
        """
        if self.ctx.actor_id is None:
            raise NotFoundError("User", "anonymous")
        return int(self.ctx.actor_id)

    def ensure_owner(self, owner_id: int, *, entity: str, key: int | str) -> None:
        """
        Ensure the acting user owns the row.

        :param owner_id: ``user_id`` stored on the row.
        :param entity: Entity name reported on failure.
        :param key: Identifier reported on failure.
        :raises NotFoundError: If the actor is not the owner.
        """
        if not is_owner(actor_id=self.ctx.actor_id, owner_id=owner_id):
            raise NotFoundError(entity, key)
