"""
Domain-level exceptions used within the service layer.

These exceptions are framework agnostic: they never depend on Flask or HTTP.
A thin API layer (outside this package) maps them to responses. The only
SQLAlchemy contact is :func:`violates`, used when translating store errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the columns, so
    callers should pass a fragment that appears in either message.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - Validation and ownership errors are raised before any write.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is missing or belongs to another user.

    Both cases share one error so that callers cannot probe for the
    existence of rows they do not own.

    :param entity: Entity name (e.g., "WorkoutPlan").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class InvalidReferenceError(NotFoundError):
    """
    Raised when a supplied foreign id fails an existence or consistency check.

    Subclass of :class:`NotFoundError` so callers catching the broader error
    (e.g. a missing exercise when adding it to a plan) keep working.

    :param detail: What made the reference invalid.
    :type detail: str
    """

    detail: str = "invalid reference"

    def __str__(self) -> str:
        return f"Invalid {self.entity} reference {self.key}: {self.detail}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised on duplicates and illegal state transitions.

    :param entity: Entity name (e.g., "WorkoutSession").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:
        return f"Conflict on {self.entity}: {self.detail}"


@dataclass(slots=True)
class IntegrityViolationError(ServiceError):
    """
    Raised when a delete is blocked by a restrict rule or the store rejects a
    write for referential reasons at flush/commit time.

    :param entity: Entity whose delete or write was rejected.
    :type entity: str
    :param detail: Short explanation (the store's message when available).
    :type detail: str
    :param dependents: Blocking dependents as ``{table_name: row_count}``.
    :type dependents: dict[str, int]
    """

    entity: str
    detail: str
    dependents: dict[str, int] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.dependents:
            blocked_by = ", ".join(f"{t}={n}" for t, n in sorted(self.dependents.items()))
            return f"Integrity violation on {self.entity}: {self.detail} ({blocked_by})"
        return f"Integrity violation on {self.entity}: {self.detail}"


@dataclass(slots=True)
class TransientStoreError(ServiceError):
    """
    Raised for connectivity or timeout failures once retries are exhausted.

    :param detail: Short explanation.
    :type detail: str
    """

    detail: str

    def __str__(self) -> str:
        return f"Transient store failure: {self.detail}"
