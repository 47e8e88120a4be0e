"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`gymkeep.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``gymkeep.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Errors (from ``gymkeep.services._shared.errors``)
    * :class:`ServiceError` and its subclasses

- Use-case services
    * :class:`CatalogService`, :class:`UserService`, :class:`CalorieService`
    * :class:`PlanCommandService`, :class:`PlanQueryService`
    * :class:`SessionLifecycleService`, :class:`SessionQueryService`,
      :class:`SessionExerciseService`
    * :class:`SetLogService`

DTOs stay in each subpackage's ``dto`` module.
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext
from ._shared.dto import DeleteOut
from ._shared.errors import (
    ConflictError,
    IntegrityViolationError,
    InvalidReferenceError,
    NotFoundError,
    ServiceError,
    TransientStoreError,
)
from .calories.service import CalorieService
from .catalog.service import CatalogService
from .plans import PlanCommandService, PlanQueryService
from .sessions import SessionExerciseService, SessionLifecycleService, SessionQueryService
from .set_logs.service import SetLogService
from .users.service import UserService

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    "DeleteOut",
    # Errors
    "ServiceError",
    "NotFoundError",
    "InvalidReferenceError",
    "ConflictError",
    "IntegrityViolationError",
    "TransientStoreError",
    # Services
    "CatalogService",
    "CalorieService",
    "UserService",
    "PlanCommandService",
    "PlanQueryService",
    "SessionLifecycleService",
    "SessionQueryService",
    "SessionExerciseService",
    "SetLogService",
]
