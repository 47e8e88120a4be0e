"""Unit of Work abstractions and concrete implementations.

This package re-exports the SQLAlchemy-backed unit of work used by every
service, the abstract contract, and the transient-failure retry decorator.
"""

from .base import UnitOfWork
from .retry import is_transient_error, retry_transient
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
    "is_transient_error",
    "retry_transient",
]
