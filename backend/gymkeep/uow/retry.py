"""Bounded retry for transient store failures."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from flask import current_app, has_app_context
from sqlalchemy.exc import DisconnectionError, OperationalError
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_MIN_WAIT_SECONDS = 0.05
DEFAULT_MAX_WAIT_SECONDS = 2.0

_TRANSIENT = (OperationalError, DisconnectionError)


def is_transient_error(exception: BaseException) -> bool:
    """
    Return ``True`` for connectivity or timeout failures.

    Services translate store errors before they reach the retry loop, so the
    original SQLAlchemy exception is looked up on ``__cause__`` as well.
    Integrity failures are never transient.
    """
    return isinstance(exception, _TRANSIENT) or isinstance(exception.__cause__, _TRANSIENT)


def _settings() -> tuple[int, float]:
    if not has_app_context():
        return DEFAULT_MAX_ATTEMPTS, DEFAULT_MAX_WAIT_SECONDS
    cfg = current_app.config
    attempts = int(cfg.get("STORE_RETRY_ATTEMPTS", DEFAULT_MAX_ATTEMPTS))
    max_wait = float(cfg.get("STORE_RETRY_MAX_WAIT_S", DEFAULT_MAX_WAIT_SECONDS))
    return max(attempts, 1), max(max_wait, 0.0)


def retry_transient(fn: Callable[..., T]) -> Callable[..., T]:
    """
    Retry ``fn`` on transient store failures with capped exponential backoff.

    Only for reads and idempotent writes: each attempt opens a fresh unit of
    work, so a retried call must produce the same state as a single one.
    Attempts and the backoff cap come from ``STORE_RETRY_ATTEMPTS`` and
    ``STORE_RETRY_MAX_WAIT_S``; the last exception is re-raised unchanged.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        attempts, max_wait = _settings()
        retrying = Retrying(
            retry=retry_if_exception(is_transient_error),
            stop=stop_after_attempt(attempts),
            wait=wait_exponential(
                multiplier=DEFAULT_MIN_WAIT_SECONDS,
                min=0,
                max=max_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retrying(fn, *args, **kwargs)

    return wrapper
