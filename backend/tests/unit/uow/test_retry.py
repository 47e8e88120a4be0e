"""Bounded retry of transient store failures."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from gymkeep.services._shared.errors import IntegrityViolationError, TransientStoreError
from gymkeep.uow import is_transient_error, retry_transient


def _operational() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("database is locked"))


class Flaky:
    def __init__(self, failures: int, exc_factory):
        self.failures = failures
        self.exc_factory = exc_factory
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc_factory()
        return "ok"


def _translated() -> TransientStoreError:
    try:
        raise _operational()
    except OperationalError as exc:
        try:
            raise TransientStoreError("database is locked") from exc
        except TransientStoreError as translated:
            return translated


class TestIsTransientError:
    def test_direct_and_chained(self):
        assert is_transient_error(_operational()) is True
        assert is_transient_error(_translated()) is True

    def test_integrity_is_never_transient(self):
        assert is_transient_error(IntegrityError("INSERT", {}, Exception("dup"))) is False
        assert is_transient_error(IntegrityViolationError("SetLog", "dup")) is False


class TestRetryTransient:
    def test_recovers_after_transient_failures(self, db):
        flaky = Flaky(2, _operational)
        assert retry_transient(flaky)() == "ok"
        assert flaky.calls == 3

    def test_retries_translated_errors(self, db):
        flaky = Flaky(1, _translated)
        assert retry_transient(flaky)() == "ok"
        assert flaky.calls == 2

    def test_gives_up_after_configured_attempts(self, app, db):
        flaky = Flaky(10, _translated)
        with pytest.raises(TransientStoreError):
            retry_transient(flaky)()
        assert flaky.calls == app.config["STORE_RETRY_ATTEMPTS"]

    def test_non_transient_errors_are_not_retried(self, db):
        flaky = Flaky(5, lambda: IntegrityViolationError("SetLog", "dup"))
        with pytest.raises(IntegrityViolationError):
            retry_transient(flaky)()
        assert flaky.calls == 1
