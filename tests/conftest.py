"""
Shared test fixtures.

Provides: millisecond-scale Settings, a fresh app per test, TestClient with lifespan
Dependencies: pytest, fastapi
"""

from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from jobstatus.config import Settings
from jobstatus.main import create_app


FAST = dict(
    PROGRESS_INCREMENT=5,
    PROGRESS_PERIOD_MS=10,
    POLL_INTERVAL_MS=50,
    LONG_POLL_TIMEOUT_SECONDS=0,
    STATUS_MODE="immediate",
    RESPONSE_FORMAT="json",
    COMPLETED_JOB_TTL_SECONDS=300,
    SWEEP_INTERVAL_SECONDS=30,
    MAX_JOBS=1000,
)


def make_settings(**overrides) -> Settings:
    return Settings(**{**FAST, **overrides})


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def client(settings):
    # context manager keeps the event loop (and the progress drivers) alive between requests
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def slow_client():
    """Client whose jobs never advance during a test."""
    with TestClient(create_app(make_settings(PROGRESS_PERIOD_MS=60_000))) as c:
        yield c


@pytest.fixture
def make_client():
    """Factory for clients with per-test setting overrides."""
    with ExitStack() as stack:
        def _make(**overrides) -> TestClient:
            return stack.enter_context(TestClient(create_app(make_settings(**overrides))))
        yield _make
