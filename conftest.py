"""Root conftest for pytest configuration and shared fixtures.

This conftest is loaded before both testpaths (tests/ and fleetlog/),
making its fixtures available to centralized tests AND colocated tests.
"""

import os
from datetime import datetime, timezone

import pytest

# Register pytest-asyncio plugin at the root level
pytest_plugins = ("pytest_asyncio",)

# ---------------------------------------------------------------------------
# Environment variables — must be set before any fleetlog module import
# Uses setdefault so real env vars (CI) are never overridden.
# ---------------------------------------------------------------------------
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ANALYTICS_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


# ---------------------------------------------------------------------------
# Shared fake fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_behavioral():
    """Fake behavioral-analytics backend that records calls."""
    from fleetlog.adapters.analytics.fake import FakeBehavioralAnalytics

    return FakeBehavioralAnalytics()


@pytest.fixture
def fake_web():
    """Fake web-analytics backend that records hits."""
    from fleetlog.adapters.analytics.fake import FakeWebAnalytics

    return FakeWebAnalytics()


@pytest.fixture
def fake_user():
    """A dashboard user with every profile field set."""
    from fleetlog.domains.event_log.types import EventLogUser

    return EventLogUser(
        id=123,
        username="fake",
        email="fake@example.com",
        created_at=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )
