"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import itertools
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from recall.classifier import TextComplexityAnalyzer  # noqa: E402
from recall.notifications import InMemoryNotificationSink  # noqa: E402
from recall.scheduling import ConflictResolver  # noqa: E402
from recall.scheduling.orchestrator import SchedulingOrchestrator  # noqa: E402
from recall.store import InMemoryContentStore  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FixedClock:
    """Settable clock for deterministic scheduling."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def late_evening():
    """23:30 local, the reference scenario's creation time."""
    return datetime(2024, 1, 1, 23, 30, 0)


@pytest.fixture
def afternoon():
    return datetime(2024, 1, 1, 14, 0, 0)


@pytest.fixture
def clock(afternoon):
    return FixedClock(afternoon)


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"item-{next(counter)}"


@pytest.fixture
def sink():
    return InMemoryNotificationSink()


@pytest.fixture
def store():
    return InMemoryContentStore()


@pytest.fixture
def engine(sink, store, clock, id_factory):
    """Orchestrator wired to in-memory doubles, a fixed clock and readable ids."""
    return SchedulingOrchestrator(
        sink=sink,
        store=store,
        classifier=TextComplexityAnalyzer(),
        resolver=ConflictResolver(region="Europe"),
        clock=clock,
        id_factory=id_factory,
    )
