"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime
from pathlib import Path

import pytest
from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.study_data.service import StudyDataService  # noqa: E402
from src.study_data.storage import MemoryStorage  # noqa: E402
from src.study_data.store import StudyStore  # noqa: E402

MS_PER_HOUR = 60 * 60 * 1000


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = int(start.timestamp() * 1000)

    def __call__(self) -> int:
        return self.now

    def advance(self, days: float = 0, hours: float = 0) -> None:
        self.now += int((days * 24 + hours) * MS_PER_HOUR)


@pytest.fixture
def clock():
    """Clock fixed at local noon, so day arithmetic never crosses midnight."""
    return FakeClock(datetime(2026, 3, 10, 12, 0, 0))


@pytest.fixture
def backend():
    return MemoryStorage()


@pytest.fixture
def store(backend, clock):
    return StudyStore(backend, clock=clock)


@pytest.fixture
def service(store):
    return StudyDataService(store)


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def sample_wrong_answer():
    """Provide a sample wrong-answer entry."""
    return {
        "stem": "Which finding is an early sign of hypovolemic shock?",
        "yourAnswer": "Hypotension",
        "correctAnswer": "Tachycardia",
        "whyTempting": "Hypotension is the classic shock sign but appears late",
        "errorType": "knowledge-gap",
        "concept": "compensated shock",
        "topic": "cardiac",
        "source": "quiz-prep",
        "whatToRemember": "Heart rate rises before pressure falls",
    }
