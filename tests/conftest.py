"""Shared fixtures for sendevent tests."""

from datetime import datetime, timezone
from typing import List, Tuple

import pytest
import structlog

from sendevent.assembly.builder import EventBuilder
from sendevent.assembly.sources import StaticEnvironment
from sendevent.config import Settings
from sendevent.protocol.models import Event

TEST_DSN = "https://abc123@o1.ingest.example.com/42"
FIXED_TIME = datetime(2024, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


class FakeTransport:
    """Records sent events instead of delivering them."""

    def __init__(self):
        self.sent: List[Tuple[Event, object]] = []

    def send(self, event, dsn):
        self.sent.append((event, dsn))
        return event.event_id.hex

    @property
    def events(self) -> List[Event]:
        return [event for event, _ in self.sent]


@pytest.fixture(autouse=True)
def _structlog_to_stdlib():
    """Route structlog through the stdlib logger so it never writes to stdout."""
    structlog.configure(logger_factory=structlog.stdlib.LoggerFactory())
    yield
    structlog.reset_defaults()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def settings():
    return Settings(_env_file=None, dsn=TEST_DSN)


@pytest.fixture
def builder():
    return EventBuilder(
        environment=StaticEnvironment({"PATH": "/usr/bin", "HOME": "/home/tester"}),
        detect_release=lambda: None,
        current_user=lambda: "tester",
        clock=lambda: FIXED_TIME,
    )
