"""Pytest configuration and fixtures."""

import logging
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from rep_tally.engine.clock import ManualScheduler
from rep_tally.engine.events import EngineEvent, EventKind
from rep_tally.engine.workout import WorkoutEngine
from rep_tally.models.snapshot import PersistedState


class FakeClock:
    """Callable wall clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingSink:
    """Collects every event it receives."""

    def __init__(self):
        self.events: list[EngineEvent] = []

    def handle(self, event: EngineEvent) -> None:
        self.events.append(event)

    def of_kind(self, kind: EventKind) -> list[EngineEvent]:
        return [e for e in self.events if e.kind is kind]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI runs reconfigure the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 14, 9, 30))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_engine(scheduler, clock, sink):
    """Build an engine on the manual scheduler, optionally from a saved state."""

    def _make(state: PersistedState | None = None) -> WorkoutEngine:
        return WorkoutEngine(state, scheduler=scheduler, now=clock, on_event=sink.handle)

    return _make


@pytest.fixture
def engine(make_engine):
    return make_engine()
