"""Tracker service: the engine wired to storage and event sinks."""

import asyncio
import logging
from datetime import date, datetime
from typing import Callable, Iterable

from ..db.repositories import SnapshotRepository
from ..engine.clock import Scheduler
from ..engine.events import EngineEvent, EventSink
from ..engine.workout import WorkoutEngine
from ..models.session import TimerMode

logger = logging.getLogger(__name__)


class TrackerService:
    """Runs engine commands and saves after every one of them.

    Each mutating method applies the change to the engine and then writes the
    full snapshot before returning. Events reach the sinks as soon as the
    engine produces them, including those raised by timer ticks.
    """

    def __init__(
        self,
        engine: WorkoutEngine,
        repository: SnapshotRepository,
        sinks: Iterable[EventSink] = (),
    ):
        self.engine = engine
        self.repository = repository
        self.sinks = list(sinks)
        # Snapshots must reach the database in the order they were taken
        self._save_lock = asyncio.Lock()
        engine.on_event = self._dispatch

    @classmethod
    async def open(
        cls,
        repository: SnapshotRepository,
        scheduler: Scheduler | None = None,
        sinks: Iterable[EventSink] = (),
        now: Callable[[], datetime] = datetime.now,
    ) -> "TrackerService":
        """Load the saved state and run the start-up daily reset."""
        state = await repository.load()
        engine = WorkoutEngine(state, scheduler=scheduler, now=now)
        service = cls(engine, repository, sinks)
        await service.evaluate_daily_reset()
        return service

    def _dispatch(self, event: EngineEvent) -> None:
        for sink in self.sinks:
            sink.handle(event)

    async def save(self) -> None:
        async with self._save_lock:
            await self.repository.save(self.engine.snapshot())

    async def _commit(self, result):
        await self.save()
        return result

    async def increment(self) -> list[EngineEvent]:
        return await self._commit(self.engine.increment())

    async def decrement(self) -> list[EngineEvent]:
        return await self._commit(self.engine.decrement())

    async def quick_add(self, amount: int) -> list[EngineEvent]:
        return await self._commit(self.engine.quick_add(amount))

    async def reset_session(self) -> list[EngineEvent]:
        return await self._commit(self.engine.reset_session())

    async def reset_all(self) -> list[EngineEvent]:
        return await self._commit(self.engine.reset_all())

    async def delete_session(self, session_id: str) -> bool:
        return await self._commit(self.engine.delete_session(session_id))

    async def evaluate_daily_reset(self, today: date | None = None) -> list[EngineEvent]:
        return await self._commit(self.engine.evaluate_daily_reset(today))

    async def toggle_active_timer(self) -> bool:
        return await self._commit(self.engine.toggle_active_timer())

    async def set_timer_mode(self, mode: TimerMode) -> None:
        await self._commit(self.engine.set_timer_mode(mode))

    async def configure_countdown(self, minutes: int, seconds: int) -> None:
        await self._commit(self.engine.configure_countdown(minutes, seconds))

    async def set_daily_goal(self, goal: int) -> None:
        await self._commit(self.engine.set_daily_goal(goal))

    async def update_settings(self, **changes):
        return await self._commit(self.engine.update_settings(**changes))

    async def close(self) -> None:
        """Stop every timer and write a final snapshot."""
        self.engine.stopwatch.stop()
        self.engine.countdown.stop()
        self.engine.rest.stop()
        await self.save()
        logger.debug("Tracker closed")
