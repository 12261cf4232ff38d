"""Stopwatch, countdown and rest timers.

Each timer owns at most one tick registration. Stopping cancels it, and a
tick that arrives for any registration other than the live one is dropped,
so a timer can never be advanced after it was stopped or restarted.
"""

import logging
from enum import Enum
from typing import Callable

from .clock import TICK_SECONDS, Scheduler, TickHandle

logger = logging.getLogger(__name__)

MAX_COUNTDOWN_MINUTES = 59


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


class _TickingTimer:
    """Shared start/stop bookkeeping."""

    name = "timer"

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._handle: TickHandle | None = None
        self._finished = False

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def status(self) -> TimerStatus:
        if self.is_running:
            return TimerStatus.RUNNING
        if self._finished:
            return TimerStatus.FINISHED
        return TimerStatus.IDLE

    def stop(self) -> None:
        """Stop ticking. Safe to call when already stopped."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _start_ticking(self) -> None:
        # Never leave a second registration alive
        self.stop()
        self._finished = False
        handle: TickHandle | None = None

        def on_tick() -> None:
            if handle is None or handle.cancelled or handle is not self._handle:
                logger.debug("Discarding late %s tick", self.name)
                return
            self._tick()

        handle = self._scheduler.register_tick(TICK_SECONDS, on_tick)
        self._handle = handle

    def _tick(self) -> None:
        raise NotImplementedError


class Stopwatch(_TickingTimer):
    """Counts up one second per tick until stopped."""

    name = "stopwatch"

    def __init__(self, scheduler: Scheduler):
        super().__init__(scheduler)
        self.elapsed = 0.0

    def start(self) -> None:
        if not self.is_running:
            self._start_ticking()

    def toggle(self) -> bool:
        """Start or pause; returns whether it is now running."""
        if self.is_running:
            self.stop()
        else:
            self.start()
        return self.is_running

    def reset(self) -> None:
        self.stop()
        self.elapsed = 0.0

    def _tick(self) -> None:
        self.elapsed += TICK_SECONDS


class CountdownTimer(_TickingTimer):
    """Fixed-duration timer configured in minutes and seconds.

    ``on_finish`` is called once when elapsed time reaches the configured
    duration. A zero duration never finishes.
    """

    name = "countdown"

    def __init__(
        self,
        scheduler: Scheduler,
        on_finish: Callable[[], None],
        minutes: int = 1,
        seconds: int = 0,
    ):
        super().__init__(scheduler)
        self._on_finish = on_finish
        self.minutes = max(0, min(minutes, MAX_COUNTDOWN_MINUTES))
        self.seconds = max(0, min(seconds, 59))
        self.elapsed = 0.0

    @property
    def total_seconds(self) -> int:
        return self.minutes * 60 + self.seconds

    @property
    def remaining_seconds(self) -> int:
        return max(0, self.total_seconds - int(self.elapsed))

    @property
    def progress(self) -> float:
        total = self.total_seconds
        if total <= 0:
            return 0.0
        return min(self.elapsed / total, 1.0)

    def start(self) -> None:
        if self.is_running:
            return
        if self.total_seconds > 0 and self.elapsed >= self.total_seconds:
            self.elapsed = 0.0
        self._start_ticking()

    def toggle(self) -> bool:
        if self.is_running:
            self.stop()
        else:
            self.start()
        return self.is_running

    def reset(self) -> None:
        self.stop()
        self.elapsed = 0.0
        self._finished = False

    def increase(self, minutes: int = 0, seconds: int = 0) -> None:
        if minutes > 0:
            self.minutes = min(self.minutes + minutes, MAX_COUNTDOWN_MINUTES)
        if seconds > 0:
            new_seconds = self.seconds + seconds
            if new_seconds >= 60:
                self.minutes = min(self.minutes + 1, MAX_COUNTDOWN_MINUTES)
                self.seconds = new_seconds - 60
            else:
                self.seconds = new_seconds

    def decrease(self, minutes: int = 0, seconds: int = 0) -> None:
        if minutes > 0:
            self.minutes = max(self.minutes - minutes, 0)
        if seconds > 0:
            if self.seconds >= seconds:
                self.seconds -= seconds
            elif self.minutes > 0:
                # Borrow a minute
                self.minutes -= 1
                self.seconds = 60 + self.seconds - seconds
            else:
                self.seconds = 0

    def configure(self, minutes: int, seconds: int) -> None:
        """Set the duration, normalising seconds >= 60 into minutes."""
        minutes = max(0, minutes)
        seconds = max(0, seconds)
        minutes += seconds // 60
        self.minutes = min(minutes, MAX_COUNTDOWN_MINUTES)
        self.seconds = seconds % 60

    def _tick(self) -> None:
        self.elapsed += TICK_SECONDS
        total = self.total_seconds
        if total > 0 and self.elapsed >= total:
            self.stop()
            self._finished = True
            self._on_finish()


class RestTimer(_TickingTimer):
    """Counts down from the rest duration; restarting resets it to full."""

    name = "rest"

    def __init__(self, scheduler: Scheduler, on_finish: Callable[[], None]):
        super().__init__(scheduler)
        self._on_finish = on_finish
        self.remaining = 0.0

    def start(self, duration: int) -> None:
        self._start_ticking()
        self.remaining = float(max(0, duration))

    def stop(self) -> None:
        super().stop()
        self.remaining = 0.0

    def _tick(self) -> None:
        self.remaining = max(0.0, self.remaining - TICK_SECONDS)
        if self.remaining <= 0:
            self.stop()
            self._finished = True
            self._on_finish()
