"""Workout state engine: counter, timers, streaks and achievements."""

from .clock import AsyncioScheduler, ManualScheduler, Scheduler, TickHandle
from .events import EngineEvent, EventKind, EventSink, Feedback, Sound
from .streak import DailyReset, calendar_day_difference, compute_daily_reset
from .timers import CountdownTimer, RestTimer, Stopwatch, TimerStatus
from .workout import WorkoutEngine

__all__ = [
    "AsyncioScheduler",
    "calendar_day_difference",
    "compute_daily_reset",
    "CountdownTimer",
    "DailyReset",
    "EngineEvent",
    "EventKind",
    "EventSink",
    "Feedback",
    "ManualScheduler",
    "RestTimer",
    "Scheduler",
    "Sound",
    "Stopwatch",
    "TickHandle",
    "TimerStatus",
    "WorkoutEngine",
]
