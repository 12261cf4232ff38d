"""Services wiring the engine to storage and presentation."""

from .notifier import ConsoleNotifier, LoggingNotifier, describe_event
from .tracker import TrackerService

__all__ = [
    "ConsoleNotifier",
    "describe_event",
    "LoggingNotifier",
    "TrackerService",
]
