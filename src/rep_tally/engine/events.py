"""Events emitted by the workout engine.

The engine never calls notification, sound or haptic APIs itself. It emits
events and lets whoever is listening decide how to present them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

MILESTONES = frozenset({10, 25, 50, 75, 100, 150, 200, 250, 300, 500, 1000})
VOICE_COUNT_INTERVAL = 5


class EventKind(str, Enum):
    MILESTONE = "milestone"
    GOAL_ACHIEVED = "goal_achieved"
    COUNTDOWN_FINISHED = "countdown_finished"
    REST_FINISHED = "rest_finished"
    ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
    STREAK_CONTINUES = "streak_continues"
    VOICE_COUNT = "voice_count"
    FEEDBACK = "feedback"
    SOUND = "sound"

    @property
    def is_notification(self) -> bool:
        return self in _NOTIFICATION_KINDS


_NOTIFICATION_KINDS = frozenset(
    {
        EventKind.MILESTONE,
        EventKind.GOAL_ACHIEVED,
        EventKind.COUNTDOWN_FINISHED,
        EventKind.REST_FINISHED,
        EventKind.ACHIEVEMENT_UNLOCKED,
        EventKind.STREAK_CONTINUES,
    }
)


class Feedback(str, Enum):
    """Tactile cue strength."""

    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"
    SUCCESS = "success"


class Sound(str, Enum):
    CLICK = "click"
    SUCCESS = "success"
    COMPLETE = "complete"
    BEEP = "beep"
    ACHIEVEMENT = "achievement"


@dataclass(frozen=True)
class EngineEvent:
    """Something collaborators may want to react to.

    ``value`` carries the count, goal, streak length or achievement title for
    notifications, and the ``Feedback``/``Sound`` member for cues.
    """

    kind: EventKind
    value: int | str | None = None

    def to_dict(self) -> dict:
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return {"kind": self.kind.value, "value": value}


@runtime_checkable
class EventSink(Protocol):
    """Receives engine events."""

    def handle(self, event: EngineEvent) -> None:
        ...
