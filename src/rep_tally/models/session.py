"""Counter, lifetime aggregate and workout history models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4


class TimerMode(str, Enum):
    """Which timer measures the active session."""

    STOPWATCH = "stopwatch"
    COUNTER = "counter"


def to_naive_local(value: datetime) -> datetime:
    """Drop a UTC offset by converting to naive local time."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def format_clock(seconds: float) -> str:
    """Format a number of seconds as M:SS."""
    total = max(0, int(seconds))
    return f"{total // 60}:{total % 60:02d}"


@dataclass(frozen=True)
class WorkoutSession:
    """A completed session in the history log.

    Sessions are never edited after creation; the history only grows at the
    front or loses whole entries.
    """

    count: int
    completed_at: datetime
    duration_seconds: float = 0.0
    id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def formatted_duration(self) -> str:
        return format_clock(self.duration_seconds)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "count": self.count,
            "completed_at": self.completed_at.isoformat(),
            "duration_seconds": self.duration_seconds,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSession":
        """Create from dictionary.

        Raises:
            KeyError, TypeError, ValueError: if the entry is malformed
        """
        count = int(data["count"])
        if count < 1:
            raise ValueError(f"Session count must be positive, got {count}")

        duration = float(data.get("duration_seconds", 0.0))
        return cls(
            id=str(data["id"]),
            count=count,
            completed_at=to_naive_local(datetime.fromisoformat(data["completed_at"])),
            duration_seconds=max(0.0, duration),
        )


@dataclass
class LifetimeStats:
    """Aggregates that outlive a single session."""

    personal_best: int = 0
    total_reps: int = 0
    sessions_completed: int = 0
    today_total: int = 0
    week_total: int = 0
    current_streak: int = 0
    goal_achieved_today: bool = False
    last_workout_date: datetime | None = None


@dataclass
class SessionState:
    """The unfinished session: its rep count and when each rep happened."""

    current_count: int = 0
    rep_timestamps: list[datetime] = field(default_factory=list)

    def clear(self) -> None:
        self.current_count = 0
        self.rep_timestamps.clear()

    def to_dict(self) -> dict:
        return {
            "current_count": self.current_count,
            "rep_timestamps": [ts.isoformat() for ts in self.rep_timestamps],
        }
