"""Persisted application snapshot.

Everything the tracker needs to resume is written as one versioned payload,
so related fields (streak and last workout date, history and session count)
are always saved together.
"""

import logging
from dataclasses import dataclass, field, fields
from datetime import date, datetime

from .session import LifetimeStats, SessionState, TimerMode, WorkoutSession, to_naive_local

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

DEFAULT_DAILY_GOAL = 50
DEFAULT_REST_DURATION = 60
DEFAULT_COUNTDOWN_MINUTES = 1
DEFAULT_COUNTDOWN_SECONDS = 0
DEFAULT_REMINDER_TIME = "09:00"


@dataclass
class Settings:
    """User preferences."""

    sound_enabled: bool = True
    voice_count_enabled: bool = False
    auto_rest_timer: bool = False
    rest_duration: int = DEFAULT_REST_DURATION
    daily_reminders_enabled: bool = False
    reminder_time: str = DEFAULT_REMINDER_TIME
    milestone_notifications_enabled: bool = True
    goal_notifications_enabled: bool = True
    streak_reminders_enabled: bool = True
    onboarding_completed: bool = False

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.names()}

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create from dictionary, keeping defaults for bad or missing values."""
        defaults = cls()
        values = {}
        for f in fields(cls):
            default = getattr(defaults, f.name)
            raw = data.get(f.name)
            if isinstance(default, bool):
                values[f.name] = raw if isinstance(raw, bool) else default
            elif isinstance(default, int):
                values[f.name] = _positive_int(raw, default)
            else:
                values[f.name] = raw if _is_clock_time(raw) else default
        return cls(**values)


@dataclass
class PersistedState:
    """The complete saved state of the tracker."""

    stats: LifetimeStats = field(default_factory=LifetimeStats)
    daily_goal: int = DEFAULT_DAILY_GOAL
    session_history: list[WorkoutSession] = field(default_factory=list)
    timer_mode: TimerMode = TimerMode.STOPWATCH
    countdown_minutes: int = DEFAULT_COUNTDOWN_MINUTES
    countdown_seconds: int = DEFAULT_COUNTDOWN_SECONDS
    settings: Settings = field(default_factory=Settings)
    active_session: SessionState = field(default_factory=SessionState)
    last_reset_check: date | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        stats = self.stats
        return {
            "version": SNAPSHOT_VERSION,
            "personal_best": stats.personal_best,
            "total_reps": stats.total_reps,
            "sessions_completed": stats.sessions_completed,
            "daily_goal": self.daily_goal,
            "today_total": stats.today_total,
            "week_total": stats.week_total,
            "current_streak": stats.current_streak,
            "goal_achieved_today": stats.goal_achieved_today,
            "last_workout_date": (
                stats.last_workout_date.isoformat() if stats.last_workout_date else None
            ),
            "session_history": [s.to_dict() for s in self.session_history],
            "timer_mode": self.timer_mode.value,
            "countdown_minutes": self.countdown_minutes,
            "countdown_seconds": self.countdown_seconds,
            "settings": self.settings.to_dict(),
            "active_session": self.active_session.to_dict(),
            "last_reset_check": (
                self.last_reset_check.isoformat() if self.last_reset_check else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PersistedState":
        """Create from dictionary.

        Never raises: anything missing or malformed falls back to its default,
        and unreadable history entries are dropped one by one.
        """
        if not isinstance(data, dict):
            logger.warning("Snapshot payload is not an object, using defaults")
            return cls()

        version = data.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            logger.warning("Unknown snapshot version %r, reading as version %d", version, SNAPSHOT_VERSION)

        stats = LifetimeStats(
            personal_best=_non_negative_int(data.get("personal_best"), 0),
            total_reps=_non_negative_int(data.get("total_reps"), 0),
            sessions_completed=_non_negative_int(data.get("sessions_completed"), 0),
            today_total=_non_negative_int(data.get("today_total"), 0),
            week_total=_non_negative_int(data.get("week_total"), 0),
            current_streak=_non_negative_int(data.get("current_streak"), 0),
            goal_achieved_today=data.get("goal_achieved_today") is True,
            last_workout_date=_parse_datetime(data.get("last_workout_date")),
        )

        try:
            timer_mode = TimerMode(data.get("timer_mode", TimerMode.STOPWATCH.value))
        except ValueError:
            timer_mode = TimerMode.STOPWATCH

        settings_data = data.get("settings")
        settings = Settings.from_dict(settings_data if isinstance(settings_data, dict) else {})

        return cls(
            stats=stats,
            daily_goal=_positive_int(data.get("daily_goal"), DEFAULT_DAILY_GOAL),
            session_history=_parse_history(data.get("session_history")),
            timer_mode=timer_mode,
            countdown_minutes=min(
                59, _non_negative_int(data.get("countdown_minutes"), DEFAULT_COUNTDOWN_MINUTES)
            ),
            countdown_seconds=min(
                59, _non_negative_int(data.get("countdown_seconds"), DEFAULT_COUNTDOWN_SECONDS)
            ),
            settings=settings,
            active_session=_parse_active_session(data.get("active_session")),
            last_reset_check=_parse_date(data.get("last_reset_check")),
        )


def _non_negative_int(value, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _positive_int(value, default: int) -> int:
    # Zero is treated as "never set", matching how goal and rest duration were stored
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _is_clock_time(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.strptime(value, "%H:%M")
    except ValueError:
        return False
    return True


def _parse_datetime(value) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return to_naive_local(datetime.fromisoformat(value))
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r", value)
        return None


def _parse_date(value) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _parse_history(raw) -> list[WorkoutSession]:
    if not isinstance(raw, list):
        return []

    sessions = []
    for index, entry in enumerate(raw):
        try:
            sessions.append(WorkoutSession.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping corrupt history entry %d: %s", index, e)

    # Most recent first
    sessions.sort(key=lambda s: s.completed_at, reverse=True)
    return sessions


def _parse_active_session(raw) -> SessionState:
    if not isinstance(raw, dict):
        return SessionState()

    timestamps = []
    for value in raw.get("rep_timestamps") or []:
        ts = _parse_datetime(value)
        if ts is not None:
            timestamps.append(ts)

    return SessionState(
        current_count=_non_negative_int(raw.get("current_count"), 0),
        rep_timestamps=timestamps,
    )
