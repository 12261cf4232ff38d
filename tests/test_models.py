"""Tests for data models."""

from datetime import date, datetime

import pytest

from rep_tally.models.session import (
    LifetimeStats,
    SessionState,
    TimerMode,
    WorkoutSession,
    format_clock,
)
from rep_tally.models.snapshot import (
    SNAPSHOT_VERSION,
    PersistedState,
    Settings,
)


def _session(count: int, day: int, duration: float = 60.0, id: str | None = None) -> WorkoutSession:
    kwargs = {"id": id} if id else {}
    return WorkoutSession(
        count=count,
        completed_at=datetime(2024, 3, day, 18, 0),
        duration_seconds=duration,
        **kwargs,
    )


class TestWorkoutSession:
    """Tests for WorkoutSession model."""

    def test_session_to_dict(self):
        """Test session serialization."""
        session = _session(25, 10, 95.0, id="abc")
        data = session.to_dict()

        assert data["id"] == "abc"
        assert data["count"] == 25
        assert data["completed_at"] == "2024-03-10T18:00:00"
        assert data["duration_seconds"] == 95.0

    def test_session_ids_unique(self):
        assert _session(1, 1).id != _session(1, 1).id

    def test_formatted_duration(self):
        assert _session(5, 1, 125.0).formatted_duration == "2:05"

    def test_from_dict_rejects_zero_count(self):
        data = _session(1, 1).to_dict()
        data["count"] = 0
        with pytest.raises(ValueError):
            WorkoutSession.from_dict(data)

    def test_negative_duration_floored(self):
        data = _session(3, 1).to_dict()
        data["duration_seconds"] = -12
        assert WorkoutSession.from_dict(data).duration_seconds == 0.0


class TestFormatClock:
    def test_minutes_and_seconds(self):
        assert format_clock(0) == "0:00"
        assert format_clock(59.9) == "0:59"
        assert format_clock(600) == "10:00"

    def test_negative_is_zero(self):
        assert format_clock(-5) == "0:00"


class TestSettings:
    """Tests for Settings model."""

    def test_defaults(self):
        settings = Settings()
        assert settings.sound_enabled is True
        assert settings.voice_count_enabled is False
        assert settings.auto_rest_timer is False
        assert settings.rest_duration == 60
        assert settings.reminder_time == "09:00"

    def test_from_dict_keeps_defaults_for_bad_values(self):
        settings = Settings.from_dict(
            {
                "sound_enabled": "yes",
                "rest_duration": 0,
                "reminder_time": "25:99",
                "voice_count_enabled": True,
            }
        )
        assert settings.sound_enabled is True
        assert settings.rest_duration == 60
        assert settings.reminder_time == "09:00"
        assert settings.voice_count_enabled is True


class TestPersistedState:
    """Tests for the snapshot model."""

    def test_round_trip(self):
        """Saving and loading reproduces the same state."""
        state = PersistedState(
            stats=LifetimeStats(
                personal_best=42,
                total_reps=310,
                sessions_completed=9,
                today_total=20,
                week_total=120,
                current_streak=3,
                goal_achieved_today=True,
                last_workout_date=datetime(2024, 3, 12, 7, 45, 10),
            ),
            daily_goal=75,
            session_history=[_session(30, 12, 80.0), _session(42, 11, 130.5), _session(12, 2, 0.0)],
            timer_mode=TimerMode.COUNTER,
            countdown_minutes=2,
            countdown_seconds=30,
            settings=Settings(voice_count_enabled=True, rest_duration=45, reminder_time="07:15"),
            active_session=SessionState(
                current_count=2,
                rep_timestamps=[datetime(2024, 3, 12, 8, 0, 1), datetime(2024, 3, 12, 8, 0, 3)],
            ),
            last_reset_check=date(2024, 3, 12),
        )

        restored = PersistedState.from_dict(state.to_dict())

        assert restored == state
        assert [s.id for s in restored.session_history] == [s.id for s in state.session_history]

    def test_version_written(self):
        assert PersistedState().to_dict()["version"] == SNAPSHOT_VERSION

    def test_empty_payload_gives_defaults(self):
        state = PersistedState.from_dict({})

        assert state.daily_goal == 50
        assert state.settings.rest_duration == 60
        assert state.settings.sound_enabled is True
        assert state.session_history == []
        assert state.timer_mode is TimerMode.STOPWATCH
        assert state.stats.last_workout_date is None

    def test_non_dict_payload_gives_defaults(self):
        assert PersistedState.from_dict(["not", "a", "snapshot"]) == PersistedState()

    def test_malformed_fields_fall_back(self):
        state = PersistedState.from_dict(
            {
                "personal_best": "lots",
                "total_reps": -4,
                "daily_goal": 0,
                "timer_mode": "hourglass",
                "last_workout_date": "yesterday",
                "settings": "loud",
                "countdown_minutes": 90,
            }
        )

        assert state.stats.personal_best == 0
        assert state.stats.total_reps == 0
        assert state.daily_goal == 50
        assert state.timer_mode is TimerMode.STOPWATCH
        assert state.stats.last_workout_date is None
        assert state.settings == Settings()
        assert state.countdown_minutes == 59

    def test_corrupt_history_entry_skipped(self):
        """One bad entry does not take the rest of the history with it."""
        good_new = _session(20, 9).to_dict()
        good_old = _session(10, 2).to_dict()
        data = {
            "session_history": [
                good_old,
                {"id": "broken", "count": "many"},
                {"count": 5},
                "garbage",
                good_new,
            ]
        }

        state = PersistedState.from_dict(data)

        assert [s.count for s in state.session_history] == [20, 10]

    def test_history_sorted_most_recent_first(self):
        data = {"session_history": [_session(1, 1).to_dict(), _session(3, 3).to_dict(), _session(2, 2).to_dict()]}
        state = PersistedState.from_dict(data)
        assert [s.count for s in state.session_history] == [3, 2, 1]

    def test_history_mixing_utc_offsets_loads(self):
        """Entries with and without an offset are compared as local time."""
        data = {
            "session_history": [
                {"id": "a", "count": 3, "completed_at": "2024-01-01T10:00:00"},
                {"id": "b", "count": 4, "completed_at": "2024-01-02T10:00:00+00:00"},
            ],
            "last_workout_date": "2024-01-02T10:00:00+00:00",
        }

        state = PersistedState.from_dict(data)

        assert [s.id for s in state.session_history] == ["b", "a"]
        assert all(s.completed_at.tzinfo is None for s in state.session_history)
        assert state.stats.last_workout_date.tzinfo is None
