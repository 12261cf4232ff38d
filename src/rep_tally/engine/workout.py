"""The workout state engine.

``WorkoutEngine`` owns the current session, the lifetime aggregates, the
history log and the three timers. Every mutator returns the events it
produced; events raised from timer ticks are delivered through ``on_event``
and queued in ``pending_events``.
"""

import copy
import logging
from collections import deque
from datetime import date, datetime
from typing import Callable

from ..models.achievements import (
    Achievement,
    count_unlocked,
    evaluate_achievements,
    first_exact_unlock,
)
from ..models.session import SessionState, TimerMode, WorkoutSession, format_clock
from ..models.snapshot import PersistedState, Settings
from .clock import ManualScheduler, Scheduler
from .events import (
    MILESTONES,
    VOICE_COUNT_INTERVAL,
    EngineEvent,
    EventKind,
    Feedback,
    Sound,
)
from .streak import compute_daily_reset
from .timers import CountdownTimer, RestTimer, Stopwatch

logger = logging.getLogger(__name__)

PENDING_EVENT_LIMIT = 200


class WorkoutEngine:
    """State container for one user's workouts."""

    def __init__(
        self,
        state: PersistedState | None = None,
        scheduler: Scheduler | None = None,
        now: Callable[[], datetime] = datetime.now,
        on_event: Callable[[EngineEvent], None] | None = None,
    ):
        state = copy.deepcopy(state) if state is not None else PersistedState()
        scheduler = scheduler if scheduler is not None else ManualScheduler()

        self.stats = state.stats
        self.daily_goal = state.daily_goal
        self.history: list[WorkoutSession] = state.session_history
        self.timer_mode = state.timer_mode
        self.settings = state.settings
        self.session: SessionState = state.active_session
        self.last_reset_check: date | None = state.last_reset_check

        self.on_event = on_event
        self.pending_events: deque[EngineEvent] = deque(maxlen=PENDING_EVENT_LIMIT)
        self._now = now

        self.stopwatch = Stopwatch(scheduler)
        self.countdown = CountdownTimer(
            scheduler,
            on_finish=self._countdown_finished,
            minutes=state.countdown_minutes,
            seconds=state.countdown_seconds,
        )
        self.rest = RestTimer(scheduler, on_finish=self._rest_finished)

        # Achievements already unlocked at load time are never announced
        self._unlocked_count = count_unlocked(self.achievements)
        self.has_new_achievement = False

    # ------------------------------------------------------------------
    # Counter
    # ------------------------------------------------------------------

    @property
    def current_count(self) -> int:
        return self.session.current_count

    def increment(self) -> list[EngineEvent]:
        """Count one rep."""
        events: list[EngineEvent] = []
        self._count_rep(events)
        return self._publish(events)

    def quick_add(self, amount: int) -> list[EngineEvent]:
        """Count ``amount`` reps one at a time, with every per-rep side effect."""
        events: list[EngineEvent] = []
        for _ in range(max(0, amount)):
            self._count_rep(events)
        return self._publish(events)

    def decrement(self) -> list[EngineEvent]:
        """Take back the last rep. Personal best is left alone."""
        if self.session.current_count == 0:
            return []

        stats = self.stats
        self.session.current_count -= 1
        stats.total_reps = max(0, stats.total_reps - 1)
        stats.today_total = max(0, stats.today_total - 1)
        stats.week_total = max(0, stats.week_total - 1)
        if self.session.rep_timestamps:
            self.session.rep_timestamps.pop()

        events: list[EngineEvent] = []
        events.append(EngineEvent(EventKind.FEEDBACK, Feedback.LIGHT))
        self._refresh_achievements(events)
        return self._publish(events)

    def reset_session(self) -> list[EngineEvent]:
        """Finish the current session and add it to the history."""
        count = self.session.current_count
        if count == 0:
            return []

        now = self._now()
        session = WorkoutSession(
            count=count,
            completed_at=now,
            duration_seconds=self.session_elapsed_seconds,
        )
        self.history.insert(0, session)
        self.stats.sessions_completed += 1
        self.stats.last_workout_date = now

        self.session.clear()
        self._stop_all_timers()

        logger.info("Session completed: %d reps in %s", count, session.formatted_duration)

        events: list[EngineEvent] = []
        self._cue(events, Feedback.MEDIUM, Sound.COMPLETE)
        self._refresh_achievements(events)
        return self._publish(events)

    def reset_all(self) -> list[EngineEvent]:
        """Erase every counter, the streak and the whole history."""
        stats = self.stats
        stats.personal_best = 0
        stats.total_reps = 0
        stats.sessions_completed = 0
        stats.today_total = 0
        stats.week_total = 0
        stats.current_streak = 0
        stats.goal_achieved_today = False
        stats.last_workout_date = None
        self.history.clear()
        self.session.clear()
        self._stop_all_timers()

        self._unlocked_count = count_unlocked(self.achievements)
        self.has_new_achievement = False
        logger.info("All workout data reset")

        return self._publish([EngineEvent(EventKind.FEEDBACK, Feedback.HEAVY)])

    def delete_session(self, session_id: str) -> bool:
        """Remove one history entry. Aggregates are not touched."""
        for index, session in enumerate(self.history):
            if session.id == session_id:
                del self.history[index]
                return True
        return False

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    @property
    def session_elapsed_seconds(self) -> float:
        """Elapsed time of whichever timer measures the session."""
        if self.timer_mode is TimerMode.STOPWATCH:
            return self.stopwatch.elapsed
        return self.countdown.elapsed

    def set_timer_mode(self, mode: TimerMode) -> None:
        if mode is self.timer_mode:
            return
        if self.timer_mode is TimerMode.STOPWATCH:
            self.stopwatch.stop()
        else:
            self.countdown.stop()
        self.timer_mode = mode

    def toggle_stopwatch(self) -> bool:
        return self.stopwatch.toggle()

    def toggle_countdown(self) -> bool:
        return self.countdown.toggle()

    def toggle_active_timer(self) -> bool:
        if self.timer_mode is TimerMode.STOPWATCH:
            return self.toggle_stopwatch()
        return self.toggle_countdown()

    def reset_countdown(self) -> None:
        self.countdown.reset()

    def increase_countdown(self, minutes: int = 0, seconds: int = 0) -> None:
        self.countdown.increase(minutes=minutes, seconds=seconds)

    def decrease_countdown(self, minutes: int = 0, seconds: int = 0) -> None:
        self.countdown.decrease(minutes=minutes, seconds=seconds)

    def configure_countdown(self, minutes: int, seconds: int) -> None:
        self.countdown.configure(minutes, seconds)

    def start_rest(self) -> None:
        self.rest.start(self.settings.rest_duration)

    def stop_rest(self) -> None:
        self.rest.stop()

    def _stop_all_timers(self) -> None:
        self.stopwatch.reset()
        self.countdown.reset()
        self.rest.stop()

    def _countdown_finished(self) -> None:
        events: list[EngineEvent] = []
        self._cue(events, Feedback.HEAVY, Sound.COMPLETE)
        events.append(EngineEvent(EventKind.COUNTDOWN_FINISHED))
        if self.settings.auto_rest_timer:
            self.start_rest()
        self._publish(events)

    def _rest_finished(self) -> None:
        events: list[EngineEvent] = []
        self._cue(events, Feedback.MEDIUM, Sound.BEEP)
        events.append(EngineEvent(EventKind.REST_FINISHED))
        self._publish(events)

    # ------------------------------------------------------------------
    # Goals, streaks and settings
    # ------------------------------------------------------------------

    def evaluate_daily_reset(self, today: date | None = None) -> list[EngineEvent]:
        """Roll daily totals over and update the streak for a new day.

        Runs at most once per calendar day.
        """
        if today is None:
            today = self._now().date()
        if self.last_reset_check == today:
            return []
        self.last_reset_check = today

        stats = self.stats
        last = stats.last_workout_date.date() if stats.last_workout_date else None
        outcome = compute_daily_reset(last, stats.current_streak, today)

        stats.current_streak = outcome.streak
        if outcome.reset_daily_totals:
            stats.today_total = 0
            stats.goal_achieved_today = False

        logger.info(
            "Daily reset for %s: %s days since last workout, streak %d",
            today.isoformat(),
            outcome.days_since_last_workout,
            outcome.streak,
        )

        events: list[EngineEvent] = []
        if outcome.streak_continues and self.settings.streak_reminders_enabled:
            events.append(EngineEvent(EventKind.STREAK_CONTINUES, outcome.streak))
        self._refresh_achievements(events)
        return self._publish(events)

    def set_daily_goal(self, goal: int) -> None:
        self.daily_goal = max(1, goal)

    def update_settings(self, **changes) -> Settings:
        """Change one or more settings.

        Raises:
            KeyError: if a setting name is unknown
        """
        known = Settings.names()
        for name in changes:
            if name not in known:
                raise KeyError(name)

        for name, value in changes.items():
            if name == "rest_duration":
                value = max(1, int(value))
            setattr(self.settings, name, value)

        if not self.settings.auto_rest_timer:
            self.rest.stop()
        return self.settings

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    @property
    def achievements(self) -> list[Achievement]:
        return evaluate_achievements(self.stats)

    @property
    def unlocked_count(self) -> int:
        return count_unlocked(self.achievements)

    def clear_new_achievement(self) -> None:
        self.has_new_achievement = False

    def _refresh_achievements(self, events: list[EngineEvent]) -> None:
        achievements = self.achievements
        unlocked = count_unlocked(achievements)

        if unlocked > self._unlocked_count:
            self.has_new_achievement = True
            self._cue(events, Feedback.SUCCESS, Sound.ACHIEVEMENT)
            newest = first_exact_unlock(achievements)
            if newest is not None:
                logger.info("Achievement unlocked: %s", newest.title)
                events.append(EngineEvent(EventKind.ACHIEVEMENT_UNLOCKED, newest.title))

        self._unlocked_count = unlocked

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def reps_per_minute(self) -> int:
        elapsed = self.session_elapsed_seconds
        if elapsed <= 0 or self.session.current_count == 0:
            return 0
        return round(self.session.current_count / elapsed * 60)

    @property
    def average_per_session(self) -> int:
        if self.stats.sessions_completed == 0:
            return 0
        return self.stats.total_reps // self.stats.sessions_completed

    @property
    def countdown_total_seconds(self) -> int:
        return self.countdown.total_seconds

    @property
    def countdown_remaining_seconds(self) -> int:
        return self.countdown.remaining_seconds

    @property
    def countdown_progress(self) -> float:
        return self.countdown.progress

    @property
    def goal_progress(self) -> float:
        """Today's total over the daily goal, unclamped."""
        if self.daily_goal <= 0:
            return 0.0
        return self.stats.today_total / self.daily_goal

    @property
    def goal_progress_display(self) -> float:
        return min(self.goal_progress, 1.0)

    def summary(self) -> dict:
        """Current state plus derived values, for display."""
        stats = self.stats
        return {
            "current_count": self.session.current_count,
            "personal_best": stats.personal_best,
            "total_reps": stats.total_reps,
            "sessions_completed": stats.sessions_completed,
            "today_total": stats.today_total,
            "week_total": stats.week_total,
            "current_streak": stats.current_streak,
            "daily_goal": self.daily_goal,
            "goal_achieved_today": stats.goal_achieved_today,
            "goal_progress": self.goal_progress_display,
            "reps_per_minute": self.reps_per_minute,
            "average_per_session": self.average_per_session,
            "timer_mode": self.timer_mode.value,
            "session_time": format_clock(self.session_elapsed_seconds),
            "stopwatch": {
                "status": self.stopwatch.status.value,
                "elapsed": self.stopwatch.elapsed,
            },
            "countdown": {
                "status": self.countdown.status.value,
                "elapsed": self.countdown.elapsed,
                "duration": self.countdown.total_seconds,
                "remaining": format_clock(self.countdown.remaining_seconds),
                "progress": self.countdown.progress,
            },
            "rest": {
                "status": self.rest.status.value,
                "remaining": f"{int(self.rest.remaining)}s",
            },
            "unlocked_achievements": self.unlocked_count,
            "has_new_achievement": self.has_new_achievement,
        }

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> PersistedState:
        """Copy of everything that must be saved."""
        return copy.deepcopy(
            PersistedState(
                stats=self.stats,
                daily_goal=self.daily_goal,
                session_history=self.history,
                timer_mode=self.timer_mode,
                countdown_minutes=self.countdown.minutes,
                countdown_seconds=self.countdown.seconds,
                settings=self.settings,
                active_session=self.session,
                last_reset_check=self.last_reset_check,
            )
        )

    def drain_events(self) -> list[EngineEvent]:
        events = list(self.pending_events)
        self.pending_events.clear()
        return events

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _count_rep(self, events: list[EngineEvent]) -> None:
        stats = self.stats
        self.session.current_count += 1
        stats.total_reps += 1
        stats.today_total += 1
        stats.week_total += 1
        self.session.rep_timestamps.append(self._now())

        # The first rep starts the clock
        if self.timer_mode is TimerMode.STOPWATCH and not self.stopwatch.is_running:
            self.stopwatch.start()

        count = self.session.current_count
        if count > stats.personal_best:
            stats.personal_best = count
            self._cue(events, Feedback.SUCCESS, Sound.SUCCESS)
        else:
            self._cue(events, Feedback.LIGHT, Sound.CLICK)

        if self.settings.voice_count_enabled and count % VOICE_COUNT_INTERVAL == 0:
            events.append(EngineEvent(EventKind.VOICE_COUNT, count))

        if self.settings.milestone_notifications_enabled and count in MILESTONES:
            events.append(EngineEvent(EventKind.MILESTONE, count))

        if (
            self.settings.goal_notifications_enabled
            and self.daily_goal > 0
            and not stats.goal_achieved_today
            and stats.today_total >= self.daily_goal
        ):
            stats.goal_achieved_today = True
            events.append(EngineEvent(EventKind.GOAL_ACHIEVED, self.daily_goal))

        if self.settings.auto_rest_timer:
            self.start_rest()

        self._refresh_achievements(events)

    def _cue(self, events: list[EngineEvent], feedback: Feedback, sound: Sound) -> None:
        events.append(EngineEvent(EventKind.FEEDBACK, feedback))
        if self.settings.sound_enabled:
            events.append(EngineEvent(EventKind.SOUND, sound))

    def _publish(self, events: list[EngineEvent]) -> list[EngineEvent]:
        for event in events:
            self.pending_events.append(event)
            if self.on_event is not None:
                self.on_event(event)
        return events
