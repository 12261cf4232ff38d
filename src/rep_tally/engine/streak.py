"""Daily rollover and streak continuity."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyReset:
    """Outcome of comparing the last workout day against today.

    Attributes:
        days_since_last_workout: Calendar days between the two, or None on a
            cold start
        streak: Streak after the evaluation
        reset_daily_totals: Whether today's total and goal flag start over
    """

    days_since_last_workout: int | None
    streak: int
    reset_daily_totals: bool

    @property
    def streak_continues(self) -> bool:
        return self.days_since_last_workout == 1 and self.streak > 0


def calendar_day_difference(earlier: date, later: date) -> int:
    """Whole calendar days from ``earlier`` to ``later`` (time of day ignored)."""
    return (later - earlier).days


def compute_daily_reset(last_workout: date | None, streak: int, today: date) -> DailyReset:
    """Work out the streak and daily-total state for ``today``.

    - no previous workout: streak 0, daily totals cleared
    - same day: nothing changes
    - previous day: streak + 1, daily totals cleared
    - two or more days ago: streak 0, daily totals cleared
    """
    if last_workout is None:
        return DailyReset(days_since_last_workout=None, streak=0, reset_daily_totals=True)

    days = calendar_day_difference(last_workout, today)
    if days <= 0:
        # Same day (or a clock that went backwards)
        return DailyReset(days_since_last_workout=days, streak=streak, reset_daily_totals=False)
    if days == 1:
        return DailyReset(days_since_last_workout=1, streak=streak + 1, reset_daily_totals=True)
    return DailyReset(days_since_last_workout=days, streak=0, reset_daily_totals=True)
