"""Achievement catalog and evaluation.

The catalog is fixed. Progress is never stored; it is recomputed from the
lifetime aggregates whenever they change.
"""

from dataclasses import dataclass
from enum import Enum

from .session import LifetimeStats


class AchievementMetric(str, Enum):
    """Lifetime aggregate an achievement is measured against."""

    TOTAL_REPS = "total_reps"
    PERSONAL_BEST = "personal_best"
    STREAK = "current_streak"
    SESSIONS = "sessions_completed"


class AchievementTier(str, Enum):
    FIRST_REP = "first_rep"
    SESSION_MILESTONE = "session_milestone"
    STREAK = "streak"
    SESSION_COUNT = "session_count"
    LIFETIME_TOTAL = "lifetime_total"


@dataclass(frozen=True)
class AchievementDefinition:
    """Static description of one catalog entry."""

    id: str
    title: str
    description: str
    icon: str
    tier: AchievementTier
    metric: AchievementMetric
    target_progress: int


@dataclass(frozen=True)
class Achievement:
    """A catalog entry evaluated against the current aggregates."""

    definition: AchievementDefinition
    current_progress: int

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def title(self) -> str:
        return self.definition.title

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def target_progress(self) -> int:
        return self.definition.target_progress

    @property
    def is_unlocked(self) -> bool:
        return self.current_progress >= self.target_progress

    @property
    def progress_ratio(self) -> float:
        """Progress towards the target, capped at 1.0."""
        return min(self.current_progress / self.target_progress, 1.0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.definition.icon,
            "tier": self.definition.tier.value,
            "target_progress": self.target_progress,
            "current_progress": self.current_progress,
            "is_unlocked": self.is_unlocked,
        }


def _entry(id, title, description, icon, tier, metric, target):
    return AchievementDefinition(
        id=id,
        title=title,
        description=description,
        icon=icon,
        tier=tier,
        metric=metric,
        target_progress=target,
    )


_T = AchievementTier
_M = AchievementMetric

ACHIEVEMENT_CATALOG: tuple[AchievementDefinition, ...] = (
    # Beginner
    _entry("first_step", "First Step", "Complete 1 rep", "figure.walk", _T.FIRST_REP, _M.TOTAL_REPS, 1),
    _entry("getting_started", "Getting Started", "Complete 10 reps", "star.fill", _T.FIRST_REP, _M.TOTAL_REPS, 10),
    _entry("warm_up", "Warm Up", "Complete 25 reps", "bolt.fill", _T.FIRST_REP, _M.TOTAL_REPS, 25),
    # Single session
    _entry("half_century", "Half Century", "Complete 50 reps in one session", "50.circle.fill",
           _T.SESSION_MILESTONE, _M.PERSONAL_BEST, 50),
    _entry("iron_arms", "Iron Arms", "Complete 75 reps in one session", "hammer.fill",
           _T.SESSION_MILESTONE, _M.PERSONAL_BEST, 75),
    _entry("century_club", "Century Club", "Complete 100 reps in one session", "100.circle.fill",
           _T.SESSION_MILESTONE, _M.PERSONAL_BEST, 100),
    # Streaks
    _entry("consistent", "Consistent", "Complete a 7-day streak", "flame.fill", _T.STREAK, _M.STREAK, 7),
    _entry("on_fire", "On Fire", "Complete a 14-day streak", "flame.circle.fill", _T.STREAK, _M.STREAK, 14),
    _entry("unbreakable", "Unbreakable", "Complete a 30-day streak", "shield.fill", _T.STREAK, _M.STREAK, 30),
    # Sessions
    _entry("dedicated", "Dedicated", "Complete 30 sessions", "calendar.badge.checkmark",
           _T.SESSION_COUNT, _M.SESSIONS, 30),
    _entry("habit_builder", "Habit Builder", "Complete 75 sessions", "calendar.circle.fill",
           _T.SESSION_COUNT, _M.SESSIONS, 75),
    _entry("daily_grinder", "Daily Grinder", "Complete 150 sessions", "clock.fill",
           _T.SESSION_COUNT, _M.SESSIONS, 150),
    # Lifetime totals
    _entry("thousand_club", "Thousand Club", "Complete 1,000 total reps", "trophy.fill",
           _T.LIFETIME_TOTAL, _M.TOTAL_REPS, 1000),
    _entry("iron_chest", "Iron Chest", "Complete 5,000 total reps", "medal.fill",
           _T.LIFETIME_TOTAL, _M.TOTAL_REPS, 5000),
    _entry("rep_legend", "Rep Legend", "Complete 10,000 total reps", "crown.fill",
           _T.LIFETIME_TOTAL, _M.TOTAL_REPS, 10_000),
)


def evaluate_achievements(stats: LifetimeStats) -> list[Achievement]:
    """Evaluate the whole catalog, in catalog order."""
    return [
        Achievement(definition=d, current_progress=getattr(stats, d.metric.value))
        for d in ACHIEVEMENT_CATALOG
    ]


def count_unlocked(achievements: list[Achievement]) -> int:
    return sum(1 for a in achievements if a.is_unlocked)


def first_exact_unlock(achievements: list[Achievement]) -> Achievement | None:
    """Return the first entry whose progress sits exactly on its target.

    That is the entry most likely to have just been unlocked.
    """
    for achievement in achievements:
        if achievement.is_unlocked and achievement.current_progress == achievement.target_progress:
            return achievement
    return None
