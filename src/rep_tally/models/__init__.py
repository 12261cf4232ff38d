"""Data models for rep-tally."""

from .achievements import (
    ACHIEVEMENT_CATALOG,
    Achievement,
    AchievementDefinition,
    AchievementMetric,
    AchievementTier,
    evaluate_achievements,
)
from .session import LifetimeStats, SessionState, TimerMode, WorkoutSession, format_clock
from .snapshot import SNAPSHOT_VERSION, PersistedState, Settings

__all__ = [
    "ACHIEVEMENT_CATALOG",
    "Achievement",
    "AchievementDefinition",
    "AchievementMetric",
    "AchievementTier",
    "evaluate_achievements",
    "format_clock",
    "LifetimeStats",
    "PersistedState",
    "SessionState",
    "Settings",
    "SNAPSHOT_VERSION",
    "TimerMode",
    "WorkoutSession",
]
