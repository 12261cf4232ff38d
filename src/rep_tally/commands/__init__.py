"""CLI commands for rep-tally."""

from .history import history
from .init import init
from .serve import serve
from .settings import goal, reset_all, settings, timer
from .stats import achievements, status
from .workout import add, finish, undo, workout

__all__ = [
    "achievements",
    "add",
    "finish",
    "goal",
    "history",
    "init",
    "reset_all",
    "serve",
    "settings",
    "status",
    "timer",
    "undo",
    "workout",
]
