"""Database layer for rep-tally."""

from .engine import get_db_path, init_db
from .repositories import SnapshotRepository

__all__ = [
    "get_db_path",
    "init_db",
    "SnapshotRepository",
]
