"""Data access layer for rep-tally."""

import json
import logging
from datetime import datetime
from pathlib import Path

import aiosqlite

from ..models.snapshot import SNAPSHOT_VERSION, PersistedState
from .engine import get_db_path, init_db

logger = logging.getLogger(__name__)

SNAPSHOT_ROW_ID = 1


class SnapshotRepository:
    """Loads and saves the tracker snapshot.

    The snapshot is written as one row in one transaction, so a crash can
    never leave half of a save on disk.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def load(self) -> PersistedState:
        """Load the saved state, or defaults if nothing usable is stored."""
        if not Path(self.db_path).exists():
            return PersistedState()

        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(
                    "SELECT payload FROM snapshots WHERE id = ?", (SNAPSHOT_ROW_ID,)
                )
                row = await cursor.fetchone()
        except aiosqlite.OperationalError as e:
            logger.warning("Could not read snapshot from %s: %s", self.db_path, e)
            return PersistedState()

        if row is None:
            return PersistedState()

        try:
            data = json.loads(row[0])
        except (TypeError, ValueError) as e:
            logger.warning("Stored snapshot is not valid JSON, using defaults: %s", e)
            return PersistedState()

        return PersistedState.from_dict(data)

    async def save(self, state: PersistedState) -> None:
        """Replace the stored snapshot."""
        payload = json.dumps(state.to_dict())
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO snapshots (id, version, payload, saved_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    version = excluded.version,
                    payload = excluded.payload,
                    saved_at = excluded.saved_at
                """,
                (SNAPSHOT_ROW_ID, SNAPSHOT_VERSION, payload, datetime.now().isoformat()),
            )
            await db.commit()

    async def ensure_schema(self) -> None:
        await init_db(self.db_path)
