"""FastAPI application for the rep-tally JSON API."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from .. import __version__
from ..db import SnapshotRepository, get_db_path, init_db
from ..engine.clock import AsyncioScheduler
from ..services import LoggingNotifier, TrackerService
from .routers import history, workout


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if db_path is None:
        db_path = get_db_path()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the tracker on startup, save and stop timers on shutdown."""
        await init_db(db_path)
        app.state.tracker = await TrackerService.open(
            SnapshotRepository(db_path),
            scheduler=AsyncioScheduler(),
            sinks=[LoggingNotifier()],
        )
        yield
        await app.state.tracker.close()

    app = FastAPI(
        title="rep-tally",
        description="Repetition counter with timers, streaks and achievements",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(workout.router)
    app.include_router(history.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
