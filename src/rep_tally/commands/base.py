"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click

from ..config import Config
from ..db import SnapshotRepository, get_db_path
from ..engine.clock import Scheduler
from ..services import ConsoleNotifier, TrackerService


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_config(ctx: click.Context) -> Config:
    """Get the config stored on the root context."""
    config = ctx.find_object(Config)
    if config is None:
        config = Config.from_env()
    return config


def get_data_dir(ctx: click.Context) -> Path:
    """Get the data directory path."""
    return get_config(ctx).data_dir


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path(get_data_dir(ctx))
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'rep-tally init' first."
        )
        ctx.exit(1)


async def open_tracker(
    ctx: click.Context,
    scheduler: Scheduler | None = None,
    quiet: bool = False,
) -> TrackerService:
    """Load the saved state into a tracker that prints its notifications."""
    repository = SnapshotRepository(get_db_path(get_data_dir(ctx)))
    sinks = [] if quiet else [ConsoleNotifier()]
    return await TrackerService.open(repository, scheduler=scheduler, sinks=sinks)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def progress_bar(ratio: float, width: int = 20) -> str:
    """Render a 0..1 ratio as a text bar."""
    filled = int(round(max(0.0, min(ratio, 1.0)) * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = []

    header_line = ""
    for i, h in enumerate(headers):
        header_line += h.ljust(widths[i] + padding)
    lines.append(header_line.rstrip())

    sep_line = ""
    for w in widths:
        sep_line += "-" * w + " " * padding
    lines.append(sep_line.rstrip())

    for row in rows:
        row_line = ""
        for i, cell in enumerate(row):
            row_line += str(cell).ljust(widths[i] + padding)
        lines.append(row_line.rstrip())

    return "\n".join(lines)
