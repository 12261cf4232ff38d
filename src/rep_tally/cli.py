"""CLI entry point for rep-tally."""

from pathlib import Path

import click

from . import __version__
from .commands import (
    achievements,
    add,
    finish,
    goal,
    history,
    init,
    reset_all,
    serve,
    settings,
    status,
    timer,
    undo,
    workout,
)
from .config import Config
from .logging_setup import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="rep-tally")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Where the database lives (default: $REP_TALLY_DATA_DIR or ./data)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log engine activity to stderr")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, verbose: bool):
    """rep-tally: count reps, time sets, keep your streak.

    Example usage:

        # Set up and pick a daily goal
        rep-tally init

        # Live session with stopwatch, countdown and rest timers
        rep-tally workout

        # Log reps after the fact
        rep-tally add 20
        rep-tally finish

        # See how you are doing
        rep-tally status
        rep-tally achievements
    """
    config = Config.from_env(data_dir)
    setup_logging(config.log_format, "INFO" if verbose else config.log_level)
    ctx.obj = config


# Register commands
main.add_command(init)
main.add_command(workout)
main.add_command(add)
main.add_command(undo)
main.add_command(finish)
main.add_command(status)
main.add_command(achievements)
main.add_command(history)
main.add_command(goal)
main.add_command(settings)
main.add_command(timer)
main.add_command(reset_all)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
