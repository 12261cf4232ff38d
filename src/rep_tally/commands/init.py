"""Initialize project command."""

import click
import questionary
from questionary import Style

from ..db import SnapshotRepository, get_db_path, init_db
from .base import async_command, echo_info, echo_success, get_data_dir

GOAL_OPTIONS = [10, 20, 30, 50, 75, 100, 150, 200]

custom_style = Style(
    [
        ("qmark", "fg:#22c55e bold"),
        ("question", "bold"),
        ("answer", "fg:#22c55e bold"),
        ("pointer", "fg:#22c55e bold"),
        ("highlighted", "fg:#22c55e bold"),
    ]
)


async def ask_daily_goal(default: int) -> int:
    """Ask for a daily rep goal from the preset options."""
    choice = await questionary.select(
        "Set your daily goal (reps per day):",
        choices=[
            questionary.Choice(f"{goal} reps", goal) for goal in GOAL_OPTIONS
        ],
        default=default if default in GOAL_OPTIONS else None,
        style=custom_style,
    ).ask_async()
    return choice if choice is not None else default


async def ask_reminders() -> bool:
    answer = await questionary.confirm(
        "Store a daily reminder time? (09:00, change later with 'settings set')",
        default=False,
        style=custom_style,
    ).ask_async()
    return bool(answer)


@click.command()
@click.option("--goal", type=click.IntRange(min=1), help="Daily goal; skips the questionnaire")
@click.pass_context
@async_command
async def init(ctx: click.Context, goal: int | None):
    """Initialize rep-tally and set up your daily goal.

    Creates the data directory and the SQLite database. Unless --goal is
    given, a short questionnaire asks for your daily rep goal.
    """
    data_dir = get_data_dir(ctx)
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing rep-tally in {data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    repository = SnapshotRepository(db_path)
    state = await repository.load()

    if goal is None:
        goal = await ask_daily_goal(state.daily_goal)
        state.settings.daily_reminders_enabled = await ask_reminders()

    state.daily_goal = goal
    state.settings.onboarding_completed = True
    await repository.save(state)
    echo_success(f"Daily goal set to {goal} reps")

    click.echo()
    click.echo("rep-tally is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  rep-tally workout        # live session with timers")
    click.echo("  rep-tally add 10         # log reps without a live session")
    click.echo("  rep-tally status         # today, streak and totals")
