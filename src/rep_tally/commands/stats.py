"""Progress and achievement commands."""

import click

from .base import async_command, ensure_initialized, open_tracker, progress_bar


@click.command()
@click.pass_context
@async_command
async def status(ctx: click.Context):
    """Show today's progress, streak and lifetime totals."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx)
    engine = service.engine
    stats = engine.stats

    click.echo()
    click.echo(click.style("Today", bold=True))
    click.echo("=" * 40)
    click.echo(
        f"Goal:     {progress_bar(engine.goal_progress_display)} "
        f"{stats.today_total}/{engine.daily_goal}"
    )
    if stats.goal_achieved_today:
        click.echo(click.style("          Goal achieved!", fg="green"))
    if engine.current_count:
        click.echo(f"Session:  {engine.current_count} reps (unfinished)")
    click.echo(f"Streak:   {stats.current_streak} days")

    click.echo()
    click.echo(click.style("All time", bold=True))
    click.echo("=" * 40)
    click.echo(f"Personal best:     {stats.personal_best}")
    click.echo(f"Total reps:        {stats.total_reps}")
    click.echo(f"Reps this week:    {stats.week_total}")
    click.echo(f"Sessions:          {stats.sessions_completed}")
    click.echo(f"Average/session:   {engine.average_per_session}")
    if stats.last_workout_date:
        click.echo(f"Last workout:      {stats.last_workout_date.strftime('%Y-%m-%d %H:%M')}")
    click.echo(
        f"Achievements:      {engine.unlocked_count}/{len(engine.achievements)} unlocked"
    )


@click.command()
@click.option("--locked/--all", default=False, help="Only show achievements still locked")
@click.pass_context
@async_command
async def achievements(ctx: click.Context, locked: bool):
    """List achievements and your progress towards them."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    engine = service.engine

    click.echo()
    for achievement in engine.achievements:
        if locked and achievement.is_unlocked:
            continue
        if achievement.is_unlocked:
            mark = click.style("[x]", fg="green")
        else:
            mark = "[ ]"
        progress = min(achievement.current_progress, achievement.target_progress)
        click.echo(
            f"{mark} {achievement.title:<16} {progress_bar(achievement.progress_ratio, 10)} "
            f"{progress}/{achievement.target_progress}  {achievement.description}"
        )

    if engine.has_new_achievement:
        engine.clear_new_achievement()
