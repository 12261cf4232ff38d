"""Goal, settings and timer configuration commands."""

import click

from ..models.session import TimerMode, format_clock
from ..models.snapshot import Settings
from .base import (
    async_command,
    echo_error,
    echo_success,
    echo_warning,
    ensure_initialized,
    open_tracker,
)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_setting(name: str, raw: str):
    """Convert a command-line string to the type of setting ``name``.

    Raises:
        KeyError: unknown setting
        ValueError: value does not fit the setting
    """
    default = getattr(Settings(), name)
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ValueError(f"expected on/off, got {raw!r}")
    if isinstance(default, int):
        value = int(raw)
        if value <= 0:
            raise ValueError("must be a positive number")
        return value
    # reminder_time
    hours, _, minutes = raw.partition(":")
    if not (hours.isdigit() and minutes.isdigit() and int(hours) < 24 and int(minutes) < 60):
        raise ValueError(f"expected HH:MM, got {raw!r}")
    return f"{int(hours):02d}:{int(minutes):02d}"


@click.command()
@click.argument("reps", type=click.IntRange(min=1))
@click.pass_context
@async_command
async def goal(ctx: click.Context, reps: int):
    """Set the daily goal to REPS per day."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    await service.set_daily_goal(reps)
    echo_success(f"Daily goal set to {reps} reps")


@click.group()
def settings():
    """Show or change preferences."""
    pass


@settings.command("show")
@click.pass_context
@async_command
async def show(ctx: click.Context):
    """Show all settings."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    engine = service.engine

    click.echo(f"{'daily_goal':<32} {engine.daily_goal}")
    click.echo(f"{'timer_mode':<32} {engine.timer_mode.value}")
    click.echo(f"{'countdown':<32} {format_clock(engine.countdown.total_seconds)}")
    for name, value in engine.settings.to_dict().items():
        if isinstance(value, bool):
            value = "on" if value else "off"
        click.echo(f"{name:<32} {value}")


@settings.command("set")
@click.argument("name")
@click.argument("value")
@click.pass_context
@async_command
async def set_setting(ctx: click.Context, name: str, value: str):
    """Change setting NAME to VALUE (on/off for switches)."""
    ensure_initialized(ctx)

    if name not in Settings.names():
        echo_error(f"Unknown setting '{name}'. Known settings: {', '.join(Settings.names())}")
        ctx.exit(1)

    try:
        parsed = parse_setting(name, value)
    except ValueError as e:
        echo_error(f"Invalid value for {name}: {e}")
        ctx.exit(1)

    service = await open_tracker(ctx, quiet=True)
    await service.update_settings(**{name: parsed})
    echo_success(f"{name} = {value}")


@click.group()
def timer():
    """Configure the session timer."""
    pass


@timer.command("mode")
@click.argument("mode", type=click.Choice([m.value for m in TimerMode]))
@click.pass_context
@async_command
async def mode(ctx: click.Context, mode: str):
    """Choose the stopwatch or the countdown ('counter') timer."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    await service.set_timer_mode(TimerMode(mode))
    echo_success(f"Timer mode set to {mode}")


@timer.command("set")
@click.argument("minutes", type=click.IntRange(min=0))
@click.argument("seconds", type=click.IntRange(min=0), default=0)
@click.pass_context
@async_command
async def set_countdown(ctx: click.Context, minutes: int, seconds: int):
    """Set the countdown duration (at most 59:59)."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    await service.configure_countdown(minutes, seconds)
    total = service.engine.countdown.total_seconds
    if total == 0:
        echo_warning("A 0:00 countdown never finishes.")
    echo_success(f"Countdown set to {format_clock(total)}")


@click.command("reset-all")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
@async_command
async def reset_all(ctx: click.Context, yes: bool):
    """Erase all counts, streaks, achievements and history."""
    ensure_initialized(ctx)

    if not yes and not click.confirm("This deletes all your workout data. Continue?"):
        return

    service = await open_tracker(ctx, quiet=True)
    await service.reset_all()
    echo_success("All data reset")
