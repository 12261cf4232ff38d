"""Counting commands: a live session and one-shot rep logging."""

import asyncio

import click

from ..engine.clock import AsyncioScheduler
from ..engine.workout import WorkoutEngine
from ..models.session import TimerMode, format_clock
from ..services import TrackerService
from .base import (
    async_command,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    open_tracker,
)

KEY_HELP = (
    "[+/space] rep  [-] undo  [5] +5  [0] +10  [t] start/pause timer  "
    "[r] finish session  [m] switch timer  [s] status  [q] quit"
)

QUIT_KEYS = {"q", "Q", "\x03", "\x04"}


def render_line(engine: WorkoutEngine) -> str:
    """One-line view of the live session."""
    if engine.timer_mode is TimerMode.STOPWATCH:
        timer = f"Stopwatch {format_clock(engine.stopwatch.elapsed)}"
    else:
        timer = f"Timer {format_clock(engine.countdown.remaining_seconds)} left"
    if engine.rest.is_running:
        timer += f"  Rest {int(engine.rest.remaining)}s"

    return (
        f"Reps: {engine.current_count}  |  Today: {engine.stats.today_total}/{engine.daily_goal}"
        f"  |  Best: {engine.stats.personal_best}  |  {timer}"
    )


async def _handle_key(service: TrackerService, key: str) -> bool:
    """Apply one keypress. Returns False for keys that do nothing."""
    engine = service.engine
    if key in ("+", "=", " "):
        await service.increment()
    elif key == "-":
        await service.decrement()
    elif key == "5":
        await service.quick_add(5)
    elif key == "0":
        await service.quick_add(10)
    elif key in ("t", "T"):
        running = await service.toggle_active_timer()
        echo_info("Timer running" if running else "Timer paused")
    elif key in ("r", "R"):
        count = engine.current_count
        if count == 0:
            echo_warning("Nothing to finish yet.")
            return False
        await service.reset_session()
        session = engine.history[0]
        echo_success(f"Session saved: {session.count} reps in {session.formatted_duration}")
    elif key in ("m", "M"):
        mode = TimerMode.COUNTER if engine.timer_mode is TimerMode.STOPWATCH else TimerMode.STOPWATCH
        await service.set_timer_mode(mode)
        echo_info(f"Timer mode: {mode.value}")
    elif key in ("s", "S"):
        pass
    else:
        return False
    return True


@click.command()
@click.pass_context
@async_command
async def workout(ctx: click.Context):
    """Run a live counting session.

    Timers tick in real time while the session is open. Reps, the session
    and every setting are saved after each keypress.
    """
    ensure_initialized(ctx)

    service = await open_tracker(ctx, scheduler=AsyncioScheduler())
    loop = asyncio.get_running_loop()

    click.echo(KEY_HELP)
    click.echo(render_line(service.engine))

    try:
        while True:
            try:
                key = await loop.run_in_executor(None, click.getchar)
            except (KeyboardInterrupt, EOFError):
                break
            if key in QUIT_KEYS:
                break
            if await _handle_key(service, key):
                click.echo(render_line(service.engine))
    finally:
        await service.close()

    if service.engine.current_count > 0:
        echo_info(
            f"Unfinished session kept ({service.engine.current_count} reps). "
            "Run 'rep-tally finish' to save it."
        )


@click.command()
@click.argument("amount", type=click.IntRange(min=1), default=1)
@click.pass_context
@async_command
async def add(ctx: click.Context, amount: int):
    """Log AMOUNT reps to the current session (default 1)."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx)
    await service.quick_add(amount)
    await service.close()

    echo_success(f"Session now at {service.engine.current_count} reps")


@click.command()
@click.pass_context
@async_command
async def undo(ctx: click.Context):
    """Remove the last rep from the current session."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx)
    if service.engine.current_count == 0:
        echo_warning("No reps to undo.")
        return
    await service.decrement()

    echo_success(f"Session now at {service.engine.current_count} reps")


@click.command()
@click.pass_context
@async_command
async def finish(ctx: click.Context):
    """Finish the current session and add it to the history."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx)
    if service.engine.current_count == 0:
        echo_warning("No reps in the current session.")
        return
    await service.reset_session()

    session = service.engine.history[0]
    echo_success(f"Session saved: {session.count} reps")
