"""Workout history commands."""

import csv
import io

import click

from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    open_tracker,
)


@click.group()
def history():
    """View, export and prune completed sessions."""
    pass


@history.command("list")
@click.option("--limit", "-n", type=int, default=20, help="Number of sessions to show")
@click.pass_context
@async_command
async def list_sessions(ctx: click.Context, limit: int):
    """List completed sessions, most recent first."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    engine = service.engine

    if not engine.history:
        echo_info("No workout history yet. Finish a session to see it here.")
        return

    rows = []
    for session in engine.history[:limit]:
        best = "*" if session.count == engine.stats.personal_best else ""
        rows.append(
            [
                session.id[:8],
                session.completed_at.strftime("%Y-%m-%d %H:%M"),
                str(session.count) + best,
                session.formatted_duration,
            ]
        )

    click.echo()
    click.echo(format_table(["ID", "Date", "Reps", "Duration"], rows))
    if len(engine.history) > limit:
        click.echo(f"... {len(engine.history) - limit} more")


@history.command("delete")
@click.argument("session_id")
@click.pass_context
@async_command
async def delete(ctx: click.Context, session_id: str):
    """Delete a session by ID (the 8-character prefix is enough)."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    matches = [s for s in service.engine.history if s.id.startswith(session_id)]

    if not matches:
        echo_error(f"Session {session_id} not found.")
        ctx.exit(1)
    if len(matches) > 1:
        echo_error(f"Session ID {session_id} is ambiguous, use more characters.")
        ctx.exit(1)

    await service.delete_session(matches[0].id)
    echo_success(f"Deleted session {matches[0].id[:8]} ({matches[0].count} reps)")


@history.command("export")
@click.option("--csv", "as_csv", is_flag=True, help="Export as CSV")
@click.option("--output", "-o", type=click.Path(), help="Write to file instead of stdout")
@click.pass_context
@async_command
async def export(ctx: click.Context, as_csv: bool, output: str | None):
    """Export the workout history."""
    ensure_initialized(ctx)

    service = await open_tracker(ctx, quiet=True)
    sessions = service.engine.history

    if as_csv:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["id", "count", "completed_at", "duration_seconds"])
        for session in sessions:
            writer.writerow(
                [session.id, session.count, session.completed_at.isoformat(), session.duration_seconds]
            )
        content = buffer.getvalue()
    else:
        lines = ["=== Workout History Export ==="]
        for session in sessions:
            lines.append(
                f"{session.completed_at.strftime('%Y-%m-%d %H:%M')}: "
                f"{session.count} reps in {session.formatted_duration}"
            )
        lines.append("=== End Export ===")
        content = "\n".join(lines) + "\n"

    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        echo_success(f"Exported {len(sessions)} sessions to {output}")
    else:
        click.echo(content, nl=False)
