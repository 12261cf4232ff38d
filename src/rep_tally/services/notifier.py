"""Event sinks that present engine events to the user."""

import logging

import click

from ..engine.events import EngineEvent, EventKind, Sound

logger = logging.getLogger(__name__)

# Sounds worth ringing the terminal bell for
_BELL_SOUNDS = {Sound.COMPLETE, Sound.BEEP, Sound.ACHIEVEMENT}


def describe_event(event: EngineEvent) -> str | None:
    """Human-readable text for a notification event, None for cues."""
    kind = event.kind
    if kind is EventKind.MILESTONE:
        return f"Milestone reached: {event.value} reps!"
    if kind is EventKind.GOAL_ACHIEVED:
        return f"Daily goal achieved: {event.value} reps today!"
    if kind is EventKind.COUNTDOWN_FINISHED:
        return "Timer finished!"
    if kind is EventKind.REST_FINISHED:
        return "Rest is over, back to work."
    if kind is EventKind.ACHIEVEMENT_UNLOCKED:
        return f"Achievement unlocked: {event.value}"
    if kind is EventKind.STREAK_CONTINUES:
        return f"{event.value}-day streak, keep it going!"
    if kind is EventKind.VOICE_COUNT:
        return str(event.value)
    return None


class ConsoleNotifier:
    """Prints notifications to the terminal."""

    def __init__(self, bell: bool = True):
        self.bell = bell

    def handle(self, event: EngineEvent) -> None:
        if event.kind is EventKind.SOUND:
            if self.bell and event.value in _BELL_SOUNDS:
                click.echo("\a", nl=False)
            return

        text = describe_event(event)
        if text is None:
            return

        if event.kind is EventKind.VOICE_COUNT:
            click.echo(click.style(f"  ... {text}", fg="cyan"))
        elif event.kind is EventKind.ACHIEVEMENT_UNLOCKED:
            click.echo(click.style("[ACHIEVEMENT] ", fg="magenta") + text)
        else:
            click.echo(click.style("[NOTICE] ", fg="green") + text)


class LoggingNotifier:
    """Writes notifications to the log."""

    def handle(self, event: EngineEvent) -> None:
        if event.kind.is_notification:
            logger.info("%s", describe_event(event))
        else:
            logger.debug("%s: %s", event.kind.value, event.to_dict()["value"])
