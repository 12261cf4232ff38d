"""Repeating tick sources for the timers.

Timers never talk to the event loop directly. They ask a ``Scheduler`` for a
repeating tick and keep the returned handle so they can cancel it. The
``ManualScheduler`` drives ticks by hand for tests and one-shot commands; the
``AsyncioScheduler`` runs them on the running event loop.
"""

import asyncio
from typing import Callable, Protocol, runtime_checkable

TICK_SECONDS = 1.0

TickHandler = Callable[[], None]


class TickHandle:
    """Registration of a repeating tick.

    Cancelling is idempotent. ``fire`` delivers one tick to the handler
    whether or not the handle was cancelled, which is how a late tick looks
    to the receiving timer.
    """

    def __init__(self, interval: float, handler: TickHandler):
        self.interval = interval
        self.handler = handler
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.handler()


@runtime_checkable
class Scheduler(Protocol):
    """Source of repeating ticks."""

    def register_tick(self, interval: float, handler: TickHandler) -> TickHandle:
        """Call ``handler`` every ``interval`` seconds until the handle is cancelled."""
        ...


class ManualScheduler:
    """Virtual clock: ticks only happen when ``advance`` is called."""

    def __init__(self):
        self.now = 0.0
        self._handles: list[TickHandle] = []
        self._due: dict[TickHandle, float] = {}

    def register_tick(self, interval: float, handler: TickHandler) -> TickHandle:
        handle = TickHandle(interval, handler)
        self._handles.append(handle)
        self._due[handle] = self.now + interval
        return handle

    @property
    def active_handles(self) -> list[TickHandle]:
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds: float = TICK_SECONDS) -> None:
        """Move virtual time forward, firing every tick that falls due in order."""
        target = self.now + seconds
        while True:
            due = [
                (self._due[h], index, h)
                for index, h in enumerate(self._handles)
                if not h.cancelled and self._due[h] <= target
            ]
            if not due:
                break
            when, _, handle = min(due)
            self.now = when
            self._due[handle] = when + handle.interval
            handle.fire()

        self.now = target
        self._handles = [h for h in self._handles if not h.cancelled]
        self._due = {h: self._due[h] for h in self._handles}

    def tick(self, count: int = 1) -> None:
        """Advance by ``count`` whole ticks."""
        for _ in range(count):
            self.advance(TICK_SECONDS)


class _LoopTickHandle(TickHandle):
    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, handler: TickHandler):
        super().__init__(interval, handler)
        self._loop = loop
        self._next = loop.time() + interval
        self._timer = loop.call_at(self._next, self._run)

    def _run(self) -> None:
        if self.cancelled:
            return
        # Schedule from the previous deadline so ticks don't drift
        self._next += self.interval
        self._timer = self._loop.call_at(self._next, self._run)
        self.handler()

    def cancel(self) -> None:
        super().cancel()
        self._timer.cancel()


class AsyncioScheduler:
    """Ticks driven by the asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def register_tick(self, interval: float, handler: TickHandler) -> TickHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _LoopTickHandle(loop, interval, handler)
