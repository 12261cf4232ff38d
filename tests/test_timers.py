"""Tests for the tick scheduler and the three timers."""

import asyncio

import pytest

from rep_tally.engine.clock import AsyncioScheduler, ManualScheduler
from rep_tally.engine.events import EngineEvent, EventKind
from rep_tally.engine.timers import CountdownTimer, RestTimer, Stopwatch, TimerStatus
from rep_tally.models.session import TimerMode
from rep_tally.models.snapshot import PersistedState, Settings


class TestManualScheduler:
    def test_ticks_fire_in_order(self):
        scheduler = ManualScheduler()
        fired = []
        scheduler.register_tick(1.0, lambda: fired.append("a"))
        scheduler.register_tick(2.0, lambda: fired.append("b"))

        scheduler.advance(4.0)

        assert fired == ["a", "a", "b", "a", "a", "b"]

    def test_cancelled_handle_stops_firing(self):
        scheduler = ManualScheduler()
        fired = []
        handle = scheduler.register_tick(1.0, lambda: fired.append(1))
        scheduler.tick(2)
        handle.cancel()
        handle.cancel()
        scheduler.tick(3)

        assert fired == [1, 1]
        assert scheduler.active_handles == []


class TestStopwatch:
    def test_counts_up_while_running(self, scheduler):
        stopwatch = Stopwatch(scheduler)
        stopwatch.start()
        scheduler.tick(3)
        assert stopwatch.elapsed == 3

    def test_toggle_pauses(self, scheduler):
        stopwatch = Stopwatch(scheduler)
        assert stopwatch.toggle() is True
        scheduler.tick(2)
        assert stopwatch.toggle() is False
        scheduler.tick(5)
        assert stopwatch.elapsed == 2
        assert stopwatch.status is TimerStatus.IDLE

    def test_start_twice_keeps_one_ticker(self, scheduler):
        stopwatch = Stopwatch(scheduler)
        stopwatch.start()
        stopwatch.start()
        assert len(scheduler.active_handles) == 1
        scheduler.tick(4)
        assert stopwatch.elapsed == 4

    def test_stop_is_idempotent(self, scheduler):
        stopwatch = Stopwatch(scheduler)
        stopwatch.stop()
        stopwatch.start()
        stopwatch.stop()
        stopwatch.stop()
        assert not stopwatch.is_running

    def test_late_tick_discarded(self, scheduler):
        stopwatch = Stopwatch(scheduler)
        stopwatch.start()
        handle = scheduler.active_handles[0]
        scheduler.tick()
        stopwatch.reset()

        handle.fire()

        assert stopwatch.elapsed == 0

    def test_tick_from_previous_run_discarded(self, scheduler):
        stopwatch = Stopwatch(scheduler)
        stopwatch.start()
        stale = scheduler.active_handles[0]
        stopwatch.stop()
        stopwatch.start()

        stale.fire()

        assert stopwatch.elapsed == 0


class TestCountdownTimer:
    def _timer(self, scheduler, minutes=0, seconds=10):
        finished = []
        timer = CountdownTimer(scheduler, on_finish=lambda: finished.append(True),
                               minutes=minutes, seconds=seconds)
        return timer, finished

    def test_finishes_after_duration(self, scheduler):
        timer, finished = self._timer(scheduler)
        timer.toggle()
        scheduler.tick(9)
        assert finished == []
        assert timer.is_running

        scheduler.tick()

        assert finished == [True]
        assert not timer.is_running
        assert timer.status is TimerStatus.FINISHED
        assert timer.elapsed == 10
        assert timer.remaining_seconds == 0

    def test_finishes_exactly_once(self, scheduler):
        timer, finished = self._timer(scheduler)
        timer.toggle()
        handle = scheduler.active_handles[0]
        scheduler.tick(15)

        handle.fire()

        assert finished == [True]
        assert timer.elapsed == 10

    def test_zero_duration_never_finishes(self, scheduler):
        timer, finished = self._timer(scheduler, minutes=0, seconds=0)
        timer.toggle()
        scheduler.tick(100)
        assert finished == []
        assert timer.elapsed == 100
        assert timer.progress == 0.0

    def test_pause_and_resume(self, scheduler):
        timer, _ = self._timer(scheduler)
        timer.toggle()
        scheduler.tick(4)
        timer.toggle()
        scheduler.tick(4)
        assert timer.elapsed == 4
        timer.toggle()
        scheduler.tick(2)
        assert timer.elapsed == 6
        assert timer.progress == pytest.approx(0.6)

    def test_reset(self, scheduler):
        timer, _ = self._timer(scheduler)
        timer.toggle()
        scheduler.tick(3)
        timer.reset()
        assert timer.elapsed == 0
        assert timer.status is TimerStatus.IDLE
        assert scheduler.active_handles == []

    def test_restart_after_finish(self, scheduler):
        timer, finished = self._timer(scheduler, seconds=2)
        timer.toggle()
        scheduler.tick(2)
        timer.toggle()
        assert timer.elapsed == 0
        scheduler.tick(2)
        assert finished == [True, True]

    @pytest.mark.parametrize(
        "start, change, expected",
        [
            ((1, 0), {"minutes": 1}, (2, 0)),
            ((59, 0), {"minutes": 1}, (59, 0)),
            ((1, 50), {"seconds": 10}, (2, 0)),
            ((1, 55), {"seconds": 10}, (2, 5)),
            ((59, 55), {"seconds": 10}, (59, 5)),
        ],
    )
    def test_increase(self, scheduler, start, change, expected):
        timer, _ = self._timer(scheduler, *start)
        timer.increase(**change)
        assert (timer.minutes, timer.seconds) == expected

    @pytest.mark.parametrize(
        "start, change, expected",
        [
            ((1, 0), {"minutes": 1}, (0, 0)),
            ((0, 30), {"minutes": 1}, (0, 30)),
            ((1, 30), {"seconds": 10}, (1, 20)),
            ((1, 0), {"seconds": 10}, (0, 50)),
            ((1, 5), {"seconds": 10}, (0, 55)),
            ((0, 5), {"seconds": 10}, (0, 0)),
        ],
    )
    def test_decrease(self, scheduler, start, change, expected):
        timer, _ = self._timer(scheduler, *start)
        timer.decrease(**change)
        assert (timer.minutes, timer.seconds) == expected

    def test_configure_carries_seconds(self, scheduler):
        timer, _ = self._timer(scheduler)
        timer.configure(1, 90)
        assert (timer.minutes, timer.seconds) == (2, 30)
        timer.configure(75, 0)
        assert (timer.minutes, timer.seconds) == (59, 0)


class TestRestTimer:
    def test_counts_down_and_finishes(self, scheduler):
        finished = []
        rest = RestTimer(scheduler, on_finish=lambda: finished.append(True))
        rest.start(3)
        scheduler.tick(2)
        assert rest.remaining == 1
        assert finished == []

        scheduler.tick()

        assert finished == [True]
        assert not rest.is_running
        assert rest.status is TimerStatus.FINISHED

    def test_restart_does_not_stack(self, scheduler):
        rest = RestTimer(scheduler, on_finish=lambda: None)
        rest.start(10)
        scheduler.tick(4)
        rest.start(10)

        assert rest.remaining == 10
        assert len(scheduler.active_handles) == 1
        scheduler.tick()
        assert rest.remaining == 9

    def test_stop_clears_remaining(self, scheduler):
        rest = RestTimer(scheduler, on_finish=lambda: None)
        rest.start(10)
        rest.stop()
        assert rest.remaining == 0
        assert rest.status is TimerStatus.IDLE


class TestEngineTimers:
    """Timer behaviour as seen through the engine."""

    def test_countdown_finish_signal(self, engine, scheduler, sink):
        engine.set_timer_mode(TimerMode.COUNTER)
        engine.configure_countdown(0, 10)
        engine.toggle_countdown()

        scheduler.tick(10)

        finished = sink.of_kind(EventKind.COUNTDOWN_FINISHED)
        assert finished == [EngineEvent(EventKind.COUNTDOWN_FINISHED)]
        assert not engine.countdown.is_running
        assert EngineEvent(EventKind.COUNTDOWN_FINISHED) in engine.drain_events()

    def test_late_countdown_tick_after_cancel(self, engine, scheduler, sink):
        engine.set_timer_mode(TimerMode.COUNTER)
        engine.configure_countdown(0, 10)
        engine.toggle_countdown()
        handle = scheduler.active_handles[0]
        scheduler.tick(10)
        elapsed = engine.countdown.elapsed

        handle.fire()

        assert engine.countdown.elapsed == elapsed
        assert len(sink.of_kind(EventKind.COUNTDOWN_FINISHED)) == 1

    def test_countdown_finish_starts_rest(self, make_engine, scheduler, sink):
        engine = make_engine(
            PersistedState(
                timer_mode=TimerMode.COUNTER,
                countdown_minutes=0,
                countdown_seconds=5,
                settings=Settings(auto_rest_timer=True, rest_duration=3),
            )
        )
        engine.toggle_countdown()
        scheduler.tick(5)
        assert engine.rest.is_running

        scheduler.tick(3)

        assert len(sink.of_kind(EventKind.REST_FINISHED)) == 1
        assert not engine.rest.is_running

    def test_tick_racing_session_reset(self, engine, scheduler):
        engine.quick_add(3)
        handle = scheduler.active_handles[0]
        scheduler.tick(5)

        engine.reset_session()
        handle.fire()

        assert engine.stopwatch.elapsed == 0
        assert engine.history[0].duration_seconds == 5

    def test_switching_mode_stops_previous_timer(self, engine):
        engine.increment()
        engine.set_timer_mode(TimerMode.COUNTER)
        assert not engine.stopwatch.is_running

    def test_countdown_derived_values(self, engine, scheduler):
        engine.set_timer_mode(TimerMode.COUNTER)
        engine.increase_countdown(seconds=20)
        engine.toggle_active_timer()
        scheduler.tick(40)

        assert engine.countdown_total_seconds == 80
        assert engine.countdown_remaining_seconds == 40
        assert engine.countdown_progress == 0.5
        assert engine.summary()["countdown"]["remaining"] == "0:40"

    def test_start_and_stop_rest(self, engine, scheduler):
        engine.start_rest()
        assert engine.rest.remaining == 60
        engine.stop_rest()
        engine.stop_rest()
        assert not engine.rest.is_running


class TestAsyncioScheduler:
    def test_ticks_on_running_loop(self):
        async def run():
            scheduler = AsyncioScheduler()
            fired = []
            handle = scheduler.register_tick(0.01, lambda: fired.append(1))
            await asyncio.sleep(0.055)
            handle.cancel()
            count = len(fired)
            await asyncio.sleep(0.03)
            return count, len(fired)

        count, after_cancel = asyncio.run(run())
        assert count >= 3
        assert after_cancel == count
