"""rep-tally: a repetition counter with timers, streaks and achievements."""

__version__ = "0.1.0"
