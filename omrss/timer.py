"""Accumulating computation timer with a one-second ceiling."""

from __future__ import annotations

import time
from typing import Callable

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

MAX_TOTAL = 1000 * MILLISECOND


def _microseconds() -> int:
    return time.time_ns() // 1000


def _fraction(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10 ** precision)
    digits = str(frac).rjust(precision, "0").rstrip("0")
    return f"{whole}.{digits}" if digits else str(whole)


def format_duration(nanoseconds: int) -> str:
    """Render a nanosecond count like ``1.5ms`` or ``1h2m3s``."""
    if nanoseconds == 0:
        return "0s"
    sign = "-" if nanoseconds < 0 else ""
    value = abs(nanoseconds)
    if value < MICROSECOND:
        return f"{sign}{value}ns"
    if value < MILLISECOND:
        return f"{sign}{_fraction(value, 3)}µs"
    if value < SECOND:
        return f"{sign}{_fraction(value, 6)}ms"
    hours, rest = divmod(value, HOUR)
    minutes, rest = divmod(rest, MINUTE)
    text = f"{_fraction(rest, 9)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text


class Timer:
    """Accumulates elapsed time across start/stop pairs while active.

    Readings are whole microseconds from ``clock`` and are added to ``total``
    as raw counts; ``total`` is capped at ``MAX_TOTAL``.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self.mission = True
        self.total = 0
        self._clock = clock or _microseconds
        self._start = 0
        self._end = 0

    def close(self) -> None:
        self.mission = False

    def open(self) -> None:
        self.mission = True

    def start(self) -> None:
        if self.mission:
            self._start = self._clock()

    def stop(self) -> None:
        if self.mission:
            self._end = self._clock()
            self.total += self._end - self._start

    def end(self) -> None:
        """Stop, close the timer and cap the total."""
        if self.mission:
            self.stop()
            self.mission = False
            self.total = min(self.total, MAX_TOTAL)

    def set_max(self) -> None:
        """Set the total to the ceiling and close the timer."""
        if self.mission:
            self.total = MAX_TOTAL
            self.mission = False

    def export(self) -> str:
        """Print the total and return the printed line."""
        line = f" {format_duration(self.total)} "
        print(line)
        return line

    def merge(self, other: Timer) -> None:
        """Add another timer's total to this one, capped at the ceiling."""
        if self.mission:
            print(format_duration(self.total), format_duration(other.total))
            self.total = min(self.total + other.total, MAX_TOTAL)