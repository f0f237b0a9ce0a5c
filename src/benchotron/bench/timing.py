"""Repeated timing of a zero-argument callable.

The engine always invokes the callable it is handed by reference.  It
never reconstructs a function from its source text, so closures over
local state (generated inputs, adapted values) work as expected.

Timing uses ``time.perf_counter``.  A cycle of calls is calibrated so
that one cycle lasts at least ``min_time_s``; per-call durations are
then sampled until both ``min_samples`` and ``max_time_s`` are
satisfied, or ``max_samples`` is reached.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from benchotron.bench.stats import Stats, compute_stats

log = logging.getLogger("benchotron")

Thunk = Callable[[], object]

# Upper bound on calls per timed cycle.
MAX_CYCLE_CALLS = 2**20


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass
class TimingOptions:
    """Sampling budget for one ``measure_repeatedly`` call."""

    min_samples: int = 5
    max_samples: int = 1000
    max_time_s: float = 5.0  # total sampling time per candidate per size
    min_time_s: float = 0.05  # minimum duration of one timed cycle
    warmup: int = 1  # untimed calls before calibration


class TimingBackend(Protocol):
    """Anything that can turn a thunk into Stats."""

    def measure_repeatedly(self, thunk: Thunk) -> Stats: ...


# ---------------------------------------------------------------------------
# TimingEngine
# ---------------------------------------------------------------------------


class TimingEngine:
    """Statistically-driven repeated execution of a thunk.

    Usage::

        engine = TimingEngine(TimingOptions(max_time_s=1.0))
        stats = engine.measure_repeatedly(lambda: sorted(data))
    """

    def __init__(
        self,
        options: TimingOptions | None = None,
        *,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.options = options or TimingOptions()
        self._clock = clock

    def measure_repeatedly(self, thunk: Thunk) -> Stats:
        """Invoke *thunk* repeatedly and summarize its per-call duration.

        Exceptions raised by *thunk* propagate unchanged.
        """
        opts = self.options
        for _ in range(opts.warmup):
            thunk()

        count = self._calibrate(thunk)
        log.debug("Calibrated cycle: %d call(s)", count)

        sample: list[float] = []
        started = self._clock()
        while len(sample) < opts.max_samples:
            sample.append(self._cycle(thunk, count) / count)
            elapsed = self._clock() - started
            if len(sample) >= opts.min_samples and elapsed >= opts.max_time_s:
                break

        return compute_stats(sample)

    def _cycle(self, thunk: Thunk, count: int) -> float:
        """Call *thunk* ``count`` times and return the elapsed seconds."""
        clock = self._clock
        start = clock()
        for _ in range(count):
            thunk()
        return clock() - start

    def _calibrate(self, thunk: Thunk) -> int:
        """Find a call count whose cycle lasts at least ``min_time_s``.

        The count never exceeds ``MAX_CYCLE_CALLS``.
        """
        count = 1
        while True:
            elapsed = self._cycle(thunk, count)
            if elapsed >= self.options.min_time_s or count >= MAX_CYCLE_CALLS:
                return count
            if elapsed <= 0:
                count *= 2
            else:
                # Jump close to the target, at least doubling.
                count = max(count * 2, int(count * self.options.min_time_s / elapsed) + 1)
            count = min(count, MAX_CYCLE_CALLS)


def measure_repeatedly(thunk: Thunk, options: TimingOptions | None = None) -> Stats:
    """Convenience wrapper around ``TimingEngine(options).measure_repeatedly``."""
    return TimingEngine(options).measure_repeatedly(thunk)
