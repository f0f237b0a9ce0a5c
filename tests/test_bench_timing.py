"""Tests for benchotron.bench.timing — repeated timing of a thunk."""

from __future__ import annotations

import itertools
import time
import unittest

from benchotron.bench.stats import Stats
from benchotron.bench.timing import (
    MAX_CYCLE_CALLS,
    TimingEngine,
    TimingOptions,
    measure_repeatedly,
)


def _ticking_clock() -> object:
    """A clock that advances by exactly one second per reading."""
    counter = itertools.count()
    return lambda: float(next(counter))


class TestTimingOptions(unittest.TestCase):
    """Tests for TimingOptions defaults."""

    def test_defaults(self) -> None:
        opts = TimingOptions()
        self.assertEqual(opts.min_samples, 5)
        self.assertEqual(opts.max_time_s, 5.0)
        self.assertEqual(opts.warmup, 1)


class TestTimingEngineFakeClock(unittest.TestCase):
    """Deterministic tests driven by a fake clock."""

    def test_collects_min_samples_when_time_budget_spent(self) -> None:
        calls: list[int] = []
        engine = TimingEngine(
            TimingOptions(min_samples=3, max_time_s=0, min_time_s=0.5, warmup=2),
            clock=_ticking_clock(),
        )
        stats = engine.measure_repeatedly(lambda: calls.append(1))
        self.assertIsInstance(stats, Stats)
        self.assertEqual(stats.sample, [1.0, 1.0, 1.0])
        self.assertEqual(stats.mean, 1.0)
        self.assertEqual(stats.variance, 0.0)
        # 2 warmup + 1 calibration + 3 samples.
        self.assertEqual(len(calls), 6)

    def test_max_samples_caps_sampling(self) -> None:
        engine = TimingEngine(
            TimingOptions(min_samples=2, max_samples=4, max_time_s=1e9, min_time_s=0.5),
            clock=_ticking_clock(),
        )
        stats = engine.measure_repeatedly(lambda: None)
        self.assertEqual(len(stats.sample), 4)

    def test_calibration_grows_cycle(self) -> None:
        calls = [0]

        def thunk() -> None:
            calls[0] += 1

        # Each thunk call costs exactly one clock unit.
        engine = TimingEngine(
            TimingOptions(min_samples=2, max_time_s=0, min_time_s=10, warmup=0),
            clock=lambda: float(calls[0]),
        )
        self.assertEqual(engine._calibrate(thunk), 11)
        stats = engine.measure_repeatedly(thunk)
        self.assertEqual(stats.sample, [1.0, 1.0])

    def test_calibration_count_is_capped(self) -> None:
        calls = [0]

        def thunk() -> None:
            calls[0] += 1

        # Every cycle appears to take 1ns, so the first jump asks for ~1e9 calls.
        ticks = itertools.count()
        engine = TimingEngine(
            TimingOptions(min_time_s=1.0, warmup=0),
            clock=lambda: next(ticks) * 1e-9,
        )
        self.assertEqual(engine._calibrate(thunk), MAX_CYCLE_CALLS)
        self.assertEqual(calls[0], 1 + MAX_CYCLE_CALLS)


class TestTimingEngineRealClock(unittest.TestCase):
    """Tests with time.perf_counter and tiny budgets."""

    def test_trivial_thunk(self) -> None:
        opts = TimingOptions(min_samples=3, max_time_s=0, min_time_s=0.001, warmup=0)
        stats = TimingEngine(opts).measure_repeatedly(lambda: None)
        self.assertGreaterEqual(len(stats.sample), 3)
        self.assertGreaterEqual(stats.mean, 0.0)
        self.assertLess(stats.mean, 0.01)

    def test_slow_thunk_is_measured(self) -> None:
        opts = TimingOptions(min_samples=2, max_time_s=0, min_time_s=0.0, warmup=0)
        stats = measure_repeatedly(lambda: time.sleep(0.01), opts)
        self.assertGreaterEqual(stats.mean, 0.009)

    def test_thunk_exception_propagates(self) -> None:
        def boom() -> None:
            raise KeyError("nope")

        with self.assertRaises(KeyError):
            TimingEngine(TimingOptions(warmup=0)).measure_repeatedly(boom)

    def test_closure_state_is_used_directly(self) -> None:
        seen: list[int] = []
        data = [1, 2, 3]

        def thunk() -> None:
            seen.append(sum(data))

        opts = TimingOptions(min_samples=1, max_time_s=0, min_time_s=0.0, warmup=0)
        TimingEngine(opts).measure_repeatedly(thunk)
        self.assertTrue(seen)
        self.assertTrue(all(v == 6 for v in seen))
