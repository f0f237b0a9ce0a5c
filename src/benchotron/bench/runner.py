"""Benchmark execution engine.

Orchestrates, strictly in declared order:
1. Sizes, invoking the progress hook before each one
2. Input generation (``inputs_per_size`` generator calls per size)
3. Candidates, each adapted and then timed over the same batch
4. Collection of one size record per size

Output ordering is a pure function of declaration order, which is what
lets :func:`benchotron.bench.results.aggregate` pivot without sorting.

Any failure aborts the whole run: there is no partial result.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Sequence

from benchotron.bench.errors import ExecutionFailure, GenerationFailure
from benchotron.bench.results import BenchmarkResult, CandidateStats, SizeRecord
from benchotron.bench.stats import Stats
from benchotron.bench.timing import TimingBackend, TimingEngine
from benchotron.formatting import format_duration

if TYPE_CHECKING:
    from benchotron.bench.config import RunConfig
    from benchotron.bench.spec import Benchmark, ErasedCandidate

log = logging.getLogger("benchotron")

# on_size_start(index, size), index is 1-based.
SizeStartHook = Callable[[int, float], None]


# ---------------------------------------------------------------------------
# Generation and per-candidate execution
# ---------------------------------------------------------------------------


def generate_inputs(
    slug: str,
    generate: Callable[[float], Any],
    size: float,
    count: int,
) -> list[Any]:
    """Call *generate* ``count`` times with *size*, sequentially.

    Raises:
        GenerationFailure: If the generator raises.
    """
    inputs: list[Any] = []
    for _ in range(count):
        try:
            inputs.append(generate(size))
        except Exception as exc:
            raise GenerationFailure(slug, size, exc) from exc
    return inputs


def execute_candidate(
    slug: str,
    candidate: ErasedCandidate,
    inputs: Sequence[Any],
    size: float,
    engine: TimingBackend,
) -> Stats:
    """Adapt *inputs* for *candidate*, then time it over the batch.

    Adaptation finishes before the engine sees the thunk, so its cost is
    never part of the measurement.

    Raises:
        ExecutionFailure: If adaptation, measurement or the engine raises.
    """
    try:
        thunk = candidate.prepare(inputs)
        return engine.measure_repeatedly(thunk)
    except Exception as exc:
        raise ExecutionFailure(slug, candidate.name, size, exc) from exc


def collect_size_records(
    *,
    slug: str,
    sizes: Sequence[float],
    inputs_per_size: int,
    generate: Callable[[float], Any],
    candidates: Sequence[ErasedCandidate],
    engine: TimingBackend,
    on_size_start: SizeStartHook | None = None,
) -> list[SizeRecord]:
    """Run every candidate at every size and return the raw per-size records.

    Failures in *on_size_start* propagate unwrapped.
    """
    records: list[SizeRecord] = []

    for index, size in enumerate(sizes, start=1):
        if on_size_start is not None:
            on_size_start(index, size)
        log.debug("%s: size %s (%d/%d)", slug, size, index, len(sizes))

        inputs = generate_inputs(slug, generate, size, inputs_per_size)

        per_candidate: list[CandidateStats] = []
        for candidate in candidates:
            stats = execute_candidate(slug, candidate, inputs, size, engine)
            log.debug(
                "%s: %s at size %s: mean %.3g s (rme %.1f%%)",
                slug,
                candidate.name,
                size,
                stats.mean,
                stats.rme * 100,
            )
            per_candidate.append(CandidateStats(name=candidate.name, stats=stats))

        records.append(SizeRecord(size=size, per_candidate=per_candidate))

    return records


def run_benchmark(
    benchmark: Benchmark,
    on_size_start: SizeStartHook | None = None,
    *,
    engine: TimingBackend | None = None,
) -> BenchmarkResult:
    """Run *benchmark* and return its result.  See :meth:`Benchmark.run`."""
    return benchmark.run(on_size_start, engine=engine)


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class SuiteProgress:
    """Progress info passed to the suite callback."""

    phase: str  # "start", "benchmark", "size", "done", "finish"
    benchmark_index: int = 0  # 1-based
    benchmarks_total: int = 0
    title: str = ""
    slug: str = ""
    size_index: int = 0  # 1-based
    sizes_total: int = 0
    size: float = 0
    timestamp: str = ""
    output: str = ""  # where the result went
    elapsed_s: float = 0.0  # set on "finish"


ProgressCallback = Callable[[SuiteProgress], None]


# ---------------------------------------------------------------------------
# SuiteRunner
# ---------------------------------------------------------------------------


class SuiteRunner:
    """Runs several benchmarks in order and hands each result to a sink.

    Usage::

        runner = SuiteRunner(benchmarks, RunConfig())
        results = runner.run()
    """

    def __init__(
        self,
        benchmarks: Sequence[Benchmark],
        config: RunConfig,
        progress_callback: ProgressCallback | None = None,
        *,
        engine: TimingBackend | None = None,
    ) -> None:
        self.benchmarks = list(benchmarks)
        self.config = config
        self.progress: ProgressCallback = progress_callback or self._default_progress
        self.engine: TimingBackend = engine or TimingEngine(config.timing)

    def run(self) -> list[tuple[Benchmark, BenchmarkResult]]:
        """Run every benchmark, writing each result as soon as it is ready.

        Raises:
            ValueError: If the configuration is invalid.
            BenchotronError: The first benchmark failure, after which no
                further benchmark is run.
        """
        from benchotron.bench.config import validate_config
        from benchotron.bench.output import result_path, write_result_file, write_result_stdout

        errors = validate_config(self.config)
        fatal = [e for e in errors if e.severity == "error"]
        for w in errors:
            if w.severity == "warning":
                log.warning("Config warning: %s: %s", w.field, w.message)
        if fatal:
            messages = [f"  {e.field}: {e.message}" for e in fatal]
            raise ValueError("Invalid run configuration:\n" + "\n".join(messages))

        started = time.monotonic()
        total = len(self.benchmarks)
        self.progress(SuiteProgress(phase="start", benchmarks_total=total, timestamp=_now()))

        completed: list[tuple[Benchmark, BenchmarkResult]] = []
        for bench_idx, benchmark in enumerate(self.benchmarks, start=1):
            self.progress(
                SuiteProgress(
                    phase="benchmark",
                    benchmark_index=bench_idx,
                    benchmarks_total=total,
                    title=benchmark.title,
                    slug=benchmark.slug,
                    sizes_total=len(benchmark.sizes),
                )
            )

            def on_size_start(
                index: int,
                size: float,
                _bench: Benchmark = benchmark,
                _bench_idx: int = bench_idx,
            ) -> None:
                self.progress(
                    SuiteProgress(
                        phase="size",
                        benchmark_index=_bench_idx,
                        benchmarks_total=total,
                        title=_bench.title,
                        slug=_bench.slug,
                        size_index=index,
                        sizes_total=len(_bench.sizes),
                        size=size,
                    )
                )

            result = benchmark.run(on_size_start, engine=self.engine)

            if self.config.stdout:
                write_result_stdout(result, indent=self.config.indent)
                destination = "<stdout>"
            else:
                path: Path = result_path(self.config.output_dir, benchmark.slug)
                write_result_file(path, result, indent=self.config.indent)
                destination = str(path)

            self.progress(
                SuiteProgress(
                    phase="done",
                    benchmark_index=bench_idx,
                    benchmarks_total=total,
                    title=benchmark.title,
                    slug=benchmark.slug,
                    output=destination,
                )
            )
            completed.append((benchmark, result))

        self.progress(
            SuiteProgress(
                phase="finish",
                benchmarks_total=total,
                timestamp=_now(),
                elapsed_s=time.monotonic() - started,
            )
        )
        return completed

    @staticmethod
    def _default_progress(progress: SuiteProgress) -> None:
        """Default progress callback: log milestones."""
        if progress.phase == "benchmark":
            log.info(
                "Running benchmark %d of %d: %s",
                progress.benchmark_index,
                progress.benchmarks_total,
                progress.title,
            )
        elif progress.phase == "size":
            log.debug(
                "  size %d of %d (%s)",
                progress.size_index,
                progress.sizes_total,
                progress.size,
            )
        elif progress.phase == "done":
            log.info("  wrote %s", progress.output)
        elif progress.phase == "finish":
            log.info(
                "Finished %d benchmark(s) in %s",
                progress.benchmarks_total,
                format_duration(progress.elapsed_s),
            )


def _now() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S%z")
