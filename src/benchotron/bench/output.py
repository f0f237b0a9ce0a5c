"""Output sinks for benchmark results and run progress.

Results go either to ``<output_dir>/<slug>.json`` or to standard output.
Human-readable progress always goes to standard error: a start
timestamp, one heading per benchmark, a single progress line rewritten
in place for each size, and a finish timestamp.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from benchotron.bench.results import BenchmarkResult, save_result
from benchotron.bench.runner import SuiteProgress
from benchotron.formatting import format_duration


def result_path(output_dir: Path, slug: str) -> Path:
    """Return the file a benchmark's result is written to."""
    return output_dir / f"{slug}.json"


def write_result_file(path: Path, result: BenchmarkResult, *, indent: int | None = 2) -> None:
    """Write *result* as canonical JSON to *path*."""
    save_result(path, result, indent=indent)


def write_result_stdout(
    result: BenchmarkResult,
    *,
    indent: int | None = 2,
    stream: TextIO | None = None,
) -> None:
    """Emit *result* as canonical JSON on *stream* (default: stdout)."""
    out = stream if stream is not None else sys.stdout
    out.write(result.to_json(indent=indent) + "\n")
    out.flush()


class ConsoleProgress:
    """Progress callback that renders a run on a terminal stream.

    Usage::

        runner = SuiteRunner(benchmarks, config, progress_callback=ConsoleProgress())

    Call :meth:`attach` with the logger that shares the stream so log
    records start on a fresh line instead of after the progress line.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stderr
        self._line_open = False

    def __call__(self, progress: SuiteProgress) -> None:
        if progress.phase == "start":
            self._write_line(f"Benchotron starting at {progress.timestamp}")
            self._write_line(f"Running {progress.benchmarks_total} benchmark(s)")
        elif progress.phase == "benchmark":
            self._write_line(
                f"Running benchmark {progress.benchmark_index} of "
                f"{progress.benchmarks_total}: {progress.title}"
            )
        elif progress.phase == "size":
            self._rewrite(
                f"  size {progress.size_index} of {progress.sizes_total} ({progress.size})"
            )
        elif progress.phase == "done":
            self._write_line(f"  wrote {progress.output}")
        elif progress.phase == "finish":
            self._write_line(
                f"Benchotron finished at {progress.timestamp} "
                f"(elapsed {format_duration(progress.elapsed_s)})"
            )

    def _rewrite(self, text: str) -> None:
        # \r plus clear-to-end-of-line keeps a single progress line.
        self.stream.write(f"\r\x1b[K{text}")
        self.stream.flush()
        self._line_open = True

    def _write_line(self, text: str) -> None:
        if self._line_open:
            self.stream.write("\n")
            self._line_open = False
        self.stream.write(text + "\n")
        self.stream.flush()

    def attach(self, logger: logging.Logger) -> None:
        """Install this object as a filter on *logger*'s console handlers."""
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, logging.FileHandler
            ):
                handler.addFilter(self)

    def filter(self, record: logging.LogRecord) -> bool:
        # Runs just before the handler emits, so the open line is ended first.
        if self._line_open:
            self.stream.write("\n")
            self.stream.flush()
            self._line_open = False
        return True
