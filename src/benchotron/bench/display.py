"""Terminal display formatting for benchmark results."""

from __future__ import annotations

from typing import Sequence

from benchotron.bench.results import BenchmarkResult
from benchotron.bench.spec import Benchmark
from benchotron.formatting import format_pct, format_table, format_time


def format_result(result: BenchmarkResult) -> str:
    """Format a result as a size-by-candidate table of mean times.

    Each cell shows the mean time per call and its relative margin of
    error.  Rows follow the size order of the first series.
    """
    lines: list[str] = []
    lines.append(result.title)
    lines.append("─" * len(result.title))
    if result.size_interpretation:
        lines.append(f"Size: {result.size_interpretation}")
    lines.append("")

    if not result.series:
        lines.append("  (no results)")
        return "\n".join(lines)

    headers = ["Size"] + [s.name for s in result.series]
    rows: list[list[str]] = []
    for j, point in enumerate(result.series[0].results):
        row = [f"{point.size:g}"]
        for s in result.series:
            stats = s.results[j].stats
            row.append(f"{format_time(stats.mean)} {format_pct(stats.rme)}")
        rows.append(row)

    lines.append(format_table(headers, rows, alignments=["r"] * len(headers)))
    return "\n".join(lines)


def format_suite_listing(benchmarks: Sequence[Benchmark]) -> str:
    """Format a numbered list of benchmarks for selection."""
    if not benchmarks:
        return "  (empty suite)"
    rows = [
        [str(i), b.slug, b.title, str(len(b.sizes)), ", ".join(b.candidate_names)]
        for i, b in enumerate(benchmarks, start=1)
    ]
    return format_table(
        ["#", "Slug", "Title", "Sizes", "Candidates"],
        rows,
        alignments=["r", "l", "l", "r", "l"],
    )
