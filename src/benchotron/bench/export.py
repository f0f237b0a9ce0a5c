"""Export benchmark results to CSV and Markdown formats.

CSV format: one row per candidate per size (long format for pandas/R),
with the raw sample joined by spaces.

Markdown format: a summary table of mean times, sizes as rows and
candidates as columns, suitable for READMEs and issues.
"""

from __future__ import annotations

import csv
import io

from benchotron.bench.results import BenchmarkResult
from benchotron.formatting import format_pct, format_time


def export_csv(result: BenchmarkResult) -> str:
    """Export a result as CSV (long format).

    Columns:
        series, size, mean, deviation, variance, sem, moe, rme, n, sample
    """
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(
        ["series", "size", "mean", "deviation", "variance", "sem", "moe", "rme", "n", "sample"]
    )

    for s in result.series:
        for point in s.results:
            st = point.stats
            writer.writerow(
                [
                    s.name,
                    point.size,
                    repr(st.mean),
                    repr(st.deviation),
                    repr(st.variance),
                    repr(st.sem),
                    repr(st.moe),
                    repr(st.rme),
                    len(st.sample),
                    " ".join(repr(v) for v in st.sample),
                ]
            )

    return output.getvalue()


def export_markdown(result: BenchmarkResult) -> str:
    """Export a result as a Markdown report."""
    lines: list[str] = []

    lines.append(f"# {result.title}")
    lines.append("")
    if result.size_interpretation:
        lines.append(f"Size: {result.size_interpretation}")
        lines.append("")

    if not result.series:
        lines.append("*No results.*")
        return "\n".join(lines)

    names = [s.name for s in result.series]
    lines.append("| Size | " + " | ".join(names) + " |")
    lines.append("|---:|" + "---:|" * len(names))

    for j, point in enumerate(result.series[0].results):
        cells = []
        for s in result.series:
            st = s.results[j].stats
            cells.append(f"{format_time(st.mean)} {format_pct(st.rme)}")
        lines.append(f"| {point.size:g} | " + " | ".join(cells) + " |")

    lines.append("")
    lines.append("*Mean time per call, with 95% relative margin of error.*")

    return "\n".join(lines)
