"""Shared text formatting helpers for benchotron.

Provides functions for formatting durations, per-call times, and aligned
tables used by the CLI and the console progress sink.
"""

from __future__ import annotations

import math


def format_duration(seconds: float) -> str:
    """Format seconds as human-readable duration.

    Examples: ``'8s'``, ``'1m 23s'``, ``'1h 12m 34s'``. Always whole seconds
    (truncated, not rounded).
    """
    total = int(seconds)
    if total >= 3600:
        h = total // 3600
        m = (total % 3600) // 60
        s = total % 60
        return f"{h}h {m:2d}m {s:2d}s"
    if total >= 60:
        m = total // 60
        s = total % 60
        return f"{m}m {s:2d}s"
    return f"{total}s"


def format_time(seconds: float, precision: int = 2) -> str:
    """Format a per-call time with adaptive units (ns, µs, ms, s)."""
    if math.isnan(seconds):
        return "N/A"
    if seconds < 1e-6:
        return f"{seconds * 1e9:.{precision}f}ns"
    if seconds < 1e-3:
        return f"{seconds * 1e6:.{precision}f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.{precision}f}ms"
    return f"{seconds:.{precision}f}s"


def format_pct(fraction: float, precision: int = 1) -> str:
    """Format a fraction as a ``±`` percentage."""
    if math.isnan(fraction):
        return "N/A"
    return f"±{fraction * 100:.{precision}f}%"


def format_table(
    headers: list[str],
    rows: list[list[str]],
    *,
    alignments: list[str] | None = None,
    indent: int = 2,
) -> str:
    """Format a list of rows as an aligned text table.

    Auto-calculates column widths from content. Right-aligns columns
    marked ``'r'`` in *alignments*.

    Args:
        headers: Column header strings.
        rows: List of rows, each a list of cell strings.
        alignments: Per-column alignment: ``'l'``, ``'r'``, or ``'c'``.
        indent: Number of leading spaces per line.

    Returns:
        The formatted table as a string.
    """
    if not headers:
        return ""

    ncols = len(headers)
    aligns = list(alignments) if alignments else []
    while len(aligns) < ncols:
        aligns.append("l")

    proc_rows: list[list[str]] = []
    for row in rows:
        padded = list(row) + [""] * (ncols - len(row))
        proc_rows.append(padded[:ncols])

    widths = [len(h) for h in headers]
    for row in proc_rows:
        for ci, cell in enumerate(row):
            widths[ci] = max(widths[ci], len(cell))

    prefix = " " * indent

    def _format_cell(text: str, width: int, align: str) -> str:
        if align == "r":
            return text.rjust(width)
        if align == "c":
            return text.center(width)
        return text.ljust(width)

    lines: list[str] = []
    lines.append(
        prefix + "  ".join(_format_cell(headers[i], widths[i], aligns[i]) for i in range(ncols))
    )
    lines.append(prefix + "  ".join("-" * widths[i] for i in range(ncols)))
    for row in proc_rows:
        lines.append(
            prefix + "  ".join(_format_cell(row[i], widths[i], aligns[i]) for i in range(ncols))
        )

    return "\n".join(lines)
