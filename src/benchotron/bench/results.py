"""Benchmark result data structures, aggregation and serialization.

Hierarchy::

    SizeRecord (raw, one per size, produced during a run)
      → per_candidate: list[CandidateStats]

    BenchmarkResult (final, one per benchmark)
      → series: list[ResultSeries]          (candidate declaration order)
        → results: list[DataPoint]          (size declaration order)
          → stats: Stats

The on-disk format is one JSON document per benchmark, with the camelCase
key ``sizeInterpretation``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from benchotron.bench.errors import AggregationInconsistency
from benchotron.bench.stats import Stats

log = logging.getLogger("benchotron")


# ---------------------------------------------------------------------------
# Raw per-size records
# ---------------------------------------------------------------------------


@dataclass
class CandidateStats:
    """One candidate's stats at the size of the enclosing record."""

    name: str
    stats: Stats


@dataclass
class SizeRecord:
    """All candidates' stats for one size, in candidate order."""

    size: float
    per_candidate: list[CandidateStats] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Final result
# ---------------------------------------------------------------------------


@dataclass
class DataPoint:
    """One candidate's measurement at one size."""

    size: float
    stats: Stats

    def to_dict(self) -> dict[str, Any]:
        return {"size": self.size, "stats": self.stats.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DataPoint:
        return cls(size=data["size"], stats=Stats.from_dict(data["stats"]))


@dataclass
class ResultSeries:
    """One candidate's measurements across every size."""

    name: str
    results: list[DataPoint] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "results": [p.to_dict() for p in self.results]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ResultSeries:
        return cls(
            name=data["name"],
            results=[DataPoint.from_dict(p) for p in data.get("results", [])],
        )


@dataclass
class BenchmarkResult:
    """The report for one benchmark run."""

    title: str
    size_interpretation: str
    series: list[ResultSeries] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the canonical JSON-compatible structure."""
        return {
            "title": self.title,
            "sizeInterpretation": self.size_interpretation,
            "series": [s.to_dict() for s in self.series],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchmarkResult:
        """Deserialize from the canonical structure."""
        return cls(
            title=data["title"],
            size_interpretation=data["sizeInterpretation"],
            series=[ResultSeries.from_dict(s) for s in data.get("series", [])],
        )

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize to canonical JSON text."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> BenchmarkResult:
        """Deserialize from canonical JSON text."""
        return cls.from_dict(json.loads(text))


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate(records: list[SizeRecord]) -> list[ResultSeries]:
    """Pivot per-size records into one series per candidate.

    Candidate names and their order come from the first record.  Each
    series gets one data point per record, in record order, located by
    exact name match.

    Raises:
        AggregationInconsistency: If a later record has no entry for a
            name present in the first record.
    """
    if not records:
        return []

    series: list[ResultSeries] = []
    for entry in records[0].per_candidate:
        points: list[DataPoint] = []
        for record in records:
            match = next((c for c in record.per_candidate if c.name == entry.name), None)
            if match is None:
                raise AggregationInconsistency(record.size, entry.name)
            points.append(DataPoint(size=record.size, stats=match.stats))
        series.append(ResultSeries(name=entry.name, results=points))
    return series


# ---------------------------------------------------------------------------
# I/O functions
# ---------------------------------------------------------------------------


def save_result(path: Path, result: BenchmarkResult, *, indent: int | None = 2) -> None:
    """Write *result* to *path* as canonical JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.to_json(indent=indent) + "\n")
    log.debug("Wrote %s", path)


def load_result(path: Path) -> BenchmarkResult:
    """Load a result written by :func:`save_result`.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    if not path.exists():
        raise FileNotFoundError(f"No result file at {path}")
    return BenchmarkResult.from_json(path.read_text())
