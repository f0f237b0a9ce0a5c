"""Summary statistics for repeated timing measurements.

Turns a raw sample of per-call durations into the fields reported for
every candidate at every size: mean, deviation, variance, standard error
of the mean, and the 95% margin of error (absolute and relative).

The margin of error uses two-tailed critical values of Student's t
distribution for small samples and the normal approximation (1.96) once
there are more than 30 degrees of freedom.
"""

from __future__ import annotations

import math
import statistics
from dataclasses import dataclass, field
from typing import Any, Sequence


# ---------------------------------------------------------------------------
# Student's t critical values (two-tailed, 95% confidence)
# ---------------------------------------------------------------------------

_T_TABLE: dict[int, float] = {
    1: 12.706,
    2: 4.303,
    3: 3.182,
    4: 2.776,
    5: 2.571,
    6: 2.447,
    7: 2.365,
    8: 2.306,
    9: 2.262,
    10: 2.228,
    11: 2.201,
    12: 2.179,
    13: 2.16,
    14: 2.145,
    15: 2.131,
    16: 2.12,
    17: 2.11,
    18: 2.101,
    19: 2.093,
    20: 2.086,
    21: 2.08,
    22: 2.074,
    23: 2.069,
    24: 2.064,
    25: 2.06,
    26: 2.056,
    27: 2.052,
    28: 2.048,
    29: 2.045,
    30: 2.042,
}
_T_INFINITY = 1.96


def t_critical(degrees_of_freedom: int) -> float:
    """Return the 95% two-tailed critical value for *degrees_of_freedom*.

    Zero degrees of freedom is treated as one.
    """
    df = max(degrees_of_freedom, 1)
    return _T_TABLE.get(df, _T_INFINITY)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass
class Stats:
    """Timing statistics for one candidate at one size (seconds per call)."""

    mean: float
    deviation: float
    variance: float
    sem: float  # standard error of the mean
    moe: float  # margin of error
    rme: float  # relative margin of error, as a fraction of mean
    sample: list[float] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (keys sorted as in the output format)."""
        return {
            "deviation": self.deviation,
            "mean": self.mean,
            "moe": self.moe,
            "rme": self.rme,
            "sample": list(self.sample),
            "sem": self.sem,
            "variance": self.variance,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Stats:
        """Deserialize from a dict."""
        return cls(
            mean=data["mean"],
            deviation=data["deviation"],
            variance=data["variance"],
            sem=data["sem"],
            moe=data["moe"],
            rme=data["rme"],
            sample=list(data.get("sample", [])),
        )


def compute_stats(sample: Sequence[float]) -> Stats:
    """Compute Stats from a sample of per-call durations.

    Args:
        sample: Observed durations, at least one value.

    Returns:
        Stats with all fields populated. With a single observation the
        variance (and everything derived from it) is 0.0.

    Raises:
        ValueError: If *sample* is empty.
    """
    if not sample:
        raise ValueError("Cannot compute statistics from an empty sample")

    values = [float(v) for v in sample]
    n = len(values)
    mean = statistics.fmean(values)
    variance = statistics.variance(values, mean) if n >= 2 else 0.0
    deviation = math.sqrt(variance)
    sem = deviation / math.sqrt(n)
    moe = sem * t_critical(n - 1)
    rme = moe / mean if mean else 0.0

    return Stats(
        mean=mean,
        deviation=deviation,
        variance=variance,
        sem=sem,
        moe=moe,
        rme=rme,
        sample=values,
    )
