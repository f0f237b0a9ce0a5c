"""Failure taxonomy for benchmark runs.

None of these are recovered inside the engine: each one is raised with
context and unwinds the whole run.
"""

from __future__ import annotations


class BenchotronError(Exception):
    """Base class for every failure raised by benchotron."""


class InvalidBenchmarkError(BenchotronError, ValueError):
    """A benchmark definition failed validation at construction time."""


class GenerationFailure(BenchotronError):
    """The input generator raised for a given size."""

    def __init__(self, slug: str, size: float, cause: BaseException) -> None:
        self.slug = slug
        self.size = size
        self.cause = cause
        super().__init__(
            f"Benchmark '{slug}': input generation failed at size {size}: "
            f"{type(cause).__name__}: {cause}"
        )


class ExecutionFailure(BenchotronError):
    """A candidate's adapt/measure step, or the timing engine, raised."""

    def __init__(self, slug: str, candidate: str, size: float, cause: BaseException) -> None:
        self.slug = slug
        self.candidate = candidate
        self.size = size
        self.cause = cause
        super().__init__(
            f"Benchmark '{slug}': candidate '{candidate}' failed at size {size}: "
            f"{type(cause).__name__}: {cause}"
        )


class AggregationInconsistency(BenchotronError):
    """A size record is missing an entry for a candidate of the first record."""

    def __init__(self, size: float, name: str) -> None:
        self.size = size
        self.name = name
        super().__init__(f"No result for candidate '{name}' at size {size}")
