"""Benchmarks used by the suite and CLI tests."""

from __future__ import annotations

from benchotron.bench.spec import BenchmarkSpec, CandidateSpec, make_benchmark


def _explode(value: object) -> None:
    raise RuntimeError("candidate exploded")


SUM = make_benchmark(
    BenchmarkSpec(
        slug="sum",
        title="Summing integers",
        sizes=[10, 20],
        size_interpretation="Number of elements",
        inputs_per_size=1,
        generate=lambda n: list(range(int(n))),
        candidates=[
            CandidateSpec("builtin", measure=sum),
            CandidateSpec("tuple", adapt=tuple, measure=sum),
        ],
    )
)

LEN = make_benchmark(
    BenchmarkSpec(
        slug="len",
        title="Measuring strings",
        sizes=[5],
        size_interpretation="Characters",
        inputs_per_size=2,
        generate=lambda n: "x" * int(n),
        candidates=[CandidateSpec("len", measure=len)],
    )
)

BROKEN = make_benchmark(
    BenchmarkSpec(
        slug="broken",
        title="Always fails",
        sizes=[1],
        size_interpretation="Nothing",
        inputs_per_size=1,
        generate=lambda n: n,
        candidates=[CandidateSpec("boom", measure=_explode)],
    )
)

SUITE = [SUM, LEN]
WITH_BROKEN = [BROKEN, SUM]
NOT_A_BENCHMARK = 42


def make_suite() -> list:
    return [LEN, SUM]
