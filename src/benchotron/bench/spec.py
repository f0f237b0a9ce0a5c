"""Benchmark and candidate definitions.

A :class:`BenchmarkSpec` is written against one concrete input type: its
generator produces values of that type and every candidate consumes
them.  :func:`make_benchmark` erases that type behind a
:class:`Benchmark`, which can be stored in a list alongside benchmarks
over entirely different inputs and run without naming the type again.

Example::

    sort_bench = make_benchmark(
        BenchmarkSpec(
            slug="sort",
            title="Sorting integers",
            sizes=[10, 100, 1000],
            size_interpretation="Number of elements",
            inputs_per_size=5,
            generate=lambda n: [random.random() for _ in range(n)],
            candidates=[
                CandidateSpec("sorted", measure=sorted),
                CandidateSpec("sorted(tuple)", adapt=tuple, measure=sorted),
            ],
        )
    )
    result = sort_bench.run()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, NamedTuple, Sequence, TypeVar

from benchotron.bench.config import ValidationError
from benchotron.bench.errors import InvalidBenchmarkError
from benchotron.bench.results import BenchmarkResult, aggregate
from benchotron.bench.runner import SizeStartHook, collect_size_records
from benchotron.bench.timing import TimingBackend, TimingEngine

log = logging.getLogger("benchotron")

InputT = TypeVar("InputT")
IntermediateT = TypeVar("IntermediateT")


def _identity(value: Any) -> Any:
    return value


# ---------------------------------------------------------------------------
# User-facing definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CandidateSpec(Generic[InputT, IntermediateT]):
    """One competing implementation.

    ``adapt`` runs once per generated input, outside the timed region, so
    candidates with different argument shapes can share one generator.
    ``measure`` is the code actually timed; its return value is ignored.

    Names must be unique within a benchmark.
    """

    name: str
    measure: Callable[[IntermediateT], object]
    adapt: Callable[[InputT], IntermediateT] = _identity


@dataclass(frozen=True)
class BenchmarkSpec(Generic[InputT]):
    """Everything needed to run one benchmark."""

    slug: str  # file-naming key
    title: str
    sizes: Sequence[float]
    size_interpretation: str
    inputs_per_size: int
    generate: Callable[[float], InputT]
    candidates: Sequence[CandidateSpec[InputT, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Type-erased representation
# ---------------------------------------------------------------------------


class ErasedCandidate(NamedTuple):
    """A candidate reduced to its name and a batch-preparation closure.

    ``prepare(inputs)`` adapts the whole batch immediately and returns a
    zero-argument thunk that runs ``measure`` over the adapted values.
    """

    name: str
    prepare: Callable[[Sequence[Any]], Callable[[], None]]


def erase_candidate(candidate: CandidateSpec[InputT, IntermediateT]) -> ErasedCandidate:
    """Hide a candidate's intermediate type inside a closure."""
    adapt = candidate.adapt
    measure = candidate.measure

    def prepare(inputs: Sequence[InputT]) -> Callable[[], None]:
        adapted = [adapt(value) for value in inputs]

        def thunk() -> None:
            for value in adapted:
                measure(value)

        return thunk

    return ErasedCandidate(candidate.name, prepare)


class Benchmark:
    """A runnable benchmark whose input type is no longer visible.

    Only identity, metadata and :meth:`run` are exposed; the generator and
    candidate callables stay private.  Build instances with
    :func:`make_benchmark`.
    """

    def __init__(
        self,
        *,
        slug: str,
        title: str,
        sizes: Sequence[float],
        size_interpretation: str,
        inputs_per_size: int,
        generate: Callable[[float], Any],
        candidates: Sequence[ErasedCandidate],
    ) -> None:
        self._slug = slug
        self._title = title
        self._sizes = tuple(sizes)
        self._size_interpretation = size_interpretation
        self._inputs_per_size = inputs_per_size
        self._generate = generate
        self._candidates = tuple(candidates)

    @property
    def slug(self) -> str:
        return self._slug

    @property
    def title(self) -> str:
        return self._title

    @property
    def size_interpretation(self) -> str:
        return self._size_interpretation

    @property
    def sizes(self) -> tuple[float, ...]:
        return self._sizes

    @property
    def inputs_per_size(self) -> int:
        return self._inputs_per_size

    @property
    def candidate_names(self) -> list[str]:
        return [c.name for c in self._candidates]

    def describe(self) -> dict[str, Any]:
        """Serialize the benchmark's metadata to a JSON-compatible dict."""
        return {
            "slug": self._slug,
            "title": self._title,
            "sizes": list(self._sizes),
            "sizeInterpretation": self._size_interpretation,
            "inputsPerSize": self._inputs_per_size,
            "candidates": self.candidate_names,
        }

    def run(
        self,
        on_size_start: SizeStartHook | None = None,
        *,
        engine: TimingBackend | None = None,
    ) -> BenchmarkResult:
        """Run every candidate at every size and return the pivoted result.

        Args:
            on_size_start: Called as ``on_size_start(index, size)`` with a
                1-based index before inputs for each size are generated.
            engine: Timing backend; defaults to a :class:`TimingEngine`
                with default options.

        Raises:
            GenerationFailure: The generator raised.
            ExecutionFailure: A candidate or the timing engine raised.
        """
        log.debug("Running benchmark '%s' (%d sizes)", self._slug, len(self._sizes))
        records = collect_size_records(
            slug=self._slug,
            sizes=self._sizes,
            inputs_per_size=self._inputs_per_size,
            generate=self._generate,
            candidates=self._candidates,
            engine=engine or TimingEngine(),
            on_size_start=on_size_start,
        )
        result = BenchmarkResult(
            title=self._title,
            size_interpretation=self._size_interpretation,
            series=aggregate(records),
        )
        log.debug("Finished benchmark '%s'", self._slug)
        return result

    def __repr__(self) -> str:
        return f"Benchmark(slug={self._slug!r}, title={self._title!r})"


# ---------------------------------------------------------------------------
# Construction and validation
# ---------------------------------------------------------------------------


def validate_spec(spec: BenchmarkSpec[Any]) -> list[ValidationError]:
    """Validate a benchmark definition.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if not spec.slug or not spec.slug.strip():
        errors.append(ValidationError(field="slug", message="Benchmark slug must be non-empty."))

    count = spec.inputs_per_size
    if not isinstance(count, int) or isinstance(count, bool):
        errors.append(
            ValidationError(
                field="inputs_per_size",
                message=f"inputs_per_size must be an integer (got {count!r}).",
            )
        )
    elif count < 1:
        errors.append(
            ValidationError(
                field="inputs_per_size",
                message=f"inputs_per_size must be at least 1 (got {spec.inputs_per_size}).",
            )
        )

    for size in spec.sizes:
        if size <= 0:
            errors.append(
                ValidationError(field="sizes", message=f"Sizes must be positive (got {size}).")
            )

    seen: set[str] = set()
    for candidate in spec.candidates:
        if candidate.name in seen:
            errors.append(
                ValidationError(
                    field="candidates",
                    message=f"Duplicate candidate name '{candidate.name}'.",
                )
            )
        seen.add(candidate.name)

    if not spec.sizes:
        errors.append(
            ValidationError(
                field="sizes",
                message="No sizes defined; the run will produce no series.",
                severity="warning",
            )
        )
    if not spec.candidates:
        errors.append(
            ValidationError(
                field="candidates",
                message="No candidates defined; the run will produce no series.",
                severity="warning",
            )
        )

    return errors


def make_benchmark(spec: BenchmarkSpec[InputT]) -> Benchmark:
    """Validate *spec* and erase its input type.

    Raises:
        InvalidBenchmarkError: If the definition has fatal errors.
    """
    problems = validate_spec(spec)
    fatal = [p for p in problems if p.severity == "error"]
    for w in problems:
        if w.severity == "warning":
            log.warning("Benchmark '%s': %s: %s", spec.slug, w.field, w.message)
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise InvalidBenchmarkError(
            f"Invalid benchmark '{spec.slug}':\n" + "\n".join(messages)
        )

    return Benchmark(
        slug=spec.slug,
        title=spec.title,
        sizes=spec.sizes,
        size_interpretation=spec.size_interpretation,
        inputs_per_size=spec.inputs_per_size,
        generate=spec.generate,
        candidates=[erase_candidate(c) for c in spec.candidates],
    )
