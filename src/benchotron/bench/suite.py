"""Suite discovery and benchmark selection.

A suite is addressed as ``"package.module:attribute"``.  The attribute
may be a :class:`Benchmark`, a list or tuple of them, or a zero-argument
callable returning either.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any, Sequence

from benchotron.bench.spec import Benchmark

log = logging.getLogger("benchotron")


def load_suite(target: str) -> list[Benchmark]:
    """Import *target* and return its benchmarks in declaration order.

    Raises:
        ValueError: If *target* is malformed or does not resolve to
            benchmarks.
        ImportError: If the module cannot be imported.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Invalid suite target '{target}'. Expected format: 'module:attribute'")

    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ValueError(f"Module '{module_name}' has no attribute '{attr}'") from exc

    if callable(obj) and not isinstance(obj, Benchmark):
        obj = obj()

    if isinstance(obj, Benchmark):
        return [obj]
    if isinstance(obj, (list, tuple)) and all(isinstance(b, Benchmark) for b in obj):
        log.debug("Loaded %d benchmark(s) from %s", len(obj), target)
        return list(obj)
    raise ValueError(
        f"'{target}' must be a Benchmark or a list of Benchmarks, got {type(obj).__name__}"
    )


def select_benchmarks(suite: Sequence[Benchmark], only: Sequence[str]) -> list[Benchmark]:
    """Keep the benchmarks named in *only*, in suite order.

    Selectors are slugs or 1-based indices.  An empty *only* selects the
    whole suite.

    Raises:
        ValueError: If a selector matches nothing.
    """
    if not only:
        return list(suite)

    by_slug = {b.slug: i for i, b in enumerate(suite)}
    chosen: set[int] = set()
    for selector in only:
        selector = selector.strip()
        if selector in by_slug:
            chosen.add(by_slug[selector])
        elif selector.isdigit() and 1 <= int(selector) <= len(suite):
            chosen.add(int(selector) - 1)
        else:
            available = ", ".join(b.slug for b in suite)
            raise ValueError(f"Unknown benchmark '{selector}'. Available: {available}")

    return [b for i, b in enumerate(suite) if i in chosen]
