"""Run configuration and YAML profile loading.

Handles:
- Loading run profiles from YAML files.
- Merging CLI options with profile values (CLI wins).
- Validating the final configuration before execution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from benchotron.bench.timing import TimingOptions

log = logging.getLogger("benchotron")


# ---------------------------------------------------------------------------
# RunConfig
# ---------------------------------------------------------------------------


@dataclass
class RunConfig:
    """Resolved configuration for running a suite of benchmarks."""

    timing: TimingOptions = field(default_factory=TimingOptions)

    # Selection: slugs or 1-based indices; empty means the whole suite.
    only: list[str] = field(default_factory=list)

    # Output
    output_dir: Path = field(default_factory=lambda: Path("tmp"))
    stdout: bool = False  # emit JSON on stdout instead of writing files
    indent: int | None = 2
    progress: bool = True  # console progress line on stderr


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: RunConfig) -> list[ValidationError]:
    """Validate a run configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []
    timing = config.timing

    if timing.min_samples < 1:
        errors.append(
            ValidationError(
                field="timing.min_samples",
                message=f"Need at least 1 sample per measurement (got {timing.min_samples}).",
            )
        )
    if timing.max_samples < timing.min_samples:
        errors.append(
            ValidationError(
                field="timing.max_samples",
                message=(
                    f"max_samples ({timing.max_samples}) is smaller than "
                    f"min_samples ({timing.min_samples})."
                ),
            )
        )
    if timing.max_time_s < 0:
        errors.append(
            ValidationError(
                field="timing.max_time_s",
                message=f"max_time_s cannot be negative (got {timing.max_time_s}).",
            )
        )
    if timing.min_time_s < 0:
        errors.append(
            ValidationError(
                field="timing.min_time_s",
                message=f"min_time_s cannot be negative (got {timing.min_time_s}).",
            )
        )
    if timing.warmup < 0:
        errors.append(
            ValidationError(
                field="timing.warmup",
                message=f"Warmup calls cannot be negative (got {timing.warmup}).",
            )
        )
    if timing.min_samples < 2:
        errors.append(
            ValidationError(
                field="timing.min_samples",
                message="A single sample reports zero variance and margin of error.",
                severity="warning",
            )
        )

    return errors


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a run profile from a YAML file.

    Profile format::

        output_dir: "tmp"
        only: ["sort", "dedupe"]
        indent: 2
        progress: true

        timing:
          min_samples: 5
          max_samples: 1000
          max_time_s: 5.0
          min_time_s: 0.05
          warmup: 1

    Returns:
        The parsed YAML as a dict.
    """
    import yaml

    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")
    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> RunConfig:
    """Build a RunConfig from a parsed YAML profile.

    Args:
        profile_data: Parsed YAML profile dict.
        cli_overrides: CLI option values that take precedence over the
            profile.  ``None`` values mean "not given on the command line".
            Keys: ``only``, ``output_dir``, ``stdout``, ``indent``,
            ``progress`` and the :class:`TimingOptions` field names.
    """
    cli = cli_overrides or {}

    timing_data = profile_data.get("timing", {}) or {}
    if not isinstance(timing_data, dict):
        raise ValueError("Profile 'timing' must be a mapping")

    defaults = TimingOptions()
    timing = TimingOptions()
    for name in ("min_samples", "max_samples", "max_time_s", "min_time_s", "warmup"):
        value = cli.get(name)
        if value is None:
            value = timing_data.get(name, getattr(defaults, name))
        setattr(timing, name, value)

    config = RunConfig(timing=timing)

    only = cli.get("only") or profile_data.get("only") or []
    if isinstance(only, str):
        only = [only]
    config.only = [str(s) for s in only]

    output_dir = cli.get("output_dir") or profile_data.get("output_dir")
    if output_dir:
        config.output_dir = Path(output_dir)

    for name in ("stdout", "indent", "progress"):
        value = cli.get(name)
        if value is None:
            value = profile_data.get(name, getattr(config, name))
        setattr(config, name, value)

    return config
