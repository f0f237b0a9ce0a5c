"""Command-line interface for benchotron.

Subcommands:
    benchotron run      Run a suite of benchmarks
    benchotron list     List the benchmarks in a suite
    benchotron show     Display a saved result
    benchotron export   Export a saved result to CSV/markdown
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from benchotron import __version__
from benchotron.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """benchotron — compare implementations across input sizes."""


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


@main.command()
@click.argument("target")
@click.option(
    "--profile",
    "profile_path",
    type=click.Path(exists=True, path_type=Path),
    help="YAML profile with timing and output settings.",
)
@click.option(
    "--only",
    "only",
    type=str,
    multiple=True,
    help="Benchmark slug or 1-based index to run (repeatable).",
)
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory for <slug>.json results (default: tmp).",
)
@click.option("--stdout", "to_stdout", is_flag=True, help="Emit JSON on stdout.")
@click.option(
    "--max-time", "max_time_s", type=float, default=None, help="Seconds per measurement."
)
@click.option("--min-samples", type=int, default=None, help="Minimum samples per measurement.")
@click.option(
    "--progress/--no-progress",
    default=None,
    help="Show a progress line on stderr.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show errors.")
@click.option("--log-file", type=click.Path(path_type=Path), default=None)
def run(  # noqa: PLR0913
    target: str,
    profile_path: Path | None,
    only: tuple[str, ...],
    output_dir: Path | None,
    to_stdout: bool,
    max_time_s: float | None,
    min_samples: int | None,
    progress: bool | None,
    verbose: bool,
    quiet: bool,
    log_file: Path | None,
) -> None:
    """Run the benchmarks defined by TARGET ('module:attribute').

    \b
    Examples:
        benchotron run mybenches:suite
        benchotron run mybenches:suite --only sort --max-time 1
        benchotron run mybenches:suite --profile quick.yaml --stdout > out.json
    """
    from benchotron.bench.config import RunConfig, config_from_profile, load_profile
    from benchotron.bench.errors import BenchotronError
    from benchotron.bench.output import ConsoleProgress
    from benchotron.bench.runner import SuiteRunner
    from benchotron.bench.suite import load_suite, select_benchmarks

    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    cli_overrides: dict[str, object] = {
        "only": list(only) or None,
        "output_dir": output_dir,
        "stdout": to_stdout or None,
        "progress": progress,
        "max_time_s": max_time_s,
        "min_samples": min_samples,
    }
    try:
        profile_data = load_profile(profile_path) if profile_path else {}
        config: RunConfig = config_from_profile(profile_data, cli_overrides=cli_overrides)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    # Make the current directory importable, like ``python -m``.
    if "" not in sys.path and str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))

    try:
        suite = load_suite(target)
        benchmarks = select_benchmarks(suite, config.only)
    except (ValueError, ImportError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    callback = None
    if config.progress:
        callback = ConsoleProgress()
        callback.attach(logger)
    runner = SuiteRunner(benchmarks, config, progress_callback=callback)
    try:
        runner.run()
    except (BenchotronError, ValueError, OSError) as exc:
        click.echo(f"\nError: {exc}", err=True)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        click.echo("\nBenchmark interrupted.", err=True)
        raise SystemExit(130)  # noqa: B904


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@main.command("list")
@click.argument("target")
def list_cmd(target: str) -> None:
    """List the benchmarks defined by TARGET ('module:attribute')."""
    from benchotron.bench.display import format_suite_listing
    from benchotron.bench.suite import load_suite

    if "" not in sys.path and str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))

    try:
        suite = load_suite(target)
    except (ValueError, ImportError) as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(format_suite_listing(suite))


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@main.command("show")
@click.argument("result_file", type=click.Path(exists=True, path_type=Path))
def show(result_file: Path) -> None:
    """Display a saved result.

    RESULT_FILE is a <slug>.json file written by 'benchotron run'.
    """
    from benchotron.bench.display import format_result
    from benchotron.bench.results import load_result

    try:
        result = load_result(result_file)
    except (OSError, KeyError, TypeError, ValueError) as exc:
        click.echo(f"Error: cannot read {result_file}: {exc}", err=True)
        raise SystemExit(1) from exc

    click.echo(format_result(result))


# ---------------------------------------------------------------------------
# export
# ---------------------------------------------------------------------------


@main.command("export")
@click.argument("result_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "markdown"]),
    default="csv",
    help="Export format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output file (default: stdout).",
)
def export(result_file: Path, fmt: str, output: Path | None) -> None:
    """Export a saved result to CSV or Markdown.

    \b
    Examples:
        benchotron export tmp/sort.json --format csv > sort.csv
        benchotron export tmp/sort.json --format markdown -o sort.md
    """
    from benchotron.bench.export import export_csv, export_markdown
    from benchotron.bench.results import load_result

    try:
        result = load_result(result_file)
    except (OSError, KeyError, TypeError, ValueError) as exc:
        click.echo(f"Error: cannot read {result_file}: {exc}", err=True)
        raise SystemExit(1) from exc
    text = export_csv(result) if fmt == "csv" else export_markdown(result)

    if output:
        try:
            output.write_text(text)
        except OSError as exc:
            click.echo(f"Error: cannot write {output}: {exc}", err=True)
            raise SystemExit(1) from exc
        click.echo(f"Exported to {output}")
    else:
        click.echo(text)
