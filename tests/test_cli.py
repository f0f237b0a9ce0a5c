"""Tests for benchotron.cli — Click CLI."""

from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import make_result
from click.testing import CliRunner, Result

from benchotron.bench.results import save_result
from benchotron.cli import main

_FAST_PROFILE = """\
timing:
  min_samples: 2
  max_time_s: 0
  min_time_s: 0.0005
  warmup: 0
"""


class _CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = Path(self._tmp.name)
        self.profile = self.dir / "fast.yaml"
        self.profile.write_text(_FAST_PROFILE)

    def tearDown(self) -> None:
        logging.getLogger("benchotron").handlers.clear()
        self._tmp.cleanup()


class TestHelp(unittest.TestCase):
    """Tests for the group and subcommand help."""

    def test_group_help(self) -> None:
        result = CliRunner().invoke(main, ["--help"])
        self.assertEqual(result.exit_code, 0)
        for cmd in ("run", "list", "show", "export"):
            self.assertIn(cmd, result.output)

    def test_run_help(self) -> None:
        result = CliRunner().invoke(main, ["run", "--help"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("--profile", result.output)
        self.assertIn("--only", result.output)
        self.assertIn("--stdout", result.output)

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("0.1.0", result.output)


class TestRun(_CliTestCase):
    """Tests for benchotron run."""

    def test_writes_result_files(self) -> None:
        out_dir = self.dir / "out"
        result = CliRunner().invoke(
            main,
            [
                "run",
                "sample_suite:SUITE",
                "--profile",
                str(self.profile),
                "--output-dir",
                str(out_dir),
                "--no-progress",
                "-q",
            ],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads((out_dir / "sum.json").read_text())
        self.assertEqual(data["title"], "Summing integers")
        self.assertEqual([s["name"] for s in data["series"]], ["builtin", "tuple"])
        self.assertEqual([p["size"] for p in data["series"][1]["results"]], [10, 20])
        self.assertTrue((out_dir / "len.json").exists())

    def test_stdout_with_only(self) -> None:
        result = CliRunner().invoke(
            main,
            [
                "run",
                "sample_suite:SUITE",
                "--profile",
                str(self.profile),
                "--only",
                "len",
                "--stdout",
                "--no-progress",
                "-q",
            ],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.stdout)
        self.assertEqual(data["title"], "Measuring strings")
        self.assertEqual(data["sizeInterpretation"], "Characters")

    def test_failure_exits_nonzero(self) -> None:
        result = CliRunner().invoke(
            main,
            [
                "run",
                "sample_suite:WITH_BROKEN",
                "--profile",
                str(self.profile),
                "--output-dir",
                str(self.dir / "out"),
                "--no-progress",
                "-q",
            ],
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("candidate 'boom' failed at size 1", result.output)
        self.assertFalse((self.dir / "out" / "sum.json").exists())

    def test_unknown_selector(self) -> None:
        result = CliRunner().invoke(main, ["run", "sample_suite:SUITE", "--only", "nope", "-q"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown benchmark 'nope'", result.output)

    def test_bad_target(self) -> None:
        result = CliRunner().invoke(main, ["run", "no_colon_here", "-q"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("module:attribute", result.output)

    def test_unwritable_output_dir(self) -> None:
        blocker = self.dir / "blocker"
        blocker.write_text("not a directory")
        result = CliRunner().invoke(
            main,
            [
                "run",
                "sample_suite:SUITE",
                "--profile",
                str(self.profile),
                "--output-dir",
                str(blocker / "out"),
                "--no-progress",
                "-q",
            ],
        )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)
        self.assertIsInstance(result.exception, SystemExit)


class TestRunProgress(_CliTestCase):
    """Tests for the console progress output of benchotron run."""

    def _run(self, *extra: str) -> Result:
        return CliRunner().invoke(
            main,
            [
                "run",
                "sample_suite:SUITE",
                "--profile",
                str(self.profile),
                "--output-dir",
                str(self.dir / "out"),
                "--progress",
                *extra,
            ],
        )

    def test_default_verbosity_has_no_log_lines(self) -> None:
        result = self._run()
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertNotIn("INFO", result.output)
        self.assertNotIn(")INFO", result.output)
        # One line per benchmark, from the progress sink only.
        self.assertEqual(result.output.count("wrote "), 2)
        self.assertIn("Benchotron starting at", result.output)
        self.assertIn("Benchotron finished at", result.output)
        self.assertRegex(result.output, r"finished at .* \(elapsed \d+s\)")

    def test_verbose_log_lines_do_not_join_progress_line(self) -> None:
        result = self._run("-v")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("DEBUG    Running benchmark 'sum'", result.output)
        self.assertIn("DEBUG    Finished benchmark 'len'", result.output)
        self.assertNotIn(")DEBUG", result.output)


class TestList(_CliTestCase):
    """Tests for benchotron list."""

    def test_list(self) -> None:
        result = CliRunner().invoke(main, ["list", "sample_suite:SUITE"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("sum", result.output)
        self.assertIn("Measuring strings", result.output)

    def test_list_missing_module(self) -> None:
        result = CliRunner().invoke(main, ["list", "no_such_module_here:SUITE"])
        self.assertEqual(result.exit_code, 1)


class TestShowAndExport(_CliTestCase):
    """Tests for benchotron show / export."""

    def setUp(self) -> None:
        super().setUp()
        self.result_file = self.dir / "demo.json"
        save_result(self.result_file, make_result())

    def test_show(self) -> None:
        result = CliRunner().invoke(main, ["show", str(self.result_file)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Demo benchmark", result.output)

    def test_show_missing(self) -> None:
        result = CliRunner().invoke(main, ["show", "/nonexistent/file.json"])
        self.assertNotEqual(result.exit_code, 0)

    def test_show_malformed_json(self) -> None:
        bad = self.dir / "bad.json"
        bad.write_text("{not json")
        result = CliRunner().invoke(main, ["show", str(bad)])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error: cannot read", result.output)

    def test_show_missing_keys(self) -> None:
        bad = self.dir / "partial.json"
        bad.write_text(json.dumps({"title": "x"}))
        result = CliRunner().invoke(main, ["show", str(bad)])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("sizeInterpretation", result.output)

    def test_export_malformed_json(self) -> None:
        bad = self.dir / "bad.json"
        bad.write_text("[1, 2]")
        result = CliRunner().invoke(main, ["export", str(bad)])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error: cannot read", result.output)

    def test_export_unwritable_output(self) -> None:
        blocker = self.dir / "blocker"
        blocker.write_text("")
        out = blocker / "report.csv"
        result = CliRunner().invoke(main, ["export", str(self.result_file), "-o", str(out)])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error: cannot write", result.output)

    def test_export_csv_stdout(self) -> None:
        result = CliRunner().invoke(main, ["export", str(self.result_file)])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(result.output.startswith("series,size,mean"))

    def test_export_markdown_file(self) -> None:
        out = self.dir / "report.md"
        result = CliRunner().invoke(
            main,
            ["export", str(self.result_file), "--format", "markdown", "-o", str(out)],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("# Demo benchmark", out.read_text())
