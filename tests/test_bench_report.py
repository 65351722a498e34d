"""Tests for awkbench.bench.report: Markdown, JSON and CSV export."""

from __future__ import annotations

import csv
import io
import json
import tempfile
import unittest
from pathlib import Path

from awkbench.bench.report import (
    export_csv,
    export_json,
    export_markdown,
    export_summary,
    format_duration,
    write_reports,
)
from awkbench.bench.results import BenchFailure, SessionResult, load_results
from awkbench.bench.stats import rank
from awkbench.bench.system import SystemInfo
from bench_test_helpers import make_result

STAMP = "2025-01-01T12:00:00+00:00"


def _session() -> SessionResult:
    return SessionResult(
        results=[
            make_result("gawk", "sum.awk", 20),
            make_result("mawk", "sum.awk", 10),
        ],
        failures=[BenchFailure("goawk", "sum.awk", "exit", "goawk on sum.awk: exit status 2")],
    )


class TestFormatDuration(unittest.TestCase):
    def test_units(self) -> None:
        self.assertEqual(format_duration(500), "500ns")
        self.assertEqual(format_duration(1_500), "1.5µs")
        self.assertEqual(format_duration(12_300_000), "12.3ms")
        self.assertEqual(format_duration(2_500_000_000), "2.50s")

    def test_zero(self) -> None:
        self.assertEqual(format_duration(0), "0ns")


class TestExportMarkdown(unittest.TestCase):
    def setUp(self) -> None:
        session = _session()
        self.md = export_markdown(
            session.results,
            session.ranking,
            failures=session.failures,
            system=SystemInfo(os="linux", arch="x86_64", cpus=8, python="3.12.1"),
            generated=STAMP,
        )

    def test_header(self) -> None:
        self.assertTrue(self.md.startswith("# AWK Benchmark Results\n"))
        self.assertIn(f"Generated: {STAMP}", self.md)

    def test_summary_before_programs(self) -> None:
        self.assertLess(
            self.md.index("## Summary (Geometric Mean)"), self.md.index("## sum.awk")
        )
        self.assertIn("| 1 | mawk | 1.00x ██████████ |", self.md)
        self.assertIn("| 2 | gawk | 2.00x █", self.md)

    def test_program_table_fastest_first(self) -> None:
        self.assertIn("| AWK | Mean | Median | Min | Max | StdDev | Throughput |", self.md)
        self.assertIn("| mawk | 10.0ms | 10.0ms | 10.0ms | 10.0ms | 0ns | 1000.0 MB/s |", self.md)
        self.assertIn("| gawk | 20.0ms (2.00x) |", self.md)
        self.assertLess(self.md.index("| mawk | 10.0ms"), self.md.index("| gawk | 20.0ms"))

    def test_failures_and_system(self) -> None:
        self.assertIn("## Failures", self.md)
        self.assertIn("- **goawk** on `sum.awk` (exit): goawk on sum.awk: exit status 2", self.md)
        self.assertIn("## System Info", self.md)
        self.assertIn("- OS: linux", self.md)
        self.assertIn("- CPUs: 8", self.md)

    def test_empty(self) -> None:
        md = export_markdown([], [], generated=STAMP)
        self.assertNotIn("## Summary", md)
        self.assertNotIn("## Failures", md)
        self.assertNotIn("## System Info", md)

    def test_summary_lines(self) -> None:
        lines = export_summary(rank([make_result("a", "p", 1)]))
        self.assertEqual(lines[0], "## Summary (Geometric Mean)")
        self.assertEqual(export_summary([]), [])


class TestExportJson(unittest.TestCase):
    def test_document(self) -> None:
        system = SystemInfo(os="linux", arch="arm64", cpus=4)
        data = json.loads(export_json(_session(), system=system, generated=STAMP))
        self.assertEqual(data["generated"], STAMP)
        self.assertEqual([r["awk"] for r in data["results"]], ["gawk", "mawk"])
        self.assertEqual(data["ranking"][0]["awk"], "mawk")
        self.assertEqual(data["ranking"][0]["score"], 1.0)
        self.assertEqual(data["failures"][0]["kind"], "exit")
        self.assertEqual(data["system"]["arch"], "arm64")

    def test_without_system(self) -> None:
        data = json.loads(export_json(SessionResult(), generated=STAMP))
        self.assertNotIn("system", data)
        self.assertEqual(data["results"], [])


class TestExportCsv(unittest.TestCase):
    def test_rows(self) -> None:
        text = export_csv(_session().results)
        rows = list(csv.reader(io.StringIO(text)))
        self.assertEqual(
            rows[0],
            [
                "awk",
                "program",
                "runs",
                "mean_ns",
                "min_ns",
                "max_ns",
                "median_ns",
                "stddev_ns",
                "throughput_mbps",
            ],
        )
        self.assertEqual(rows[1][:4], ["gawk", "sum.awk", "3", "20000000"])
        self.assertEqual(rows[2][-1], "1000.00")
        self.assertEqual(len(rows), 3)

    def test_header_only(self) -> None:
        self.assertEqual(export_csv([]).count("\n"), 1)


class TestWriteReports(unittest.TestCase):
    def test_all_formats(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "results"
            paths = write_reports(
                out, _session(), ["markdown", "json", "csv"], generated=STAMP
            )
            self.assertEqual(
                [p.name for p in paths], ["results.md", "results.json", "results.csv"]
            )
            for path in paths:
                self.assertTrue(path.is_file())
            session, generated = load_results(out / "results.json")
            self.assertEqual(generated, STAMP)
            self.assertEqual(len(session.results), 2)
            self.assertIn(STAMP, (out / "results.md").read_text(encoding="utf-8"))

    def test_single_format(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            paths = write_reports(Path(tmpdir), _session(), ["csv"])
            self.assertEqual([p.name for p in paths], ["results.csv"])
            self.assertFalse((Path(tmpdir) / "results.md").exists())


if __name__ == "__main__":
    unittest.main()
