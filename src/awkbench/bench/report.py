"""Export benchmark results to Markdown, JSON and CSV.

Markdown: a geometric-mean ranking followed by one table per program,
fastest first, suitable for README files and GitHub issues.

JSON: the full session (results, ranking, failures) for later loading
with :func:`awkbench.bench.results.load_results`.

CSV: one row per candidate per program, durations in nanoseconds.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from awkbench.bench.results import BenchFailure, SessionResult
from awkbench.bench.stats import AggregatedResult, RankingEntry, relative_to_fastest
from awkbench.bench.system import SystemInfo, format_system_info

log = logging.getLogger("awkbench")

REPORT_FILES = {
    "markdown": "results.md",
    "json": "results.json",
    "csv": "results.csv",
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(ns: int | float) -> str:
    """Format a duration in nanoseconds with adaptive units."""
    if ns < 1_000:
        return f"{ns:.0f}ns"
    if ns < 1_000_000:
        return f"{ns / 1_000:.1f}µs"
    if ns < 1_000_000_000:
        return f"{ns / 1_000_000:.1f}ms"
    return f"{ns / 1_000_000_000:.2f}s"


def _speed_bar(score: float, width: int = 10) -> str:
    return "█" * int(width / score) if score > 0 else ""


def _timestamp(generated: str | None) -> str:
    if generated:
        return generated
    return datetime.now(timezone.utc).astimezone().isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_summary(ranking: Sequence[RankingEntry]) -> list[str]:
    """Markdown lines for the geometric-mean ranking table."""
    if not ranking:
        return []
    lines = [
        "## Summary (Geometric Mean)",
        "",
        "| Rank | AWK | Relative Speed |",
        "|------|-----|----------------|",
    ]
    for entry in ranking:
        lines.append(
            f"| {entry.rank} | {entry.candidate} | "
            f"{entry.score:.2f}x {_speed_bar(entry.score)} |"
        )
    lines.append("")
    return lines


def export_markdown(
    results: Sequence[AggregatedResult],
    ranking: Sequence[RankingEntry],
    *,
    failures: Sequence[BenchFailure] = (),
    system: SystemInfo | None = None,
    generated: str | None = None,
) -> str:
    """Export results as a Markdown report."""
    lines: list[str] = [
        "# AWK Benchmark Results",
        "",
        f"Generated: {_timestamp(generated)}",
        "",
    ]
    lines.extend(export_summary(ranking))

    for program, entries in relative_to_fastest(results).items():
        lines.append(f"## {program}")
        lines.append("")
        lines.append("| AWK | Mean | Median | Min | Max | StdDev | Throughput |")
        lines.append("|-----|------|--------|-----|-----|--------|------------|")
        for r, ratio in entries:
            speedup = f" ({ratio:.2f}x)" if r.mean_ns != entries[0][0].mean_ns else ""
            lines.append(
                f"| {r.candidate} | {format_duration(r.mean_ns)}{speedup} | "
                f"{format_duration(r.median_ns)} | "
                f"{format_duration(r.min_ns)} | "
                f"{format_duration(r.max_ns)} | "
                f"{format_duration(r.stdev_ns)} | "
                f"{r.throughput_mbps:.1f} MB/s |"
            )
        lines.append("")

    if failures:
        lines.append("## Failures")
        lines.append("")
        for f in failures:
            lines.append(f"- **{f.candidate}** on `{f.program}` ({f.kind}): {f.message}")
        lines.append("")

    if system is not None:
        lines.append("## System Info")
        lines.append("")
        lines.extend(format_system_info(system))
        lines.append("")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# JSON export
# ---------------------------------------------------------------------------


def export_json(
    session: SessionResult,
    *,
    system: SystemInfo | None = None,
    generated: str | None = None,
) -> str:
    """Export the session as an indented JSON document."""
    data = session.to_dict(generated=_timestamp(generated))
    if system is not None:
        data["system"] = system.to_dict()
    return json.dumps(data, indent=2) + "\n"


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(results: Sequence[AggregatedResult]) -> str:
    """Export results as CSV, one row per candidate per program."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(
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
        ]
    )
    for r in results:
        writer.writerow(
            [
                r.candidate,
                r.program,
                r.runs,
                r.mean_ns,
                r.min_ns,
                r.max_ns,
                r.median_ns,
                r.stdev_ns,
                f"{r.throughput_mbps:.2f}",
            ]
        )
    return output.getvalue()


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def write_reports(
    output_dir: Path,
    session: SessionResult,
    formats: Sequence[str],
    *,
    system: SystemInfo | None = None,
    generated: str | None = None,
) -> list[Path]:
    """Write the selected report formats into *output_dir*.

    Returns:
        Paths of the files written, in *formats* order.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    stamp = _timestamp(generated)
    ranking = session.ranking

    written: list[Path] = []
    for fmt in formats:
        path = output_dir / REPORT_FILES[fmt]
        if fmt == "markdown":
            text = export_markdown(
                session.results,
                ranking,
                failures=session.failures,
                system=system,
                generated=stamp,
            )
        elif fmt == "json":
            text = export_json(session, system=system, generated=stamp)
        else:
            text = export_csv(session.results)
        path.write_text(text, encoding="utf-8")
        log.info("Wrote %s", path)
        written.append(path)
    return written
