"""Statistics for benchmark timings.

Reduces measured elapsed-time samples to summary statistics, and
ranks candidates across programs by the geometric mean of their
per-program mean times.

All durations are integer nanoseconds.  Python integers do not
overflow, so sums over any number of samples are exact; integer
division truncates the mean and the even-count median.

The geometric mean is scale-invariant: a microsecond-scale program
and a second-scale program weigh equally in the ranking, where an
arithmetic mean would be dominated by the slowest program.
"""

from __future__ import annotations

import math
import statistics
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Sequence

MIB = 1024 * 1024
NS_PER_S = 1_000_000_000


# ---------------------------------------------------------------------------
# Aggregated result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AggregatedResult:
    """Summary of the measured runs of one candidate on one program."""

    candidate: str
    program: str
    runs: int
    min_ns: int
    max_ns: int
    mean_ns: int
    median_ns: int
    stdev_ns: int  # population standard deviation
    throughput_mbps: float  # MiB of input per second of mean time

    @property
    def mean_s(self) -> float:
        """Mean time in seconds."""
        return self.mean_ns / NS_PER_S

    @property
    def median_s(self) -> float:
        """Median time in seconds."""
        return self.median_ns / NS_PER_S

    @property
    def cv(self) -> float:
        """Coefficient of variation (stdev / mean), 0.0 for a zero mean."""
        return self.stdev_ns / self.mean_ns if self.mean_ns else 0.0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "awk": self.candidate,
            "program": self.program,
            "runs": self.runs,
            "min_ns": self.min_ns,
            "max_ns": self.max_ns,
            "mean_ns": self.mean_ns,
            "median_ns": self.median_ns,
            "stddev_ns": self.stdev_ns,
            "throughput_mbps": round(self.throughput_mbps, 3),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AggregatedResult:
        """Deserialize from a dict produced by :meth:`to_dict`."""
        return cls(
            candidate=data["awk"],
            program=data["program"],
            runs=int(data["runs"]),
            min_ns=int(data["min_ns"]),
            max_ns=int(data["max_ns"]),
            mean_ns=int(data["mean_ns"]),
            median_ns=int(data["median_ns"]),
            stdev_ns=int(data.get("stddev_ns", 0)),
            throughput_mbps=float(data.get("throughput_mbps", 0.0)),
        )


def aggregate(
    samples: Sequence[int],
    input_size: int,
    *,
    candidate: str = "",
    program: str = "",
) -> AggregatedResult:
    """Summarize elapsed-time samples.

    Args:
        samples: Measured durations in nanoseconds, at least one.
        input_size: Size of the input file in bytes, used for throughput.
        candidate: Candidate name recorded in the result.
        program: Program name recorded in the result.

    Returns:
        AggregatedResult.  Throughput is 0.0 when the mean or the
        input size is not positive.

    Raises:
        ValueError: If *samples* is empty.
    """
    if not samples:
        raise ValueError("aggregate() needs at least one sample")

    n = len(samples)
    ordered = sorted(samples)
    mean = sum(ordered) // n

    mid = n // 2
    if n % 2 == 0:
        median = (ordered[mid - 1] + ordered[mid]) // 2
    else:
        median = ordered[mid]

    stdev = int(statistics.pstdev(float(s) for s in ordered))

    throughput = 0.0
    if mean > 0 and input_size > 0:
        throughput = (input_size / MIB) / (mean / NS_PER_S)

    return AggregatedResult(
        candidate=candidate,
        program=program,
        runs=n,
        min_ns=ordered[0],
        max_ns=ordered[-1],
        mean_ns=mean,
        median_ns=median,
        stdev_ns=stdev,
        throughput_mbps=throughput,
    )


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RankingEntry:
    """A candidate's speed relative to the fastest across all programs."""

    rank: int  # 1-based
    candidate: str
    geomean_ns: float
    score: float  # 1.0 for the fastest, 1.5 means 50% slower
    programs: int  # number of programs contributing

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "rank": self.rank,
            "awk": self.candidate,
            "geomean_ns": round(self.geomean_ns, 1),
            "score": round(self.score, 6),
            "programs": self.programs,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RankingEntry:
        """Deserialize from a dict produced by :meth:`to_dict`."""
        return cls(
            rank=int(data["rank"]),
            candidate=data["awk"],
            geomean_ns=float(data["geomean_ns"]),
            score=float(data["score"]),
            programs=int(data.get("programs", 0)),
        )


def geometric_mean(values: Sequence[float]) -> float:
    """Geometric mean of positive values, computed in log space.

    Values below 1 are clamped to 1 (one nanosecond) so that a
    zero-duration sample cannot zero out a candidate's score.
    """
    if not values:
        return float("nan")
    return math.exp(math.fsum(math.log(max(v, 1.0)) for v in values) / len(values))


def rank(results: Sequence[AggregatedResult]) -> list[RankingEntry]:
    """Rank candidates by the geometric mean of their per-program means.

    Scores are normalized against the smallest geometric mean, so the
    fastest candidate scores exactly 1.0.  Ties are broken by name.
    An empty input yields an empty ranking.
    """
    by_candidate: dict[str, list[float]] = defaultdict(list)
    for r in results:
        by_candidate[r.candidate].append(float(r.mean_ns))
    if not by_candidate:
        return []

    geomeans = {name: geometric_mean(means) for name, means in by_candidate.items()}
    baseline = min(geomeans.values())

    ordered = sorted(geomeans.items(), key=lambda item: (item[1], item[0]))
    return [
        RankingEntry(
            rank=i + 1,
            candidate=name,
            geomean_ns=gm,
            score=gm / baseline,
            programs=len(by_candidate[name]),
        )
        for i, (name, gm) in enumerate(ordered)
    ]


def relative_to_fastest(
    results: Sequence[AggregatedResult],
) -> dict[str, list[tuple[AggregatedResult, float]]]:
    """Group results by program, fastest first, with each mean's ratio to the fastest.

    Within a program, ties on mean time are ordered by candidate name.
    """
    by_program: dict[str, list[AggregatedResult]] = defaultdict(list)
    for r in results:
        by_program[r.program].append(r)

    grouped: dict[str, list[tuple[AggregatedResult, float]]] = {}
    for program in sorted(by_program):
        prog_results = sorted(by_program[program], key=lambda r: (r.mean_ns, r.candidate))
        fastest = prog_results[0].mean_ns
        grouped[program] = [
            (r, r.mean_ns / fastest if fastest > 0 else 1.0) for r in prog_results
        ]
    return grouped
