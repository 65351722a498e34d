"""Session-level benchmark results and their persistence.

Hierarchy::

    SessionResult (one ``awkbench run``)
      → results: list[AggregatedResult]   one per successful candidate/program
      → failures: list[BenchFailure]      one per failed candidate/program
      → ranking: list[RankingEntry]       derived from results

Files produced::

    results.json    SessionResult plus a generation timestamp
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from awkbench.bench.stats import AggregatedResult, RankingEntry, rank
from awkbench.bench.timing import ExecutionFailure

log = logging.getLogger("awkbench")


# ---------------------------------------------------------------------------
# Failure record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BenchFailure:
    """A candidate/program combination that produced no result."""

    candidate: str
    program: str
    kind: str  # "start", "exit", "timeout", "io"
    message: str

    @classmethod
    def from_exception(cls, exc: ExecutionFailure) -> BenchFailure:
        """Build from the failure raised by the orchestrator."""
        return cls(candidate=exc.candidate, program=exc.program, kind=exc.kind, message=str(exc))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "awk": self.candidate,
            "program": self.program,
            "kind": self.kind,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BenchFailure:
        """Deserialize from a dict."""
        return cls(
            candidate=data["awk"],
            program=data["program"],
            kind=data.get("kind", ""),
            message=data.get("message", ""),
        )


# ---------------------------------------------------------------------------
# Session result
# ---------------------------------------------------------------------------


@dataclass
class SessionResult:
    """Everything one benchmark session produced."""

    results: list[AggregatedResult] = field(default_factory=list)
    failures: list[BenchFailure] = field(default_factory=list)

    @property
    def ranking(self) -> list[RankingEntry]:
        """Ranking recomputed from the current results."""
        return rank(self.results)

    @property
    def candidates(self) -> list[str]:
        """Candidate names with at least one result, in first-seen order."""
        return list(dict.fromkeys(r.candidate for r in self.results))

    @property
    def programs(self) -> list[str]:
        """Program names with at least one result, in first-seen order."""
        return list(dict.fromkeys(r.program for r in self.results))

    def to_dict(self, generated: str = "") -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "generated": generated,
            "results": [r.to_dict() for r in self.results],
            "ranking": [e.to_dict() for e in self.ranking],
            "failures": [f.to_dict() for f in self.failures],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionResult:
        """Deserialize from a dict.  The ranking is recomputed, not loaded."""
        return cls(
            results=[AggregatedResult.from_dict(r) for r in data.get("results", [])],
            failures=[BenchFailure.from_dict(f) for f in data.get("failures", [])],
        )


def load_results(path: Path) -> tuple[SessionResult, str]:
    """Load a session from a ``results.json`` file.

    Returns:
        Tuple of (SessionResult, generation timestamp).

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the file is not a results document.
    """
    if not path.exists():
        raise FileNotFoundError(f"No results file at {path}")
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or "results" not in data:
        raise ValueError(f"{path} is not an awkbench results file")
    try:
        session = SessionResult.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"{path} has a malformed entry: {exc!r}") from exc
    log.debug("Loaded %d results from %s", len(session.results), path)
    return session, str(data.get("generated", ""))
