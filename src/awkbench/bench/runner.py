"""Benchmark execution engine.

Orchestrates, for every (program, candidate) pair in declared order:

1. Warm-up runs, whose timings are discarded.
2. Measured runs, whose elapsed times are collected.
3. Aggregation of the measured samples.

Every run executes strictly after the previous one completes; no two
external processes ever overlap, so one candidate cannot perturb
another's timing.  The first failing run (warm-up or measured) aborts
that pair; the session records the failure and moves on.  Nothing is
retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from awkbench.bench.candidates import Candidate
from awkbench.bench.config import BenchConfig
from awkbench.bench.programs import BenchJob
from awkbench.bench.results import BenchFailure, SessionResult
from awkbench.bench.stats import AggregatedResult, aggregate
from awkbench.bench.timing import ExecutionFailure, RunOutcome, run_once

log = logging.getLogger("awkbench")

Executor = Callable[..., RunOutcome]


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class BenchProgress:
    """Progress info passed to the callback."""

    phase: str  # "warmup", "measure", "done", "failed"
    candidate: str
    program: str
    iteration: int  # 1-based, 0 for "done"/"failed"
    total_iterations: int
    elapsed_ns: int = 0
    status: str = ""
    result: AggregatedResult | None = None
    failure: BenchFailure | None = None


# Type alias for the progress callback.
ProgressCallback = Any  # Callable[[BenchProgress], None] | None


# ---------------------------------------------------------------------------
# BenchRunner
# ---------------------------------------------------------------------------


class BenchRunner:
    """Runs candidates against programs according to a BenchConfig.

    Usage::

        runner = BenchRunner(config)
        session = runner.run_session(candidates, jobs)
    """

    def __init__(
        self,
        config: BenchConfig,
        progress_callback: ProgressCallback = None,
        executor: Executor = run_once,
    ) -> None:
        self.config = config
        self.progress: Any = progress_callback or self._default_progress
        self.executor = executor

    def benchmark(
        self,
        candidate: Candidate,
        program_file: str | Path,
        input_file: str | Path,
        input_size: int,
    ) -> AggregatedResult:
        """Warm up, measure and aggregate one candidate on one program.

        Raises:
            ExecutionFailure: From the first run that fails.
        """
        program = Path(program_file).name
        total = self.config.total_runs

        for i in range(self.config.warmup):
            outcome = self._run(candidate, program_file, input_file)
            self._report(outcome, "warmup", i + 1, total)
            if outcome.failure is not None:
                raise outcome.failure

        samples: list[int] = []
        for i in range(self.config.runs):
            outcome = self._run(candidate, program_file, input_file)
            self._report(outcome, "measure", self.config.warmup + i + 1, total)
            if outcome.failure is not None:
                raise outcome.failure
            samples.append(outcome.elapsed_ns)

        return aggregate(samples, input_size, candidate=candidate.name, program=program)

    def run_session(
        self,
        candidates: Sequence[Candidate],
        jobs: Sequence[BenchJob],
    ) -> SessionResult:
        """Benchmark every candidate on every job, one at a time.

        Programs are the outer loop and candidates the inner one, both
        in the given order.  Failures are isolated to their pair.
        """
        session = SessionResult()
        for job in jobs:
            for cand in candidates:
                try:
                    result = self.benchmark(
                        cand, job.program_file, job.input_file, job.input_size
                    )
                except ExecutionFailure as exc:
                    failure = BenchFailure.from_exception(exc)
                    session.failures.append(failure)
                    log.warning("Benchmark failed: %s", exc)
                    self.progress(
                        BenchProgress(
                            phase="failed",
                            candidate=cand.name,
                            program=job.program,
                            iteration=0,
                            total_iterations=self.config.total_runs,
                            status=exc.kind,
                            failure=failure,
                        )
                    )
                    continue
                session.results.append(result)
                self.progress(
                    BenchProgress(
                        phase="done",
                        candidate=cand.name,
                        program=job.program,
                        iteration=0,
                        total_iterations=self.config.total_runs,
                        elapsed_ns=result.mean_ns,
                        status="ok",
                        result=result,
                    )
                )
        log.info(
            "Session complete: %d results, %d failures",
            len(session.results),
            len(session.failures),
        )
        return session

    def _run(
        self,
        candidate: Candidate,
        program_file: str | Path,
        input_file: str | Path,
    ) -> RunOutcome:
        return self.executor(candidate, program_file, input_file, timeout=self.config.timeout)

    def _report(self, outcome: RunOutcome, phase: str, iteration: int, total: int) -> None:
        self.progress(
            BenchProgress(
                phase=phase,
                candidate=outcome.candidate,
                program=outcome.program,
                iteration=iteration,
                total_iterations=total,
                elapsed_ns=outcome.elapsed_ns,
                status="ok" if outcome.ok else outcome.failure.kind,  # type: ignore[union-attr]
            )
        )

    @staticmethod
    def _default_progress(progress: BenchProgress) -> None:
        """Default progress callback: log each run at DEBUG."""
        if progress.phase == "warmup":
            marker = "W"
        elif progress.phase == "measure":
            marker = "M"
        else:
            marker = " "
        log.debug(
            "  %-20s %-15s %s%d/%d %10.3fms [%s]",
            progress.program,
            progress.candidate,
            marker,
            progress.iteration,
            progress.total_iterations,
            progress.elapsed_ns / 1e6,
            progress.status,
        )
