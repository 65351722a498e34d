"""Timed execution of a single AWK run.

Spawns one external process, captures stdout and stderr in full,
and measures wall-clock time with :func:`time.perf_counter_ns`
around the process's lifetime only.  A run that exceeds its
deadline has its whole process group killed.

Failures are returned in the :class:`RunOutcome`, never retried here.
"""

from __future__ import annotations

import logging
import os
import shlex
import signal
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from awkbench.bench.candidates import Candidate

log = logging.getLogger("awkbench")

# Failure kinds.
START = "start"
EXIT = "exit"
TIMEOUT = "timeout"
IO = "io"


# ---------------------------------------------------------------------------
# Outcome types
# ---------------------------------------------------------------------------


class ExecutionFailure(Exception):
    """A candidate could not complete a run."""

    def __init__(
        self,
        candidate: str,
        program: str,
        kind: str,
        detail: str,
        *,
        stderr: str = "",
        exit_code: int | None = None,
    ) -> None:
        self.candidate = candidate
        self.program = program
        self.kind = kind
        self.detail = detail
        self.stderr = stderr
        self.exit_code = exit_code
        super().__init__(str(self))

    def __str__(self) -> str:
        msg = f"{self.candidate} on {self.program}: {self.detail}"
        stderr = self.stderr.strip()
        if stderr:
            msg += f": {stderr}"
        return msg


@dataclass(frozen=True)
class RunOutcome:
    """Result of one execution of one candidate."""

    candidate: str
    program: str
    elapsed_ns: int
    output: str
    failure: ExecutionFailure | None = None

    @property
    def ok(self) -> bool:
        """True if the run completed with exit status 0."""
        return self.failure is None


# ---------------------------------------------------------------------------
# Command construction
# ---------------------------------------------------------------------------


def build_command(
    candidate: Candidate,
    program_file: str | Path,
    input_file: str | Path,
) -> list[str]:
    """Argument vector running *program_file* over *input_file*."""
    return [candidate.command, *candidate.args, "-f", str(program_file), str(input_file)]


def build_inline_command(
    candidate: Candidate,
    program_text: str,
    input_file: str | Path,
) -> list[str]:
    """Argument vector running an inline program over *input_file*."""
    return [candidate.command, *candidate.args, program_text, str(input_file)]


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def run_command(
    argv: list[str],
    *,
    candidate: str,
    program: str,
    timeout: float,
) -> RunOutcome:
    """Run *argv* once under a wall-clock deadline of *timeout* seconds."""
    log.debug("Running: %s", shlex.join(argv))
    start = time.perf_counter_ns()
    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )
    except OSError as exc:
        return RunOutcome(
            candidate=candidate,
            program=program,
            elapsed_ns=0,
            output="",
            failure=ExecutionFailure(
                candidate, program, START, f"failed to start {argv[0]}: {exc}"
            ),
        )

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_process_group(proc)
        stdout, stderr = _drain(proc)
        elapsed = time.perf_counter_ns() - start
        return RunOutcome(
            candidate=candidate,
            program=program,
            elapsed_ns=elapsed,
            output=stdout,
            failure=ExecutionFailure(
                candidate,
                program,
                TIMEOUT,
                f"timed out after {timeout:g}s",
                stderr=stderr,
            ),
        )
    except OSError as exc:
        proc.kill()
        proc.wait()
        elapsed = time.perf_counter_ns() - start
        return RunOutcome(
            candidate=candidate,
            program=program,
            elapsed_ns=elapsed,
            output="",
            failure=ExecutionFailure(candidate, program, IO, f"error reading output: {exc}"),
        )
    elapsed = time.perf_counter_ns() - start

    if proc.returncode != 0:
        return RunOutcome(
            candidate=candidate,
            program=program,
            elapsed_ns=elapsed,
            output=stdout,
            failure=ExecutionFailure(
                candidate,
                program,
                EXIT,
                f"exit status {proc.returncode}",
                stderr=stderr,
                exit_code=proc.returncode,
            ),
        )

    return RunOutcome(candidate=candidate, program=program, elapsed_ns=elapsed, output=stdout)


def run_once(
    candidate: Candidate,
    program_file: str | Path,
    input_file: str | Path,
    *,
    timeout: float,
) -> RunOutcome:
    """Run *candidate* with ``-f program_file input_file``."""
    return run_command(
        build_command(candidate, program_file, input_file),
        candidate=candidate.name,
        program=Path(program_file).name,
        timeout=timeout,
    )


def run_inline(
    candidate: Candidate,
    program_text: str,
    input_file: str | Path,
    *,
    timeout: float,
    label: str | None = None,
) -> RunOutcome:
    """Run *candidate* with an inline program instead of a file.

    *label* names the program in the outcome; defaults to the text.
    """
    return run_command(
        build_inline_command(candidate, program_text, input_file),
        candidate=candidate.name,
        program=label or program_text,
        timeout=timeout,
    )


def _kill_process_group(proc: subprocess.Popen[str]) -> None:
    """Kill the process and anything it spawned."""
    try:
        os.killpg(os.getpgid(proc.pid), signal.SIGKILL)
    except (ProcessLookupError, PermissionError, OSError, AttributeError):
        # No process groups on this platform, or the group is already gone.
        proc.kill()


def _drain(proc: subprocess.Popen[str]) -> tuple[str, str]:
    """Collect whatever output a killed process left in its pipes."""
    try:
        stdout, stderr = proc.communicate(timeout=5)
    except subprocess.TimeoutExpired:
        proc.kill()
        stdout, stderr = proc.communicate()
    return stdout or "", stderr or ""
