"""Benchmark programs and the datasets they run against.

Programs are ``*.awk`` files in a directory.  Each one is paired with
a dataset category by file name through :data:`PROGRAM_DATASETS`;
unmapped programs use :data:`DEFAULT_DATASET`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

log = logging.getLogger("awkbench")

DEFAULT_DATASET = "numeric"

PROGRAM_DATASETS: dict[str, str] = {
    "sum.awk": "numeric",
    "count.awk": "text",
    "filter.awk": "numeric",
    "select.awk": "numeric",
    "groupby.awk": "keyvalue",
    "wordcount.awk": "text",
    "regex.awk": "text",
    "csv.awk": "csv",
    "ipaddr.awk": "log",  # digit prefilter
    "alternation.awk": "log",  # multi-literal alternation
    "email.awk": "text",  # char class with special chars
    "suffix.awk": "log",  # suffix search
    "version.awk": "log",  # digit sequences
    "charclass.awk": "text",  # char class fast path
    "inner.awk": "log",  # inner literal
    "anchored.awk": "log",  # start anchor
}


@dataclass(frozen=True)
class BenchJob:
    """One program paired with its input file."""

    program_file: Path
    input_file: Path
    input_size: int  # bytes

    @property
    def program(self) -> str:
        """Program file name, as shown in reports."""
        return self.program_file.name


def discover_programs(directory: Path) -> list[Path]:
    """Return the ``*.awk`` files in *directory*, sorted by name.

    Raises:
        FileNotFoundError: If *directory* does not exist.
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Programs directory not found: {directory}")
    return sorted(directory.glob("*.awk"))


def dataset_for(
    program: str | Path,
    overrides: Mapping[str, str] | None = None,
) -> str:
    """Dataset category for a program file name."""
    name = Path(program).name
    if overrides and name in overrides:
        return overrides[name]
    return PROGRAM_DATASETS.get(name, DEFAULT_DATASET)


def build_jobs(
    programs: Sequence[Path],
    datasets: Mapping[str, Path],
    overrides: Mapping[str, str] | None = None,
) -> list[BenchJob]:
    """Pair each program with its dataset file and size.

    Raises:
        KeyError: If a program maps to a category with no dataset.
    """
    jobs: list[BenchJob] = []
    for program in programs:
        category = dataset_for(program, overrides)
        if category not in datasets:
            raise KeyError(f"No '{category}' dataset for program {program.name}")
        input_file = Path(datasets[category])
        jobs.append(
            BenchJob(
                program_file=program,
                input_file=input_file,
                input_size=input_file.stat().st_size,
            )
        )
        log.debug("%s → %s (%d bytes)", program.name, input_file, jobs[-1].input_size)
    return jobs
