"""Session settings: defaults, YAML profiles and CLI overrides.

Precedence, highest first: command-line options, the profile given
with ``--profile``, the defaults on :class:`BenchConfig`.  The merged
config is checked by :func:`check_config` before anything runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from awkbench.bench.candidates import (
    Candidate,
    candidate_from_dict,
    default_candidates,
    select_candidates,
)
from awkbench.bench.dataset import parse_size

log = logging.getLogger("awkbench")

REPORT_FORMATS = ("markdown", "json", "csv")


# ---------------------------------------------------------------------------
# BenchConfig
# ---------------------------------------------------------------------------


@dataclass
class BenchConfig:
    """Resolved configuration for a benchmark session."""

    # Iteration control
    runs: int = 5  # Number of measured runs
    warmup: int = 1  # Number of warm-up runs
    timeout: float = 300.0  # Per-run timeout in seconds

    # Data
    size: str = "10MB"
    seed: int = 42

    # Paths
    data_dir: Path = field(default_factory=lambda: Path("testdata"))
    programs_dir: Path = field(default_factory=lambda: Path("programs"))
    output_dir: Path = field(default_factory=lambda: Path("results"))

    # Output
    formats: list[str] = field(default_factory=lambda: list(REPORT_FORMATS))

    # Candidates (empty = default_candidates())
    candidates: list[Candidate] = field(default_factory=list)
    # Added on top of the declared set by --candidate; a same-named entry
    # replaces the declared one
    extra_candidates: list[Candidate] = field(default_factory=list)
    awk_filter: list[str] | None = None

    # Program file name → dataset category, on top of the built-in table
    program_datasets: dict[str, str] = field(default_factory=dict)

    generate_only: bool = False

    @property
    def size_bytes(self) -> int:
        """Dataset size in bytes.  Raises ValueError for an unknown size."""
        return parse_size(self.size)

    @property
    def total_runs(self) -> int:
        """Executions per candidate per program (warmup + measured)."""
        return self.warmup + self.runs

    def declared_candidates(self) -> list[Candidate]:
        """The candidate set to look for, after the ``--awk`` filter."""
        declared = list(self.candidates) or default_candidates()
        for extra in self.extra_candidates:
            names = [c.name for c in declared]
            if extra.name in names:
                declared[names.index(extra.name)] = extra
            else:
                declared.append(extra)
        if self.awk_filter:
            declared = select_candidates(declared, self.awk_filter)
        return declared


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@dataclass
class ValidationError:
    """A single configuration validation error."""

    field: str
    message: str
    severity: str = "error"  # "error" or "warning"


def validate_config(config: BenchConfig) -> list[ValidationError]:
    """Validate a benchmark configuration.

    Returns a list of validation errors.  Empty list means valid.
    """
    errors: list[ValidationError] = []

    if config.runs < 1:
        errors.append(
            ValidationError(
                field="runs",
                message=f"Need at least 1 measured run (got {config.runs}).",
            )
        )
    elif config.runs < 3:
        errors.append(
            ValidationError(
                field="runs",
                message=(
                    f"Fewer than 3 measured runs (got {config.runs}); "
                    f"median and stddev will be noisy."
                ),
                severity="warning",
            )
        )

    if config.warmup < 0:
        errors.append(
            ValidationError(
                field="warmup",
                message=f"Warmup runs cannot be negative (got {config.warmup}).",
            )
        )

    if config.timeout <= 0:
        errors.append(
            ValidationError(
                field="timeout",
                message=f"Timeout must be positive (got {config.timeout}).",
            )
        )

    try:
        config.size_bytes
    except ValueError as exc:
        errors.append(ValidationError(field="size", message=str(exc)))

    for fmt in config.formats:
        if fmt not in REPORT_FORMATS:
            errors.append(
                ValidationError(
                    field="formats",
                    message=f"Unknown format '{fmt}'. Valid: {', '.join(REPORT_FORMATS)}.",
                )
            )

    for group in (config.candidates, config.extra_candidates):
        seen: set[str] = set()
        for cand in group:
            if not cand.name.strip():
                errors.append(
                    ValidationError(
                        field="candidates", message="Candidate names must be non-empty."
                    )
                )
            elif cand.name in seen:
                errors.append(
                    ValidationError(
                        field="candidates",
                        message=f"Duplicate candidate name '{cand.name}'.",
                    )
                )
            seen.add(cand.name)

    return errors


def check_config(config: BenchConfig) -> None:
    """Log validation warnings and raise on errors.

    Raises:
        ValueError: Listing every fatal validation error.
    """
    errors = validate_config(config)
    for w in errors:
        if w.severity == "warning":
            log.warning("Config warning: %s: %s", w.field, w.message)
    fatal = [e for e in errors if e.severity == "error"]
    if fatal:
        messages = [f"  {e.field}: {e.message}" for e in fatal]
        raise ValueError("Invalid benchmark configuration:\n" + "\n".join(messages))


# ---------------------------------------------------------------------------
# YAML profile loading
# ---------------------------------------------------------------------------


def load_profile(profile_path: Path) -> dict[str, Any]:
    """Load a benchmark profile from a YAML file.

    Profile format::

        runs: 10
        warmup: 2
        timeout: 120
        size: 100MB
        formats: [markdown, json]

        candidates:
          - name: gawk
            command: gawk
            args: ["-b"]
          - name: onetrue
            command: /opt/bwk/bin/awk

        program_datasets:
          mine.awk: log

    Returns:
        The parsed YAML as a dict.
    """
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_path}")

    data = yaml.safe_load(profile_path.read_text(encoding="utf-8"))

    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a YAML mapping, got {type(data).__name__}")

    return data


def config_from_profile(
    profile_data: dict[str, Any],
    *,
    cli_overrides: dict[str, Any] | None = None,
) -> BenchConfig:
    """Build a BenchConfig from a parsed profile and CLI overrides.

    CLI values that are not None take precedence over profile values.
    A profile key set to ``null`` counts as absent.  CLI candidates are
    kept apart in :attr:`BenchConfig.extra_candidates`.

    Raises:
        ValueError: If a value has the wrong type.
    """
    cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}

    def pick(key: str, default: Any) -> Any:
        if key in cli:
            return cli[key]
        value = profile_data.get(key)
        return default if value is None else value

    def coerce(key: str, kind: Callable[[Any], Any], default: Any) -> Any:
        value = pick(key, default)
        try:
            return kind(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid '{key}' value {value!r}: {exc}") from exc

    config = BenchConfig(
        runs=coerce("runs", int, 5),
        warmup=coerce("warmup", int, 1),
        timeout=coerce("timeout", float, 300.0),
        size=coerce("size", str, "10MB"),
        seed=coerce("seed", int, 42),
        data_dir=coerce("data_dir", Path, "testdata"),
        programs_dir=coerce("programs_dir", Path, "programs"),
        output_dir=coerce("output_dir", Path, "results"),
        generate_only=coerce("generate_only", bool, False),
    )

    formats = pick("formats", list(REPORT_FORMATS))
    if isinstance(formats, str):
        formats = [formats]
    if not isinstance(formats, (list, tuple)):
        raise ValueError(f"Invalid 'formats' value {formats!r}: expected a list of formats")
    formats = [str(f) for f in formats]
    config.formats = list(REPORT_FORMATS) if "all" in formats else formats

    candidates_data = profile_data.get("candidates") or []
    if not isinstance(candidates_data, list):
        raise ValueError("Profile 'candidates' must be a list of mappings")
    for entry in candidates_data:
        if not isinstance(entry, dict):
            raise ValueError(f"Candidate entry must be a mapping, got {type(entry).__name__}")
        config.candidates.append(candidate_from_dict(entry))
    config.extra_candidates = list(cli.get("candidates", []))

    datasets = profile_data.get("program_datasets") or {}
    if not isinstance(datasets, dict):
        raise ValueError("Profile 'program_datasets' must be a mapping of program -> category")
    config.program_datasets = {str(k): str(v) for k, v in datasets.items()}

    awk_filter = pick("awk_filter", None)
    if isinstance(awk_filter, str):
        awk_filter = [a.strip() for a in awk_filter.split(",") if a.strip()]
    elif awk_filter is not None and not isinstance(awk_filter, (list, tuple)):
        raise ValueError(f"Invalid 'awk_filter' value {awk_filter!r}: expected names")
    config.awk_filter = [str(a) for a in awk_filter] if awk_filter else None

    return config
