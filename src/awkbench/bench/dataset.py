"""Synthetic input data for AWK benchmarks.

Each generator writes lines until the file reaches the requested
size, so files end slightly past it.  A fixed seed makes every
dataset reproducible across runs and machines.

Categories and formats::

    numeric   "int float int float int"
    text      5-15 words from a fixed vocabulary
    csv       id,name,value,category,score (with header)
    keyvalue  "keyNNN value", 100 distinct keys
    log       "2024-01-05 HH:MM:SS a.b.c.d LEVEL message"
"""

from __future__ import annotations

import itertools
import logging
import random
from pathlib import Path
from typing import Callable, TextIO

log = logging.getLogger("awkbench")

MIB = 1 << 20

SIZE_PRESETS: dict[str, int] = {
    "small": 1 * MIB,
    "medium": 10 * MIB,
    "large": 100 * MIB,
    "xlarge": 500 * MIB,
}

CATEGORIES = ("numeric", "text", "csv", "keyvalue", "log")

_WORDS = [
    "the", "quick", "brown", "fox", "jumps", "over", "lazy", "dog",
    "lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing",
    "data", "processing", "benchmark", "performance", "test123", "value42",
    "alpha", "beta", "gamma", "delta", "epsilon", "zeta", "eta", "theta",
]  # fmt: skip

_NAMES = ["alice", "bob", "charlie", "david", "eve", "frank", "grace", "henry"]
_CSV_CATEGORIES = ["A", "B", "C", "D"]

_LOG_LEVELS = [
    "ERROR", "WARN", "INFO", "DEBUG", "TRACE",
    "FATAL", "CRITICAL", "NOTICE", "ALERT", "EMERGENCY",
]  # fmt: skip

_LOG_MESSAGES = [
    "Processing request from client",
    "Connection established successfully",
    "Database query completed",
    "Cache miss for key",
    "Authentication failed for user",
    "File uploaded successfully",
    "Memory usage threshold exceeded",
    "Service health check passed",
    "Rate limit exceeded",
    "Session expired",
]


# ---------------------------------------------------------------------------
# Sizes
# ---------------------------------------------------------------------------


def size_label(size: int) -> str:
    """Human label used in file names: ``'512KB'``, ``'10MB'``, ``'1GB'``."""
    if size < MIB:
        return f"{size // 1024}KB"
    if size < 1 << 30:
        return f"{size // MIB}MB"
    return f"{size // (1 << 30)}GB"


def parse_size(text: str) -> int:
    """Parse a dataset size preset.

    Accepts a preset label (``"1MB"``, ``"10MB"``, ``"100MB"``,
    ``"500MB"``) or name (``"small"`` ... ``"xlarge"``), case-insensitive.

    Raises:
        ValueError: For anything else.
    """
    key = text.strip().lower()
    if key in SIZE_PRESETS:
        return SIZE_PRESETS[key]
    for size in SIZE_PRESETS.values():
        if key == size_label(size).lower():
            return size
    valid = ", ".join(size_label(s) for s in SIZE_PRESETS.values())
    raise ValueError(f"Invalid size: '{text}' (use {valid})")


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class DatasetGenerator:
    """Writes reproducible benchmark inputs."""

    def __init__(self, seed: int = 42) -> None:
        self.seed = seed
        self.rng = random.Random(seed)

    def _write(self, path: Path, size: int, make_line: Callable[[], str], header: str = "") -> Path:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            written = _write_line(f, header) if header else 0
            while written < size:
                written += _write_line(f, make_line())
        log.debug("Wrote %s (%d bytes)", path, path.stat().st_size)
        return path

    def generate_numeric(self, directory: Path, size: int) -> Path:
        """Numeric columns, for sum/filter/select programs."""
        rng = self.rng

        def line() -> str:
            return (
                f"{rng.randrange(1000)} {rng.random() * 1000:.6f} "
                f"{rng.randrange(1000)} {rng.random() * 1000:.6f} "
                f"{rng.randrange(1000)}\n"
            )

        return self._write(directory / f"numeric_{size_label(size)}.txt", size, line)

    def generate_text(self, directory: Path, size: int) -> Path:
        """Lines of words, for count/wordcount/regex programs."""
        rng = self.rng

        def line() -> str:
            n_words = 5 + rng.randrange(11)
            return " ".join(rng.choice(_WORDS) for _ in range(n_words)) + "\n"

        return self._write(directory / f"text_{size_label(size)}.txt", size, line)

    def generate_csv(self, directory: Path, size: int) -> Path:
        """Comma-separated records with a header row."""
        rng = self.rng
        next_id = itertools.count(1)

        def line() -> str:
            return (
                f"{next(next_id)},{rng.choice(_NAMES)},{rng.random() * 1000:.2f},"
                f"{rng.choice(_CSV_CATEGORIES)},{rng.randrange(100)}\n"
            )

        return self._write(
            directory / f"data_{size_label(size)}.csv",
            size,
            line,
            header="id,name,value,category,score\n",
        )

    def generate_keyvalue(self, directory: Path, size: int) -> Path:
        """Key/value pairs with limited key cardinality, for group-by."""
        rng = self.rng
        keys = [f"key{i:03d}" for i in range(100)]

        def line() -> str:
            return f"{rng.choice(keys)} {rng.randrange(1000)}\n"

        return self._write(directory / f"keyvalue_{size_label(size)}.txt", size, line)

    def generate_log(self, directory: Path, size: int) -> Path:
        """Log lines with timestamps, IPv4 addresses and levels, for regex programs."""
        rng = self.rng

        def line() -> str:
            ip = ".".join(str(rng.randrange(256)) for _ in range(4))
            hour, minute, sec = rng.randrange(24), rng.randrange(60), rng.randrange(60)
            return (
                f"2024-01-05 {hour:02d}:{minute:02d}:{sec:02d} {ip} "
                f"{rng.choice(_LOG_LEVELS)} {rng.choice(_LOG_MESSAGES)}\n"
            )

        return self._write(directory / f"log_{size_label(size)}.txt", size, line)

    def generate_all(self, directory: Path, size: int) -> dict[str, Path]:
        """Generate every category into *directory*, creating it if needed.

        Returns:
            Mapping of category name to file path.
        """
        directory.mkdir(parents=True, exist_ok=True)
        generators = {
            "numeric": self.generate_numeric,
            "text": self.generate_text,
            "csv": self.generate_csv,
            "keyvalue": self.generate_keyvalue,
            "log": self.generate_log,
        }
        files: dict[str, Path] = {}
        for category, generate in generators.items():
            try:
                files[category] = generate(directory, size)
            except OSError as exc:
                raise OSError(f"{category}: {exc}") from exc
        return files


def _write_line(f: TextIO, line: str) -> int:
    f.write(line)
    # Every generated character is ASCII, so characters equal bytes.
    return len(line)
