"""AWK implementations under test and their discovery on the host.

A :class:`Candidate` names one AWK engine and how to invoke it.  The
declared set comes from :func:`default_candidates` or from a profile;
:func:`filter_available` narrows it to the engines actually installed,
rewriting each command to its resolved path.

Resolution order (first match wins):

1. The literal command on ``PATH``.
2. The command with the ``.exe`` suffix on ``PATH``.
3. Conventional Go install directories: ``$GOPATH/bin``,
   ``$HOME/go/bin`` and ``$USERPROFILE/go/bin``.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Mapping, Sequence

log = logging.getLogger("awkbench")

EXE_SUFFIX = ".exe"


# ---------------------------------------------------------------------------
# Candidate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Candidate:
    """One AWK implementation to benchmark."""

    name: str  # display name, e.g. "uawk-fast"
    command: str  # executable name or resolved path
    args: tuple[str, ...] = ()  # extra arguments, e.g. ("-b",) for gawk

    def with_command(self, command: str) -> Candidate:
        """Return a copy invoking *command* instead."""
        return replace(self, command=command)

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict."""
        return {"name": self.name, "command": self.command, "args": list(self.args)}


def default_candidates(cpu_count: int | None = None) -> list[Candidate]:
    """Return the declared set of AWK implementations.

    Built fresh on every call.  The parallel uawk variant using every
    CPU is skipped when it would duplicate ``uawk-j4``.
    """
    ncpu = cpu_count or os.cpu_count() or 1
    candidates = [
        Candidate("uawk", "uawk"),  # POSIX mode (default)
        Candidate("uawk-fast", "uawk", ("--no-posix",)),
        Candidate("uawk-j4", "uawk", ("-j", "4")),
    ]
    if ncpu != 4:
        candidates.append(Candidate(f"uawk-j{ncpu}", "uawk", ("-j", str(ncpu))))
    candidates.extend(
        [
            Candidate("goawk", "goawk"),
            Candidate("gawk", "gawk", ("-b",)),  # -b disables multibyte handling
            Candidate("mawk", "mawk"),
        ]
    )
    return candidates


def parse_candidate(spec: str) -> Candidate:
    """Parse an inline candidate definition from the CLI.

    Format: ``"name=command [args...]"``, e.g. ``"gawk-posix=gawk --posix"``.
    A bare ``"name"`` uses the name as the command.
    """
    if "=" in spec:
        name, rest = spec.split("=", 1)
    else:
        name, rest = spec, spec
    name = name.strip()
    if not name:
        raise ValueError(f"Invalid candidate spec: '{spec}'. Expected 'name=command [args]'.")
    parts = shlex.split(rest)
    if not parts:
        raise ValueError(f"Candidate '{name}' has no command.")
    return Candidate(name=name, command=parts[0], args=tuple(parts[1:]))


def candidate_from_dict(data: Mapping[str, object]) -> Candidate:
    """Build a Candidate from a profile mapping."""
    name = str(data.get("name") or "").strip()
    if not name:
        raise ValueError("Candidate definitions need a non-empty 'name'.")
    command = str(data.get("command") or name)
    raw_args = data.get("args") or []
    if isinstance(raw_args, str):
        args = tuple(shlex.split(raw_args))
    elif isinstance(raw_args, (list, tuple)):
        args = tuple(str(a) for a in raw_args)
    else:
        raise ValueError(f"Candidate '{name}': 'args' must be a list or string.")
    return Candidate(name=name, command=command, args=args)


# ---------------------------------------------------------------------------
# Resolution strategies
# ---------------------------------------------------------------------------

Resolver = Callable[[str, Mapping[str, str]], str | None]


def _on_search_path(command: str, env: Mapping[str, str]) -> str | None:
    return shutil.which(command, path=env.get("PATH"))


def _on_search_path_with_suffix(command: str, env: Mapping[str, str]) -> str | None:
    return shutil.which(command + EXE_SUFFIX, path=env.get("PATH"))


def _install_dirs(env: Mapping[str, str]) -> list[tuple[Path, tuple[str, ...]]]:
    """Conventional bin directories with the suffixes to try in each."""
    dirs: list[tuple[Path, tuple[str, ...]]] = []
    if env.get("GOPATH"):
        dirs.append((Path(env["GOPATH"]) / "bin", ("", EXE_SUFFIX)))
    if env.get("HOME"):
        dirs.append((Path(env["HOME"]) / "go" / "bin", ("", EXE_SUFFIX)))
    if env.get("USERPROFILE"):
        dirs.append((Path(env["USERPROFILE"]) / "go" / "bin", (EXE_SUFFIX,)))
    return dirs


def _in_install_dirs(command: str, env: Mapping[str, str]) -> str | None:
    for directory, suffixes in _install_dirs(env):
        for suffix in suffixes:
            candidate = directory / (command + suffix)
            if candidate.is_file():
                return str(candidate)
    return None


RESOLVERS: tuple[Resolver, ...] = (
    _on_search_path,
    _on_search_path_with_suffix,
    _in_install_dirs,
)


def resolve_command(
    command: str,
    *,
    env: Mapping[str, str] | None = None,
) -> str | None:
    """Resolve *command* to an executable path, or None if not installed."""
    environ = os.environ if env is None else env
    for resolver in RESOLVERS:
        path = resolver(command, environ)
        if path:
            return path
    return None


def filter_available(
    declared: Sequence[Candidate],
    *,
    env: Mapping[str, str] | None = None,
) -> list[Candidate]:
    """Return the declared candidates installed on this host.

    Input order is preserved.  Each returned candidate's command is
    the fully resolved path.  Missing candidates are dropped silently.
    """
    available: list[Candidate] = []
    for cand in declared:
        path = resolve_command(cand.command, env=env)
        if path is None:
            log.debug("Candidate '%s' not found (command: %s)", cand.name, cand.command)
            continue
        available.append(cand.with_command(path))
    return available


def select_candidates(
    declared: Sequence[Candidate],
    names: Sequence[str],
) -> list[Candidate]:
    """Restrict *declared* to the requested names, keeping declared order."""
    wanted = {n.strip() for n in names if n.strip()}
    known = {c.name for c in declared}
    for name in sorted(wanted - known):
        log.warning("Unknown AWK '%s' requested, ignoring", name)
    return [c for c in declared if c.name in wanted]
