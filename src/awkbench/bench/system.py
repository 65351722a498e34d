"""Host description recorded alongside benchmark results."""

from __future__ import annotations

import os
import platform
from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class SystemInfo:
    """Operating system, architecture and CPU count of the benchmark host."""

    os: str = ""
    arch: str = ""
    cpus: int = 0
    python: str = ""
    hostname: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return asdict(self)


def capture_system_info() -> SystemInfo:
    """Describe the current host."""
    return SystemInfo(
        os=platform.system().lower() or "unknown",
        arch=platform.machine() or "unknown",
        cpus=os.cpu_count() or 0,
        python=platform.python_version(),
        hostname=platform.node(),
    )


def format_system_info(info: SystemInfo) -> list[str]:
    """Markdown bullet lines for a report's System Info section."""
    return [
        f"- OS: {info.os}",
        f"- Arch: {info.arch}",
        f"- CPUs: {info.cpus}",
        f"- Python: {info.python}",
    ]
