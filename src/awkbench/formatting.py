"""Plain-text helpers for awkbench terminal output."""

from __future__ import annotations

from typing import Sequence

_ALIGN = {"l": str.ljust, "r": str.rjust, "c": str.center}


def truncate(text: str, max_len: int, suffix: str = "...") -> str:
    """Shorten *text* to *max_len* characters, ending in *suffix* if cut."""
    if len(text) <= max_len:
        return text
    if max_len <= len(suffix):
        return suffix[:max_len]
    return text[: max_len - len(suffix)] + suffix


def format_size(size: int) -> str:
    """Byte count as MiB with one decimal, e.g. ``'10.0 MB'``."""
    return f"{size / (1 << 20):.1f} MB"


def format_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    alignments: Sequence[str] = (),
    max_col_width: dict[int, int] | None = None,
    indent: int = 2,
) -> str:
    """Lay out *rows* under *headers* in space-separated columns.

    Short rows are padded with empty cells and long ones cut to the
    header count.  Columns listed in *max_col_width* are truncated.
    *alignments* holds ``'l'``, ``'r'`` or ``'c'`` per column (default
    left).  Trailing whitespace is stripped from every line.
    """
    if not headers:
        return ""
    ncols = len(headers)
    limits = max_col_width or {}

    table: list[list[str]] = []
    for row in [headers, *rows]:
        cells = [*row, *[""] * ncols][:ncols]
        table.append(
            [truncate(cell, limits[i]) if i in limits else cell for i, cell in enumerate(cells)]
        )

    widths = [max(map(len, column)) for column in zip(*table)]
    aligners = [_ALIGN[a] for a in alignments[:ncols]]
    aligners += [str.ljust] * (ncols - len(aligners))

    lines = []
    for cells in table:
        padded = (align(cell, width) for align, cell, width in zip(aligners, cells, widths))
        lines.append((" " * indent + "  ".join(padded)).rstrip())
    return "\n".join(lines)
