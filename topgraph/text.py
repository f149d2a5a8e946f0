"""Terminal display-width helpers."""

from __future__ import annotations

from wcwidth import wcwidth


def _char_width(ch: str) -> int:
    width = wcwidth(ch)
    return width if width > 0 else 0


def string_width(s: str) -> int:
    """Return the number of terminal cells *s* occupies."""
    return sum(_char_width(ch) for ch in s)


def truncate_front(s: str, w: int, prefix: str) -> str:
    """Cut characters from the front of *s* so it fits in *w* cells.

    The removed part is replaced by *prefix*, whose width counts against *w*.
    """
    if string_width(s) <= w:
        return s
    budget = w - string_width(prefix)
    width = 0
    kept = 0
    for ch in reversed(s):
        width += _char_width(ch)
        if width > budget:
            break
        kept += 1
    tail = s[len(s) - kept:] if kept else ""
    return prefix + tail