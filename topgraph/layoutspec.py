"""Parser for the text form of a widget layout.

Each line is a row of whitespace-separated widgets written as
``(rowspan:)?widget(/weight)?``. Blank lines and lines starting with ``#``
are skipped. Names are case-insensitive. Missing, non-integer or
non-positive spans and weights count as 1. Each widget's weight is divided
by the total weight of its row.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, TextIO

_log = logging.getLogger(__name__)
_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class WidgetRule:
    """One widget of a row: its name, width share and row span."""

    widget: str
    weight: float = 1.0
    height: int = 1


@dataclass
class Layout:
    """The parsed rows of a layout."""

    rows: list[list[WidgetRule]] = field(default_factory=list)


def _positive_int(text: str, expected: str, line_no: int, spec: str) -> int:
    if not _INT.fullmatch(text):
        _log.warning(
            "layout error on line %d: format is %s, got %r in %r",
            line_no,
            expected,
            text,
            spec,
        )
        return 1
    return max(int(text), 1)


def _parse_widget(spec: str, line_no: int) -> tuple[WidgetRule, int]:
    weight_parts = spec.split("/")
    span_parts = weight_parts[0].split(":")
    if len(span_parts) > 1:
        height = _positive_int(span_parts[0], "INT:STRING/INT", line_no, spec)
        name = span_parts[1]
    else:
        height = 1
        name = span_parts[0]
    rule = WidgetRule(widget=name.lower(), height=height)
    if len(weight_parts) > 1:
        weight = _positive_int(weight_parts[1], "STRING/INT", line_no, spec)
        rule.weight = float(weight)
        if len(weight_parts) > 2:
            _log.warning(
                "layout error on line %d: too many slashes in %r", line_no, spec
            )
        return rule, weight
    return rule, 1


def parse_layout(stream: TextIO | str) -> Layout:
    """Parse a layout description from a text stream or string."""
    lines: Iterable[str] = stream.splitlines() if isinstance(stream, str) else stream
    layout = Layout()
    for line_no, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text or text.startswith("#"):
            continue
        row: list[WidgetRule] = []
        total = 0
        for spec in text.split():
            rule, weight = _parse_widget(spec, line_no)
            row.append(rule)
            total += weight
        total = max(total, 1)
        for rule in row:
            rule.weight /= total
        layout.rows.append(row)
    return layout