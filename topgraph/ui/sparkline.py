"""Bar sparklines grouped into one widget."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from .block import (
    COLOR_CLEAR,
    MODIFIER_BOLD,
    Block,
    Buffer,
    Cell,
    Style,
    trim_string,
)

BARS = (" ", "▁", "▂", "▃", "▄", "▅", "▆", "▇", "█")

_log = logging.getLogger(__name__)


@dataclass
class Sparkline:
    """One line of non-negative integer data with two title lines."""

    data: list[int] = field(default_factory=list)
    title1: str = ""
    title2: str = ""
    title_color: int = 0
    line_color: int = 0


class SparklineGroup(Block):
    """Sparklines stacked vertically in one block."""

    def __init__(self, *lines: Sparkline) -> None:
        super().__init__()
        self.lines: list[Sparkline] = list(lines)

    def add(self, line: Sparkline) -> None:
        """Append a copy of *line*."""
        self.lines.append(replace(line))

    def draw(self, buf: Buffer) -> None:
        """Draw each sparkline scaled to the largest value on screen."""
        super().draw(buf)
        inner = self.inner
        dx, dy = inner.dx, inner.dy
        count = len(self.lines)
        for i, spark in enumerate(self.lines):
            band = dy // count
            title_style = Style(spark.title_color, COLOR_CLEAR, MODIFIER_BOLD)
            if dy > 5:
                buf.set_string(
                    trim_string(spark.title1, dx),
                    title_style,
                    inner.min_x,
                    inner.min_y + 1 + band * i,
                )
            if dy > 6:
                buf.set_string(
                    trim_string(spark.title2, dx),
                    title_style,
                    inner.min_x,
                    inner.min_y + 2 + band * i,
                )

            spark_y = band * (i + 1)
            data = spark.data
            visible = data[max(len(data) - dx, 0):] if dx > 0 else []
            peak = max([1, *visible])
            for x in range(dx, 0, -1):
                char = BARS[1]
                offset = dx - x
                if offset < len(data):
                    item = data[len(data) - 1 - offset]
                    percent = item / peak
                    index = int(percent * (len(BARS) - 2)) + 1
                    if 1 <= index < len(BARS):
                        char = BARS[index]
                    else:
                        _log.warning(
                            "invalid sparkline data value. index: %s, percent: %s, "
                            "curItem: %s, offset: %s",
                            index,
                            percent,
                            item,
                            offset,
                        )
                buf.set_cell(
                    Cell(char, Style(spark.line_color)),
                    inner.min_x + x - 1,
                    inner.min_y + spark_y - 1,
                )
            if len(data) > 4 * dx and dx >= 1:
                spark.data = data[dx - 1:]