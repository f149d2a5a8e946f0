"""A braille line graph of one or more data series."""

from __future__ import annotations

from functools import cmp_to_key
from typing import Iterable

from ..drawille import Canvas, line
from .block import COLOR_CLEAR, MODIFIER_CLEAR, Block, Buffer, Cell, Style

_EMPTY_BRAILLE = chr(0x2800)


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def numbered_less(a: str, b: str) -> bool:
    """Order names so that embedded numbers compare by value (CPU2 < CPU10)."""
    i = 0
    while i < len(a):
        ac = a[i]
        if _is_digit(ac):
            j = i + 1
            while j < len(a):
                if not _is_digit(a[j]):
                    break
                if j >= len(b):
                    return False
                if not _is_digit(b[j]):
                    return False
                j += 1
            an = int(a[i:j])
            if j > len(b):
                return False
            while j < len(b):
                if not _is_digit(b[j]):
                    break
                j += 1
            digits = b[i:j]
            if not digits or not all(_is_digit(c) for c in digits):
                return True
            bn = int(digits)
            if an < bn:
                return True
            if bn < an:
                return False
            i = j
        if i >= len(a):
            return True
        if i >= len(b):
            return False
        if ac < b[i]:
            return True
        if b[i] < ac:
            return False
        i += 1
    return True


def _compare(a: str, b: str) -> int:
    less, greater = numbered_less(a, b), numbered_less(b, a)
    if less and not greater:
        return -1
    if greater and not less:
        return 1
    return 0


def sort_numbered(names: Iterable[str]) -> list[str]:
    """Return *names* sorted with :func:`numbered_less`."""
    return sorted(names, key=cmp_to_key(_compare))


class LineGraph(Block):
    """Plots each series in ``data`` as a line, newest point at the right.

    Values are percentages. ``labels`` holds text shown beside each series
    name; old points are trimmed once a series is far wider than the graph.
    """

    def __init__(self) -> None:
        super().__init__()
        self.data: dict[str, list[float]] = {}
        self.labels: dict[str, str] = {}
        self.horizontal_scale = 5
        self.line_colors: dict[str, int] = {}
        self.label_styles: dict[str, int] = {}
        self.default_line_color = 0
        self._series_list: list[str] = []

    def draw(self, buf: Buffer) -> None:
        """Draw the lines and the key onto *buf*."""
        super().draw(buf)
        canvas = Canvas()
        colors: dict[tuple[int, int], int] = {}
        if len(self._series_list) != len(self.data):
            self._series_list = sort_numbered(self.data)
        dx, dy = self.inner.dx, self.inner.dy

        # Reverse order keeps the first colour of the scheme on top.
        for name in reversed(self._series_list):
            series = self.data.get(name, [])
            color = self.line_colors.get(name)
            if color is None:
                color = self.default_line_color
                self.line_colors[name] = color
            last_x = last_y = -1
            for i in range(len(series) - 1, -1, -1):
                x = (dx + 1) * 2 - 1 - (len(series) - 1 - i) * self.horizontal_scale
                y = (dy + 1) * 4 - 1 - int((dy * 4 - 1) * (series[i] / 100))
                if x < 0:
                    if x > -self.horizontal_scale:
                        for p in line(last_x, last_y, x, y):
                            if p.x > 0:
                                canvas.set(p.x, p.y)
                                colors[(p.x // 2, _div(p.y, 4))] = color
                    if len(series) > 4 * dx and dx >= 1:
                        self.data[name] = series[dx - 1:]
                    break
                if last_y == -1:
                    canvas.set(x, y)
                    colors[(_div(x, 2), _div(y, 4))] = color
                else:
                    canvas.draw_line(last_x, last_y, x, y)
                    for p in line(last_x, last_y, x, y):
                        colors[(_div(p.x, 2), _div(p.y, 4))] = color
                last_x, last_y = x, y

            rows = canvas.rows(
                canvas.min_x(), canvas.min_y(), canvas.max_x(), canvas.max_y()
            )
            for row_index, text in enumerate(rows):
                for col, ch in enumerate(text):
                    if col == 0 or ch == _EMPTY_BRAILLE:
                        continue
                    buf.set_cell(
                        Cell(ch, Style(colors.get((col, row_index), 0))),
                        self.inner.min_x + col - 1,
                        self.inner.min_y + row_index - 1,
                    )

        max_wid = 0
        xoff = 0
        yoff = 0
        for i, name in enumerate(self._series_list):
            if yoff + i + 2 > dy:
                xoff += max_wid + 2
                yoff = -i
                max_wid = 0
            color = self.line_colors.get(name, self.default_line_color)
            modifier = self.label_styles.get(name, MODIFIER_CLEAR)
            text = name + " " + self.labels.get(name, "")
            max_wid = max(max_wid, len(text.encode("utf-8")))
            offset = 0
            for ch in text:
                # Spaces are left for the braille underneath.
                if ch != " ":
                    buf.set_cell(
                        Cell(ch, Style(color, COLOR_CLEAR, modifier)),
                        xoff + self.inner.min_x + 2 + offset,
                        yoff + self.inner.min_y + i + 1,
                    )
                offset += len(ch.encode("utf-8"))