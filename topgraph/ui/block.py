"""Drawing primitives: styles, cells, a cell buffer, bordered blocks and gauges."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..text import string_width

COLOR_CLEAR = -1
MODIFIER_CLEAR = 0
MODIFIER_BOLD = 1 << 9
MODIFIER_UNDERLINE = 1 << 10
MODIFIER_REVERSE = 1 << 11

ELLIPSIS = "…"
HORIZONTAL_LINE = "─"
VERTICAL_LINE = "│"
TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"


@dataclass(frozen=True)
class Style:
    """Foreground colour, background colour and text modifier of a cell."""

    fg: int = COLOR_CLEAR
    bg: int = COLOR_CLEAR
    modifier: int = MODIFIER_CLEAR


@dataclass(frozen=True)
class Cell:
    """One character position on the screen."""

    char: str = " "
    style: Style = field(default_factory=Style)


@dataclass(frozen=True)
class Rect:
    """A half-open rectangle; the corners are put in order on creation."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def __post_init__(self) -> None:
        if self.min_x > self.max_x:
            lo, hi = self.max_x, self.min_x
            object.__setattr__(self, "min_x", lo)
            object.__setattr__(self, "max_x", hi)
        if self.min_y > self.max_y:
            lo, hi = self.max_y, self.min_y
            object.__setattr__(self, "min_y", lo)
            object.__setattr__(self, "max_y", hi)

    @property
    def dx(self) -> int:
        return self.max_x - self.min_x

    @property
    def dy(self) -> int:
        return self.max_y - self.min_y

    def contains(self, x: int, y: int) -> bool:
        """Return whether the point lies inside the rectangle."""
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y


@dataclass
class Theme:
    """Styles that newly created blocks and widgets start from."""

    default: Style = Style()
    block_title: Style = Style()
    block_border: Style = Style()


THEME = Theme()


def trim_string(s: str, w: int) -> str:
    """Shorten *s* to at most *w* cells, ending it with an ellipsis if cut."""
    if w <= 0:
        return ""
    if string_width(s) <= w:
        return s
    budget = w - string_width(ELLIPSIS)
    width = 0
    kept = []
    for ch in s:
        width += string_width(ch)
        if width > budget:
            break
        kept.append(ch)
    return "".join(kept) + ELLIPSIS


class Buffer:
    """Cells drawn onto a rectangular area; cells outside it are dropped."""

    def __init__(self, area: Rect) -> None:
        self.area = area
        self.cells: dict[tuple[int, int], Cell] = {}

    def set_cell(self, cell: Cell, x: int, y: int) -> None:
        """Place *cell* at (x, y) if that point is inside the area."""
        if self.area.contains(x, y):
            self.cells[(x, y)] = cell

    def get_cell(self, x: int, y: int) -> Cell:
        """Return the cell at (x, y), blank if nothing was drawn there."""
        return self.cells.get((x, y), Cell())

    def set_string(self, text: str, style: Style, x: int, y: int) -> None:
        """Draw *text* starting at (x, y), advancing by each character's width."""
        offset = 0
        for ch in text:
            self.set_cell(Cell(ch, style), x + offset, y)
            offset += string_width(ch)

    def fill(self, cell: Cell, area: Rect) -> None:
        """Set every point of *area* to *cell*."""
        for y in range(area.min_y, area.max_y):
            for x in range(area.min_x, area.max_x):
                self.set_cell(cell, x, y)

    def line(self, y: int) -> str:
        """Return the characters of row *y* across the whole area."""
        return "".join(
            self.get_cell(x, y).char for x in range(self.area.min_x, self.area.max_x)
        )


class Block:
    """A rectangle with an optional border and a title on its top edge."""

    def __init__(self) -> None:
        self.border = True
        self.border_style = THEME.block_border
        self.title = ""
        self.title_style = THEME.block_title
        self.padding_left = 0
        self.padding_top = 0
        self.padding_right = 0
        self.padding_bottom = 0
        self.lock = threading.RLock()
        self.rect = Rect(0, 0, 0, 0)
        self.inner = Rect(0, 0, 0, 0)
        self.set_rect(0, 0, 0, 0)

    def set_rect(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Move the block; the inner area sits one cell inside the edges."""
        self.rect = Rect(x1, y1, x2, y2)
        self.inner = Rect(
            self.rect.min_x + 1 + self.padding_left,
            self.rect.min_y + 1 + self.padding_top,
            self.rect.max_x - 1 - self.padding_right,
            self.rect.max_y - 1 - self.padding_bottom,
        )

    def _draw_border(self, buf: Buffer) -> None:
        r = self.rect
        horizontal = Cell(HORIZONTAL_LINE, self.border_style)
        vertical = Cell(VERTICAL_LINE, self.border_style)
        buf.fill(horizontal, Rect(r.min_x, r.min_y, r.max_x, r.min_y + 1))
        buf.fill(horizontal, Rect(r.min_x, r.max_y - 1, r.max_x, r.max_y))
        buf.fill(vertical, Rect(r.min_x, r.min_y, r.min_x + 1, r.max_y))
        buf.fill(vertical, Rect(r.max_x - 1, r.min_y, r.max_x, r.max_y))
        buf.set_cell(Cell(TOP_LEFT, self.border_style), r.min_x, r.min_y)
        buf.set_cell(Cell(TOP_RIGHT, self.border_style), r.max_x - 1, r.min_y)
        buf.set_cell(Cell(BOTTOM_LEFT, self.border_style), r.min_x, r.max_y - 1)
        buf.set_cell(Cell(BOTTOM_RIGHT, self.border_style), r.max_x - 1, r.max_y - 1)

    def draw(self, buf: Buffer) -> None:
        """Draw the border and title."""
        if self.border:
            self._draw_border(buf)
        buf.set_string(self.title, self.title_style, self.rect.min_x + 2, self.rect.min_y)


class Gauge(Block):
    """A horizontal bar filled to ``percent`` with a centred label."""

    def __init__(self) -> None:
        super().__init__()
        self.percent = 0
        self.bar_color = 7
        self.label = ""
        self.label_style = Style(7)

    def draw(self, buf: Buffer) -> None:
        """Draw the bar and label, then shrink the rectangle to the inner size."""
        super().draw(buf)
        inner = self.inner
        label = self.label or f"{self.percent}%"
        bar_width = int(self.percent / 100 * inner.dx)
        buf.fill(
            Cell(" ", Style(COLOR_CLEAR, self.bar_color)),
            Rect(inner.min_x, inner.min_y, inner.min_x + bar_width, inner.max_y),
        )
        label_x = inner.min_x + inner.dx // 2 - int(len(label.encode("utf-8")) / 2)
        label_y = inner.min_y + int((inner.dy - 1) / 2)
        if label_y < inner.max_y:
            offset = 0
            for ch in label:
                style = self.label_style
                if label_x + offset + 1 <= inner.min_x + bar_width:
                    style = Style(self.bar_color, COLOR_CLEAR, MODIFIER_REVERSE)
                buf.set_cell(Cell(ch, style), label_x + offset, label_y)
                offset += len(ch.encode("utf-8"))
        self.set_rect(self.rect.min_x, self.rect.min_y, inner.dx, inner.dy)