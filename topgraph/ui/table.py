"""A scrollable table with an optional highlighted cursor row."""

from __future__ import annotations

import logging
from typing import Callable

from .block import (
    COLOR_CLEAR,
    MODIFIER_BOLD,
    MODIFIER_REVERSE,
    THEME,
    Block,
    Buffer,
    Style,
    trim_string,
)

_log = logging.getLogger(__name__)


def _half(n: int) -> int:
    return int(n / 2)


class Table(Block):
    """Rows of string columns under a header.

    ``unique_col`` identifies a row so the cursor can follow it when the
    data changes; ``col_resizer`` is called before each draw to set
    ``col_widths``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.header: list[str] = []
        self.rows: list[list[str]] = []
        self.col_widths: list[int] = []
        self.col_gap = 0
        self.pad_left = 0
        self.show_cursor = False
        self.cursor_color = 0
        self.show_location = False
        self.unique_col = 0
        self.selected_item = ""
        self.selected_row = 0
        self.top_row = 0
        self.col_resizer: Callable[[], None] = lambda: None

    def draw(self, buf: Buffer) -> None:
        """Draw the header and the visible rows."""
        super().draw(buf)
        if self.show_location:
            self._draw_location(buf)
        self.col_resizer()

        positions = []
        cur = 1 + self.pad_left
        for width in self.col_widths:
            positions.append(cur)
            cur += width + self.col_gap

        inner = self.inner
        for heading, width, pos in zip(self.header, self.col_widths, positions):
            if width == 0 or width > inner.dx - pos + 1:
                continue
            buf.set_string(
                heading,
                Style(THEME.default.fg, COLOR_CLEAR, MODIFIER_BOLD),
                inner.min_x + pos - 1,
                inner.min_y,
            )

        if self.top_row < 0:
            _log.error("table top row is negative: %d", self.top_row)
            return

        last = min(self.top_row + inner.dy - 1, len(self.rows))
        for row_num in range(self.top_row, last):
            row = self.rows[row_num]
            y = row_num + 2 - self.top_row
            style = Style(THEME.default.fg)
            if self.show_cursor and (
                (not self.selected_item and row_num == self.selected_row)
                or (self.selected_item and self.selected_item == row[self.unique_col])
            ):
                style = Style(self.cursor_color, style.bg, MODIFIER_REVERSE)
                if any(self.col_widths):
                    buf.set_string(
                        " " * inner.dx, style, inner.min_x, inner.min_y + y - 1
                    )
                self.selected_item = row[self.unique_col]
                self.selected_row = row_num
            for i, (width, pos) in enumerate(zip(self.col_widths, positions)):
                if width == 0 or width > inner.dx - pos + 1:
                    continue
                buf.set_string(
                    trim_string(row[i], width),
                    style,
                    inner.min_x + pos - 1,
                    inner.min_y + y - 1,
                )

    def _draw_location(self, buf: Buffer) -> None:
        total = len(self.rows)
        top = min(self.top_row + 1, total)
        bottom = min(self.top_row + self.inner.dy - 1, total)
        location = f" {top} - {bottom} of {total} "
        buf.set_string(
            location,
            self.title_style,
            self.rect.max_x - len(location) - 2,
            self.rect.min_y,
        )

    def _calc_pos(self) -> None:
        self.selected_item = ""
        if self.selected_row < 0:
            self.selected_row = 0
        if self.selected_row < self.top_row:
            self.top_row = self.selected_row
        if self.selected_row > len(self.rows) - 1:
            self.selected_row = len(self.rows) - 1
        page = self.inner.dy - 2
        if self.selected_row > self.top_row + page:
            self.top_row = self.selected_row - page

    def scroll_up(self) -> None:
        self.selected_row -= 1
        self._calc_pos()

    def scroll_down(self) -> None:
        self.selected_row += 1
        self._calc_pos()

    def scroll_top(self) -> None:
        self.selected_row = 0
        self._calc_pos()

    def scroll_bottom(self) -> None:
        self.selected_row = len(self.rows) - 1
        self._calc_pos()

    def scroll_half_page_up(self) -> None:
        self.selected_row -= _half(self.inner.dy - 2)
        self._calc_pos()

    def scroll_half_page_down(self) -> None:
        self.selected_row += _half(self.inner.dy - 2)
        self._calc_pos()

    def scroll_page_up(self) -> None:
        self.selected_row -= self.inner.dy - 2
        self._calc_pos()

    def scroll_page_down(self) -> None:
        self.selected_row += self.inner.dy - 2
        self._calc_pos()

    def handle_click(self, x: int, y: int) -> None:
        """Select the row under the screen point (x, y), if inside the table."""
        x -= self.rect.min_x
        y -= self.rect.min_y
        if 0 < x <= self.inner.dx and 0 < y <= self.inner.dy:
            self.selected_row = self.top_row + y - 2
            self._calc_pos()