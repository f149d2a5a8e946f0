"""Braille-dot canvas for drawing pixel graphics in a terminal."""

from __future__ import annotations

import math
from typing import NamedTuple

_PIXEL_MAP = (
    (0x1, 0x8),
    (0x2, 0x10),
    (0x4, 0x20),
    (0x40, 0x80),
)

BRAILLE_OFFSET = 0x2800


def _quo(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _rem(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * _quo(a, b)


def _pixel(y: int, x: int) -> int:
    cy = _rem(y, 4) if y >= 0 else 3 + _rem(y + 1, 4)
    cx = _rem(x, 2) if x >= 0 else 1 + _rem(x + 1, 2)
    return _PIXEL_MAP[cy][cx]


class Point(NamedTuple):
    """A dot position on the canvas."""

    x: int
    y: int


def line(x1: int, y1: int, x2: int, y2: int) -> list[Point]:
    """Return the dots of the straight line between two points."""
    xdiff = abs(x1 - x2)
    ydiff = abs(y2 - y1)
    xdir = 1 if x1 <= x2 else -1
    ydir = 1 if y1 <= y2 else -1
    r = max(xdiff, ydiff)
    points = []
    for i in range(r + 1):
        x, y = x1, y1
        if ydiff:
            y += _quo(i * ydiff, r * ydir)
        if xdiff:
            x += _quo(i * xdiff, r * xdir)
        points.append(Point(x, y))
    return points


class Canvas:
    """A sparse grid of braille characters, each holding 2x4 dots."""

    def __init__(self, line_ending: str = "\n") -> None:
        self.line_ending = line_ending
        self._chars: dict[int, dict[int, int]] = {}

    def _value(self, col: int, row: int) -> int:
        return self._chars.get(row, {}).get(col, 0)

    def max_y(self) -> int:
        return max([0, *self._chars]) * 4

    def min_y(self) -> int:
        return min([0, *self._chars]) * 4

    def max_x(self) -> int:
        return max([0, *(k for row in self._chars.values() for k in row)]) * 2

    def min_x(self) -> int:
        return min([0, *(k for row in self._chars.values() for k in row)]) * 2

    def clear(self) -> None:
        """Remove every dot."""
        self._chars = {}

    @staticmethod
    def _pos(x: int, y: int) -> tuple[int, int]:
        return _quo(x, 2), _quo(y, 4)

    def set(self, x: int, y: int) -> None:
        """Turn on the dot at (x, y)."""
        px, py = self._pos(x, y)
        row = self._chars.setdefault(py, {})
        row[px] = row.get(px, 0) | _pixel(y, x)

    def unset(self, x: int, y: int) -> None:
        """Turn off the dot at (x, y)."""
        px, py = self._pos(x, y)
        row = self._chars.setdefault(py, {})
        row[px] = row.get(px, 0) & ~_pixel(abs(y), abs(x))

    def toggle(self, x: int, y: int) -> None:
        """Flip the dot at (x, y)."""
        px, py = self._pos(x, y)
        if self._value(px, py) & _pixel(y, x):
            self.unset(x, y)
        else:
            self.set(x, y)

    def set_text(self, x: int, y: int, text: str) -> None:
        """Place *text* with its first character at dot position (x, y)."""
        col, row_index = _quo(x, 2), _quo(y, 4)
        row = self._chars.setdefault(row_index, {})
        offset = 0
        for ch in text:
            row[col + offset] = ord(ch) - BRAILLE_OFFSET
            offset += len(ch.encode("utf-8"))

    def get(self, x: int, y: int) -> bool:
        """Return whether the dot at (x, y) is on."""
        cy, cx = _rem(y, 4), _rem(x, 2)
        if cy < 0 or cx < 0:
            raise IndexError(f"dot position ({x}, {y}) out of range")
        dot = _PIXEL_MAP[cy][cx]
        return bool(self._value(_quo(x, 2), _quo(y, 4)) & dot)

    def get_screen_character(self, x: int, y: int) -> str:
        """Return the character at screen cell (x, y)."""
        return chr(self._value(x, y) + BRAILLE_OFFSET)

    def get_character(self, x: int, y: int) -> str:
        """Return the character covering the given dot position."""
        return self.get_screen_character(_quo(x, 4), _quo(y, 4))

    def rows(self, min_x: int, min_y: int, max_x: int, max_y: int) -> list[str]:
        """Return the text rows covering the given dot rectangle."""
        min_row, max_row = _quo(min_y, 4), _quo(max_y, 4)
        min_col, max_col = _quo(min_x, 2), _quo(max_x, 2)
        return [
            "".join(
                chr(self._value(col, row) + BRAILLE_OFFSET)
                for col in range(min_col, max_col + 1)
            )
            for row in range(min_row, max_row + 1)
        ]

    def frame(self, min_x: int, min_y: int, max_x: int, max_y: int) -> str:
        """Return the given rectangle as text, each row ended by line_ending."""
        return "".join(
            row + self.line_ending for row in self.rows(min_x, min_y, max_x, max_y)
        )

    def __str__(self) -> str:
        return self.frame(self.min_x(), self.min_y(), self.max_x(), self.max_y())

    def draw_line(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Turn on every dot of the line between two points."""
        for p in line(x1, y1, x2, y2):
            self.set(p.x, p.y)

    def draw_polygon(
        self, center_x: float, center_y: float, sides: float, radius: float
    ) -> None:
        """Draw a regular polygon around a centre point."""
        degree = 360 / sides
        reach = radius / 2 + 1
        for n in range(int(sides)):
            a = math.radians(n * degree)
            b = math.radians((n + 1) * degree)
            self.draw_line(
                int(center_x + math.cos(a) * reach),
                int(center_y + math.sin(a) * reach),
                int(center_x + math.cos(b) * reach),
                int(center_y + math.sin(b) * reach),
            )