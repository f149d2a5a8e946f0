"""A single-line text entry field."""

from __future__ import annotations

from typing import Callable

from ..text import string_width, truncate_front
from .block import MODIFIER_BOLD, MODIFIER_CLEAR, Block, Buffer, Style

ELLIPSIS = "…"
CURSOR = " "


class Entry(Block):
    """Editable text with a label; ``update_callback`` sees every change.

    Events are key identifiers such as ``"a"`` or ``"<Enter>"``, or objects
    carrying one in an ``id`` attribute.
    """

    def __init__(
        self,
        label: str = "",
        value: str = "",
        style: Style | None = None,
        show_when_empty: bool = False,
        update_callback: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__()
        self.label = label
        self.value = value
        self.style = style if style is not None else Style()
        self.show_when_empty = show_when_empty
        self.update_callback = update_callback
        self._editing = False

    @property
    def editing(self) -> bool:
        return self._editing

    def set_editing(self, editing: bool) -> None:
        self._editing = editing

    def _update(self) -> None:
        if self.update_callback is not None:
            self.update_callback(self.value)

    def handle_event(self, event: object) -> bool:
        """Apply a key event while editing; return whether it was used."""
        if not self._editing:
            return False
        key = getattr(event, "id", event)
        if not isinstance(key, str):
            return False
        if len(key) == 1:
            self.value += key
            self._update()
            return True
        if key in ("<C-c>", "<Escape>"):
            self.value = ""
            self._editing = False
            self._update()
        elif key == "<Enter>":
            self._editing = False
        elif key == "<Backspace>":
            if self.value:
                self.value = self.value[:-1]
                self._update()
        elif key == "<Space>":
            self.value += " "
            self._update()
        else:
            return False
        return True

    def draw(self, buf: Buffer) -> None:
        """Draw the label, the value cut from the front to fit, and a cursor."""
        if not self.value and not self._editing and not self.show_when_empty:
            return
        style = self.style
        label = self.label
        if self._editing:
            label += "["
            style = Style(style.fg, style.bg, MODIFIER_BOLD)
        cursor_style = Style(style.bg, style.fg, MODIFIER_CLEAR)

        x, y = self.rect.min_x, self.rect.min_y
        buf.set_string(label, style, x, y)
        x += string_width(label)

        tail = "] " if self._editing else " "
        max_len = self.rect.max_x - x - string_width(tail)
        if self._editing:
            max_len -= 1
        value = truncate_front(self.value, max_len, ELLIPSIS)
        buf.set_string(value, self.style, x, y)
        x += string_width(value)

        if self._editing:
            buf.set_string(CURSOR, cursor_style, x, y)
            x += string_width(CURSOR)
            remaining = max_len - string_width(value)
            if remaining > 0:
                buf.set_string(" " * remaining, self.title_style, x, y)
                x += remaining
        buf.set_string(tail, style, x, y)