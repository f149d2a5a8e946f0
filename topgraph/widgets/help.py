"""The key-binding help panel and the bottom status bar."""

from __future__ import annotations

import logging
import socket
from datetime import datetime
from typing import Callable

from ..text import string_width
from ..ui.block import THEME, Block, Buffer, trim_string

APP_NAME = "topgraph"

HELP_TEXT = """Quit: q or <C-c>

Process navigation:
  - k and <Up>: up
  - j and <Down>: down
  - <C-u>: half page up
  - <C-d>: half page down
  - <C-b>: full page up
  - <C-f>: full page down
  - gg and <Home>: jump to top
  - G and <End>: jump to bottom

Process actions:
  - <Tab>: toggle process grouping
  - dd: kill selected process or group of processes with SIGTERM
  - d3: kill selected process or group of processes with SIGQUIT
  - d9: kill selected process or group of processes with SIGKILL

Process sorting:
  - c: CPU
  - m: Mem
  - p: PID

Process filtering:
  - /: start editing filter
  - (while editing):
    - <Enter>: accept filter
    - <C-c> and <Escape>: clear filter

CPU and Mem graph scaling:
  - h: scale in
  - l: scale out

Network:
  - b: toggle between mbps and scaled bytes per second
?: toggles keybind help menu
"""

_log = logging.getLogger(__name__)


class HelpMenu(Block):
    """A centred panel listing the key bindings."""

    def __init__(self, text: str = HELP_TEXT) -> None:
        super().__init__()
        self.text = text

    def resize(self, term_width: int, term_height: int) -> None:
        """Size the panel to its text and centre it in the terminal."""
        text_width = 53
        lines = self.text.split("\n")
        for line in lines:
            width = string_width(line)
            if text_width < width:
                text_width = width + 2
        text_height = len(lines) - 1 + 2
        x = int((term_width - text_width) / 2)
        y = int((term_height - text_height) / 2)
        self.set_rect(x, y, text_width + x, text_height + y)

    def draw(self, buf: Buffer) -> None:
        """Draw the border and as many lines of text as fit."""
        super().draw(buf)
        inner = self.inner
        for offset, line in enumerate(self.text.split("\n")):
            y = inner.min_y + offset
            if y >= inner.max_y:
                break
            buf.set_string(trim_string(line, inner.dx), THEME.default, inner.min_x, y)


class StatusBar(Block):
    """A borderless bar with the host name, the time and the program name."""

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        hostname: Callable[[], str] = socket.gethostname,
    ) -> None:
        super().__init__()
        self.border = False
        self._clock = clock
        self._hostname = hostname

    def draw(self, buf: Buffer) -> None:
        super().draw(buf)
        try:
            host = self._hostname()
        except OSError as exc:
            _log.error("could not get hostname: %s", exc)
            return
        inner = self.inner
        y = inner.min_y + inner.dy // 2
        buf.set_string(host, THEME.default, inner.min_x, y)
        now = self._clock().strftime("%H:%M:%S")
        buf.set_string(now, THEME.default, inner.min_x + inner.dx // 2 - len(now) // 2, y)
        buf.set_string(APP_NAME, THEME.default, inner.max_x - len(APP_NAME) - 1, y)