"""Temperature sensor readout widget."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, MutableMapping

from .. import devices
from ..text import string_width
from ..ui.block import THEME, Block, Buffer, Style, trim_string
from ..units import celsius_to_fahrenheit
from . import metrics

_log = logging.getLogger(__name__)

TempSource = Callable[[MutableMapping[str, int]], None]


def _scale_char(scale: object) -> str:
    value = getattr(scale, "value", scale)
    if isinstance(value, int):
        value = chr(value)
    text = str(value).upper()
    if text not in ("C", "F"):
        raise ValueError(f"invalid temperature scale: {scale!r}")
    return text


class TempWidget(Block):
    """Lists sensors with their temperatures, coloured above a threshold."""

    def __init__(
        self,
        temp_scale: object = "C",
        filter: Iterable[str] | None = None,
        source: TempSource = devices.update_temps,
        update_interval: float = 5.0,
    ) -> None:
        super().__init__()
        self.update_interval = update_interval
        self.temp_scale = _scale_char(temp_scale)
        self.temp_threshold = 80
        self.temp_low_color = 0
        self.temp_high_color = 0
        self.title = " Temperatures "
        self._source = source
        wanted = list(filter or [])
        if not wanted:
            wanted = devices.devices(devices.TEMPERATURES, False)
        self.data: dict[str, int] = {name: 0 for name in wanted}
        if self.temp_scale == "F":
            self.temp_threshold = celsius_to_fahrenheit(self.temp_threshold)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.update()

    def enable_metric(self) -> None:
        """Export each sensor's temperature."""
        for name in list(self.data):
            metrics.new_gauge(
                metrics.make_name("temp", name),
                lambda n=name: float(self.data.get(n, 0)),
            )

    def draw(self, buf: Buffer) -> None:
        """Draw one sensor per row, sorted by name."""
        super().draw(buf)
        inner = self.inner
        for y, key in enumerate(sorted(self.data)):
            if y + 1 > inner.dy:
                break
            value = self.data[key]
            fg = self.temp_low_color if value < self.temp_threshold else self.temp_high_color
            buf.set_string(
                trim_string(key, inner.dx - 4), THEME.default, inner.min_x, inner.min_y + y
            )
            reading = f"{value:3d}°{self.temp_scale}"
            buf.set_string(
                reading,
                Style(fg),
                inner.max_x - (len(reading.encode("utf-8")) - 1),
                inner.min_y + y,
            )

    def update(self) -> None:
        """Refresh the readings, converting to Fahrenheit if asked."""
        with self.lock:
            self._source(self.data)
            if self.temp_scale == "F":
                for name, value in self.data.items():
                    self.data[name] = celsius_to_fahrenheit(value)

    def start(self) -> None:
        """Refresh every ``update_interval`` seconds in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()

        def loop() -> None:
            while not self._stop.wait(self.update_interval):
                try:
                    self.update()
                except Exception as exc:
                    _log.error("temperature update failed: %s", exc)

        self._thread = threading.Thread(target=loop, name="temp-update", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


__all_widths__ = string_width