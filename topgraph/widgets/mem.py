"""Memory use widget: a line per kind of memory."""

from __future__ import annotations

import logging
import threading
from typing import Callable, MutableMapping

from .. import devices
from ..devices import MemoryInfo
from ..ui.linegraph import LineGraph
from ..units import convert_bytes
from . import metrics

_log = logging.getLogger(__name__)

MemSource = Callable[[MutableMapping[str, MemoryInfo]], None]


class MemWidget(LineGraph):
    """Graphs the percentage used of each memory source with a total."""

    def __init__(
        self,
        update_interval: float = 1.0,
        horizontal_scale: int = 7,
        source: MemSource = devices.update_mem,
    ) -> None:
        super().__init__()
        self.update_interval = update_interval
        self._source = source
        self.title = " Memory Usage "
        self.horizontal_scale = horizontal_scale
        self._mems: dict[str, MemoryInfo] = {}
        self._source(self._mems)
        for name, info in self._mems.items():
            if info.total > 0:
                self.data[name] = [0.0]
                self._render(name, info)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def enable_metric(self) -> None:
        """Export the latest percentage of each memory source."""
        mems: dict[str, MemoryInfo] = {}
        self._source(mems)
        for name in mems:
            def gauge(n: str = name) -> float:
                points = self.data.get(n)
                return points[-1] if points else 0.0

            metrics.new_gauge(metrics.make_name("memory", name), gauge)

    def scale(self, i: int) -> None:
        self.horizontal_scale = i

    def _render(self, name: str, info: MemoryInfo) -> None:
        self.data.setdefault(name, []).append(info.used_percent)
        total, total_unit = convert_bytes(info.total)
        used, used_unit = convert_bytes(info.used)
        self.labels[name] = (
            f"{info.used_percent:3.0f}% {used:5.1f}{used_unit}/{total:.0f}{total_unit}"
        )

    def update(self) -> None:
        """Read memory use and append it to the graph."""
        with self.lock:
            self._source(self._mems)
            for name, info in self._mems.items():
                if info.total > 0:
                    self._render(name, info)

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
                    _log.error("memory update failed: %s", exc)

        self._thread = threading.Thread(target=loop, name="mem-update", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None