"""CPU load widget: a line per core and/or a smoothed average."""

from __future__ import annotations

import logging
import threading
from typing import Callable, MutableMapping

from .. import devices
from ..ui.block import MODIFIER_BOLD
from ..ui.linegraph import LineGraph
from . import metrics

AVRG = "AVRG"

_log = logging.getLogger(__name__)

CPUSource = Callable[[MutableMapping[str, int], bool], None]


class MovingAverage:
    """An exponentially weighted moving average over roughly *age* samples.

    The first non-zero sample is taken as the starting value.
    """

    def __init__(self, age: float = 30.0) -> None:
        self._decay = 2.0 / (age + 1.0)
        self._value = 0.0

    def add(self, value: float) -> None:
        """Fold *value* into the average."""
        if self._value == 0.0:
            self._value = float(value)
        else:
            self._value = value * self._decay + self._value * (1.0 - self._decay)

    def value(self) -> float:
        """Return the current average."""
        return self._value


class CPUWidget(LineGraph):
    """Graphs CPU load per core, as a moving average, or both.

    When neither view is requested, per-core lines are shown for up to
    eight cores and the average otherwise.
    """

    def __init__(
        self,
        update_interval: float = 1.0,
        horizontal_scale: int = 7,
        show_average_load: bool = False,
        show_per_cpu_load: bool = True,
        source: CPUSource | None = None,
    ) -> None:
        super().__init__()
        self.update_interval = update_interval
        if source is None:
            def source(cpus: MutableMapping[str, int], logical: bool) -> None:
                devices.update_cpu(cpus, self.update_interval, logical)
        self._source = source
        self.show_average_load = show_average_load
        self.show_per_cpu_load = show_per_cpu_load
        self.cpu_loads: dict[str, float] = {}
        self.average = MovingAverage()
        self.label_styles[AVRG] = MODIFIER_BOLD
        self.title = " CPU Usage "
        self.horizontal_scale = horizontal_scale

        initial: dict[str, int] = {}
        self._source(initial, True)
        self.cpu_count = len(initial)

        if not (self.show_average_load or self.show_per_cpu_load):
            if self.cpu_count <= 8:
                self.show_per_cpu_load = True
            else:
                self.show_average_load = True

        if self.show_average_load:
            self.data[AVRG] = [0.0]

        if self.show_per_cpu_load:
            cpus: dict[str, int] = {}
            self._source(cpus, True)
            for key, value in cpus.items():
                self.data[key] = [float(value)]

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.update()

    def enable_metric(self) -> None:
        """Export the average load, or the load of each core."""
        if self.show_average_load:
            metrics.new_gauge(
                metrics.make_name("cpu", " avg"),
                lambda: self.cpu_loads.get(AVRG, 0.0),
            )
            return
        cpus: dict[str, int] = {}
        self._source(cpus, self.show_per_cpu_load)
        for key, percent in cpus.items():
            self.cpu_loads[key] = float(percent)
            metrics.new_gauge(
                metrics.make_name("cpu", key),
                lambda k=key: self.cpu_loads.get(k, 0.0),
            )

    def scale(self, i: int) -> None:
        self.horizontal_scale = i

    def update(self) -> None:
        """Read the current load and append it to the graph."""
        cpus: dict[str, int] = {}
        self._source(cpus, True)
        with self.lock:
            total = 0
            for key, percent in cpus.items():
                total += percent
                if self.show_per_cpu_load:
                    self.data.setdefault(key, []).append(float(percent))
                    self.labels[key] = f"{percent:3d}%"
                    self.cpu_loads[key] = float(percent)
            if self.show_average_load and cpus:
                self.average.add(total / len(cpus))
                avg = self.average.value()
                self.data.setdefault(AVRG, []).append(avg)
                self.labels[AVRG] = f"{avg:3.0f}%"
                self.cpu_loads[AVRG] = avg

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
                    _log.error("cpu update failed: %s", exc)

        self._thread = threading.Thread(target=loop, name="cpu-update", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None