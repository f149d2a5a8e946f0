"""NVIDIA GPU metrics read periodically from the ``nvidia-smi`` tool.

A background thread runs the tool and caches the results; the update
functions registered with the device registries copy from that cache.
"""

from __future__ import annotations

import csv
import io
import math
import re
import subprocess
import threading
from typing import Mapping, MutableMapping

from . import devices
from .devices import MemoryInfo

_QUERY = [
    "nvidia-smi",
    "--query-gpu=name,index,temperature.gpu,utilization.gpu,memory.total,memory.used",
    "--format=csv,noheader,nounits",
]
_MIB = 1048576
_INT = re.compile(r"[+-]?[0-9]+")
_DURATION_PART = re.compile(r"([0-9]*\.?[0-9]*)(ns|us|µs|μs|ms|s|m|h)")
_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def _atoi(text: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    return int(text)


def _parse_duration(text: str) -> float:
    """Parse a duration such as ``30s`` or ``1m30s`` into seconds."""
    error = ValueError(f'time: invalid duration "{text}"')
    rest = text
    sign = 1.0
    if rest and rest[0] in "+-":
        sign = -1.0 if rest[0] == "-" else 1.0
        rest = rest[1:]
    if rest == "0":
        return 0.0
    if not rest:
        raise error
    total = 0.0
    pos = 0
    while pos < len(rest):
        match = _DURATION_PART.match(rest, pos)
        if match is None or match.group(1) in ("", "."):
            raise error
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    return sign * total


class NvidiaMonitor:
    """Caches of GPU temperature, utilisation and memory, keyed ``name.index``."""

    def __init__(self) -> None:
        self.temps: dict[str, int] = {}
        self.mems: dict[str, MemoryInfo] = {}
        self.cpus: dict[str, int] = {}
        self.errors: dict[str, BaseException] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """Whether the background refresh thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def refresh(self) -> None:
        """Run ``nvidia-smi`` once and cache its output; failures are recorded."""
        try:
            result = subprocess.run(
                _QUERY, capture_output=True, text=True, check=True
            )
        except (OSError, subprocess.CalledProcessError) as exc:
            with self._lock:
                self.errors["nvidia"] = exc
            return
        self.ingest(result.stdout)

    def ingest(self, text: str) -> None:
        """Parse CSV output of the GPU query into the caches.

        Unparsable numbers are recorded per device and read as zero.
        """
        rows = [row for row in csv.reader(io.StringIO(text), skipinitialspace=True) if row]
        if rows and (
            len({len(row) for row in rows}) > 1 or len(rows[0]) < 6
        ):
            with self._lock:
                self.errors["nvidia"] = ValueError(
                    "wrong number of fields in nvidia-smi output"
                )
            return
        with self._lock:
            for row in rows:
                name = f"{row[0]}.{row[1]}"
                values = []
                for field in row[2:6]:
                    try:
                        values.append(_atoi(field))
                    except ValueError as exc:
                        self.errors[name] = exc
                        values.append(0)
                temperature, usage, total, used = values
                self.temps[name] = temperature
                self.cpus[name] = usage
                if total:
                    percent = used / total * 100.0
                else:
                    percent = math.nan if used == 0 else math.copysign(math.inf, used)
                self.mems[name] = MemoryInfo(_MIB * total, _MIB * used, percent)

    def update_temps(
        self, temps: MutableMapping[str, int]
    ) -> dict[str, BaseException]:
        """Copy cached temperatures into *temps*; return recorded errors."""
        with self._lock:
            temps.update(self.temps)
            return dict(self.errors)

    def update_mem(
        self, mems: MutableMapping[str, MemoryInfo]
    ) -> dict[str, BaseException]:
        """Copy cached memory use into *mems*; return recorded errors."""
        with self._lock:
            mems.update(self.mems)
            return dict(self.errors)

    def update_usage(
        self, cpus: MutableMapping[str, int], logical: bool
    ) -> dict[str, BaseException]:
        """Copy cached GPU utilisation into *cpus*; return recorded errors."""
        with self._lock:
            cpus.update(self.cpus)
            return dict(self.errors)

    def start(self, refresh: float) -> None:
        """Refresh every *refresh* seconds in a background thread.

        A non-positive period never refreshes.
        """
        if refresh <= 0 or self.running:
            return
        self._stop.clear()

        def loop() -> None:
            while not self._stop.wait(refresh):
                self.refresh()

        self._thread = threading.Thread(target=loop, name="nvidia-refresh", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background thread and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


def start_nvidia(variables: Mapping[str, str]) -> NvidiaMonitor | None:
    """Start GPU monitoring if the ``nvidia`` setting is ``true``.

    ``nvidia-refresh`` sets the refresh period as a duration (default 1s).
    """
    if variables.get("nvidia") != "true":
        return None
    try:
        subprocess.run(["nvidia-smi", "-L"], capture_output=True, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise RuntimeError(f"NVidia GPU error: {exc}") from exc
    monitor = NvidiaMonitor()
    devices.register_temp(monitor.update_temps)
    devices.register_mem(monitor.update_mem)
    devices.register_cpu(monitor.update_usage)
    refresh = 1.0
    if "nvidia-refresh" in variables:
        refresh = _parse_duration(variables["nvidia-refresh"])
    monitor.refresh()
    monitor.start(refresh)
    devices.register_shutdown(monitor.stop)
    return monitor