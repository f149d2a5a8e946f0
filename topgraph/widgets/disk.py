"""Disk partitions widget: use, free space and read/write rates."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

import psutil

from ..ui.table import Table
from ..units import convert_bytes
from . import metrics

_log = logging.getLogger(__name__)

PartitionSource = Callable[[], Iterable[Any]]
UsageSource = Callable[[str], Any]
IOSource = Callable[[str], Mapping[str, Any]]


def _default_partitions() -> Iterable[Any]:
    return psutil.disk_partitions(all=False)


def _default_io(device: str) -> Mapping[str, Any]:
    return psutil.disk_io_counters(perdisk=True) or {}


@dataclass
class Partition:
    """The state of one mounted partition."""

    device: str
    mount_point: str
    bytes_read: int = 0
    bytes_written: int = 0
    bytes_read_recently: str = ""
    bytes_written_recently: str = ""
    used_percent: int = 0
    free: str = ""


class DiskWidget(Table):
    """A table of mounted partitions, sorted by device name."""

    def __init__(
        self,
        partitions: PartitionSource = _default_partitions,
        usage: UsageSource = psutil.disk_usage,
        io_counters: IOSource = _default_io,
        update_interval: float = 1.0,
    ) -> None:
        super().__init__()
        self.update_interval = update_interval
        self.partitions: dict[str, Partition] = {}
        self._partitions_source = partitions
        self._usage = usage
        self._io = io_counters
        self.title = " Disk Usage "
        self.header = ["Disk", "Mount", "Used", "Free", "R/s", "W/s"]
        self.col_gap = 2
        self.col_resizer = self._resize_columns
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.update()

    def _resize_columns(self) -> None:
        half = int((self.inner.dx - 29) / 2)
        self.col_widths = [max(4, half), max(5, half), 4, 5, 5, 5]

    def enable_metric(self) -> None:
        """Export each partition's used fraction."""
        for key, part in self.partitions.items():
            metrics.new_gauge(
                metrics.make_name("disk", key.replace("/", ":")),
                lambda p=part: p.used_percent / 100.0,
            )

    def update(self) -> None:
        """Refresh the partition list, usage and rates, then rebuild the rows."""
        try:
            found = list(self._partitions_source())
        except Exception as exc:
            _log.error("failed to set up disk-partitions: %s", exc)
            return

        for p in found:
            if p.device.startswith("/dev/loop"):
                continue
            if p.mountpoint.startswith("/var/lib/docker/"):
                continue
            if p.device not in self.partitions:
                self.partitions[p.device] = Partition(p.device, p.mountpoint)

        present = {p.device for p in found}
        for device in [d for d in self.partitions if d not in present]:
            del self.partitions[device]

        for part in self.partitions.values():
            try:
                usage = self._usage(part.mount_point)
            except Exception as exc:
                _log.warning("failed to fetch partition-%s-usage: %s", part.mount_point, exc)
                continue
            part.used_percent = int(usage.percent + 0.5)
            free, free_unit = convert_bytes(usage.free)
            part.free = f"{int(free + 0.5):3d}{free_unit}"

            try:
                counters = self._io(part.device)
            except Exception as exc:
                _log.warning("failed to fetch partition-%s-rw: %s", part.device, exc)
                continue
            counter = counters.get(part.device.replace("/dev/", ""))
            read = counter.read_bytes if counter is not None else 0
            written = counter.write_bytes if counter is not None else 0
            if part.bytes_read != 0:
                read_f, read_unit = convert_bytes(read - part.bytes_read)
                write_f, write_unit = convert_bytes(written - part.bytes_written)
                part.bytes_read_recently = f"{int(read_f + 0.5)}{read_unit}"
                part.bytes_written_recently = f"{int(write_f + 0.5)}{write_unit}"
            else:
                part.bytes_read_recently = "0B"
                part.bytes_written_recently = "0B"
            part.bytes_read, part.bytes_written = read, written

        self.rows = [
            [
                part.device.replace("/dev/", "").replace("mapper/", ""),
                part.mount_point,
                f"{part.used_percent}%",
                part.free,
                part.bytes_read_recently,
                part.bytes_written_recently,
            ]
            for part in (self.partitions[k] for k in sorted(self.partitions))
        ]

    def start(self) -> None:
        """Refresh every ``update_interval`` seconds in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()

        def loop() -> None:
            while not self._stop.wait(self.update_interval):
                with self.lock:
                    self.update()

        self._thread = threading.Thread(target=loop, name="disk-update", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None