"""Process list widget: grouping, sorting, filtering and killing processes."""

from __future__ import annotations

import logging
import re
import subprocess
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable

from .. import sensors
from ..ui.block import Buffer
from ..ui.entry import Entry
from ..ui.table import Table

DOWN_ARROW = "▼"

_log = logging.getLogger(__name__)
_INT = re.compile(r"[+-]?[0-9]+")


class ProcSortMethod(str, Enum):
    """Column the process list is sorted by."""

    CPU = "c"
    MEM = "m"
    PID = "p"


@dataclass
class Proc:
    """One process, or a group of processes sharing a command name.

    For a group, ``pid`` holds the number of processes.
    """

    pid: int
    command_name: str
    full_command: str
    cpu: float
    mem: float


def _parse_int(text: str) -> int:
    if not _INT.fullmatch(text):
        raise ValueError(f'parsing "{text}": invalid syntax')
    return int(text)


def _parse_float(text: str) -> float:
    if not text or "_" in text:
        raise ValueError(f'parsing "{text}": invalid syntax')
    return float(text)


def parse_ps_output(output: str) -> list[Proc]:
    """Parse fixed-width ``ps`` output; the header line is skipped.

    Unparsable numbers are logged and read as zero.
    """
    lines = output.removesuffix("\n").split("\n")[1:]
    procs = []
    for line in lines:
        try:
            pid = _parse_int(line[0:10].strip())
        except ValueError as exc:
            _log.warning("failed to convert PID: %s: %r", exc, line)
            pid = 0
        try:
            cpu = _parse_float(line[63:68].strip())
        except ValueError as exc:
            _log.warning("failed to convert CPU usage: %s: %r", exc, line)
            cpu = 0.0
        try:
            mem = _parse_float(line[69:74].strip())
        except ValueError as exc:
            _log.warning("failed to convert memory usage: %s: %r", exc, line)
            mem = 0.0
        procs.append(
            Proc(
                pid=pid,
                command_name=line[11:61].strip(),
                full_command=line[74:],
                cpu=cpu,
                mem=mem,
            )
        )
    return procs


def get_procs() -> list[Proc]:
    """Run ``ps`` and return the processes it lists."""
    try:
        result = subprocess.run(
            ["ps", "-axo", "pid:10,comm:50,pcpu:5,pmem:5,args"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as exc:
        raise RuntimeError(f"failed to execute 'ps' command: {exc}") from exc
    return parse_ps_output(result.stdout)


def group_procs(procs: list[Proc]) -> list[Proc]:
    """Merge processes by command name, summing CPU and memory.

    The ``pid`` of each result is the number of processes merged.
    """
    groups: dict[str, Proc] = {}
    for proc in procs:
        current = groups.get(proc.command_name)
        if current is None:
            groups[proc.command_name] = Proc(
                1, proc.command_name, "", proc.cpu, proc.mem
            )
        else:
            groups[proc.command_name] = Proc(
                current.pid + 1,
                current.command_name,
                "",
                current.cpu + proc.cpu,
                current.mem + proc.mem,
            )
    return list(groups.values())


class ProcWidget(Table):
    """Table of processes, grouped by command name by default.

    ``source`` returns the current processes; CPU use is divided by
    ``cpu_count`` so that it is relative to the whole machine.
    """

    def __init__(
        self,
        source: Callable[[], list[Proc]] = get_procs,
        cpu_count: int | None = None,
        update_interval: float = 1.0,
    ) -> None:
        self._entry: Entry | None = None
        super().__init__()
        if cpu_count is None:
            try:
                cpu_count = sensors.cpu_count()
            except Exception as exc:
                _log.error("failed to get CPU count: %s", exc)
                cpu_count = 0
        self.cpu_count = cpu_count
        self.update_interval = update_interval
        self.sort_method = ProcSortMethod.CPU
        self.filter = ""
        self.grouped_procs: list[Proc] = []
        self.ungrouped_procs: list[Proc] = []
        self.show_grouped_procs = True
        self._source = source
        self._entry = Entry(
            label=" Filter: ",
            style=self.title_style,
            update_callback=self._on_filter,
        )
        self.title = " Processes "
        self.show_cursor = True
        self.show_location = True
        self.col_gap = 3
        self.pad_left = 2
        self.col_resizer = self._resize_columns
        self.unique_col = 1 if self.show_grouped_procs else 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.update()

    @property
    def entry(self) -> Entry:
        assert self._entry is not None
        return self._entry

    def _resize_columns(self) -> None:
        self.col_widths = [5, max(self.inner.dx - 26, 10), 4, 4]

    def _on_filter(self, value: str) -> None:
        self.filter = value
        self.update()

    def enable_metric(self) -> None:
        """Processes export no metrics."""

    def set_editing_filter(self, editing: bool) -> None:
        self.entry.set_editing(editing)

    def handle_event(self, event: object) -> bool:
        """Pass a key event to the filter entry; return whether it was used."""
        return self.entry.handle_event(event)

    def set_rect(self, x1: int, y1: int, x2: int, y2: int) -> None:
        super().set_rect(x1, y1, x2, y2)
        if self._entry is not None:
            self._entry.set_rect(x1 + 2, y2 - 1, x2 - 2, y2)

    def draw(self, buf: Buffer) -> None:
        super().draw(buf)
        self.entry.draw(buf)

    def _filter_procs(self, procs: list[Proc]) -> list[Proc]:
        if not self.filter:
            return procs
        return [
            p
            for p in procs
            if self.filter in p.full_command or self.filter in str(p.pid)
        ]

    def update(self) -> None:
        """Fetch, filter, group and sort the processes, then rebuild the rows."""
        try:
            procs = self._source()
        except (OSError, RuntimeError, ValueError) as exc:
            _log.error("failed to retrieve processes: %s", exc)
            return
        if self.cpu_count > 0:
            procs = [replace(p, cpu=p.cpu / self.cpu_count) for p in procs]
        procs = self._filter_procs(procs)
        self.ungrouped_procs = procs
        self.grouped_procs = group_procs(procs)
        self._sort_procs()
        self._convert_procs_to_rows()

    def _current(self) -> list[Proc]:
        return self.grouped_procs if self.show_grouped_procs else self.ungrouped_procs

    def _sort_procs(self) -> None:
        self.header = ["Count", "Command", "CPU%", "Mem%"]
        if not self.show_grouped_procs:
            self.header[0] = "PID"
        procs = self._current()
        if self.sort_method is ProcSortMethod.CPU:
            procs.sort(key=lambda p: p.cpu, reverse=True)
            self.header[2] += DOWN_ARROW
        elif self.sort_method is ProcSortMethod.PID:
            procs.sort(key=lambda p: p.pid, reverse=self.show_grouped_procs)
            self.header[0] += DOWN_ARROW
        elif self.sort_method is ProcSortMethod.MEM:
            procs.sort(key=lambda p: p.mem, reverse=True)
            self.header[3] += DOWN_ARROW

    def _convert_procs_to_rows(self) -> None:
        self.rows = [
            [
                str(p.pid),
                p.command_name if self.show_grouped_procs else p.full_command,
                f"{p.cpu:.1f}".rjust(4),
                f"{p.mem:.1f}".rjust(4),
            ]
            for p in self._current()
        ]

    def change_proc_sort_method(self, method: ProcSortMethod | str) -> None:
        """Sort by *method* and move the cursor to the top."""
        method = ProcSortMethod(method)
        if self.sort_method is not method:
            self.sort_method = method
            self.scroll_top()
            self._sort_procs()
            self._convert_procs_to_rows()

    def toggle_showing_grouped_procs(self) -> None:
        """Switch between grouped and individual processes."""
        self.show_grouped_procs = not self.show_grouped_procs
        self.unique_col = 1 if self.show_grouped_procs else 0
        self.scroll_top()
        self._sort_procs()
        self._convert_procs_to_rows()

    def kill_proc(self, sig_name: str) -> None:
        """Signal the selected process, or every process of the selected group."""
        self.selected_item = ""
        if not 0 <= self.selected_row < len(self.rows):
            return
        command = "pkill" if self.unique_col == 1 else "kill"
        target = self.rows[self.selected_row][self.unique_col]
        try:
            subprocess.run([command, "--signal", sig_name, target], check=False)
        except OSError as exc:
            _log.error("failed to run %s: %s", command, exc)

    def start(self) -> None:
        """Refresh every ``update_interval`` seconds in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()

        def loop() -> None:
            while not self._stop.wait(self.update_interval):
                with self.lock:
                    self.update()

        self._thread = threading.Thread(target=loop, name="proc-update", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None