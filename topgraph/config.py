"""Program settings: defaults, the configuration file format and its writer."""

from __future__ import annotations

import io
import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, TextIO

from .colorschemes import Colorscheme, ColorschemeError, from_name
from .dirs import ConfigDir, FolderKind

CONFFILE = "topgraph.conf"
NET_INTERFACE_ALL = "all"
SECOND_NS = 1_000_000_000

_log = logging.getLogger(__name__)

_GRAPH_HORIZONTAL_SCALE = "graphhorizontalscale"
_HELP_VISIBLE = "helpvisible"
_COLORSCHEME = "colorscheme"
_UPDATE_INTERVAL = "updateinterval"
_AVERAGE_CPU = "averagecpu"
_PERCPU_LOAD = "percpuload"
_TEMP_SCALE = "tempscale"
_STATUSBAR = "statusbar"
_NET_INTERFACE = "netinterface"
_LAYOUT = "layout"
_MAX_LOG_SIZE = "maxlogsize"
_EXPORT = "metricsexportport"
_MBPS = "mbps"
_TEMPERATURES = "temperatures"
_NVIDIA = "nvidia"
_DEPRECATED = ("configdir", "logdir", "logfile")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_INT = re.compile(r"[+-]?[0-9]+")


class TempScale(str, Enum):
    """Unit in which temperatures are shown."""

    CELSIUS = "C"
    FAHRENHEIT = "F"


class ConfigError(ValueError):
    """The configuration could not be read or written."""


def _parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f'parsing "{value}": invalid syntax')


def _parse_int(value: str) -> int:
    if not _INT.fullmatch(value):
        raise ValueError(f'parsing "{value}": invalid syntax')
    return int(value)


def _local_config_dir() -> ConfigDir:
    return ConfigDir("topgraph", local_path=Path.cwd())


@dataclass
class Config:
    """Runtime settings.

    ``update_interval`` and ``nvidia_refresh`` are durations in nanoseconds.
    When ``config_file`` is None the configuration folders are searched for
    the default file; an empty string means no file.
    """

    config_dir: ConfigDir = field(default_factory=_local_config_dir)
    graph_horizontal_scale: int = 7
    help_visible: bool = False
    colorscheme: Colorscheme | None = None
    update_interval: int = SECOND_NS
    average_load: bool = False
    percpu_load: bool = True
    statusbar: bool = False
    temp_scale: TempScale = TempScale.CELSIUS
    net_interface: str = NET_INTERFACE_ALL
    layout: str = "default"
    max_log_size: int = 5_000_000
    export_port: str = ""
    mbps: bool = False
    temps: list[str] = field(default_factory=list)
    test: bool = False
    extension_vars: dict[str, str] = field(default_factory=dict)
    config_file: str | None = None
    nvidia: bool = False
    nvidia_refresh: int = 0

    def __post_init__(self) -> None:
        if self.colorscheme is None:
            self.colorscheme = from_name(self.config_dir, "default")
        if self.config_file is None:
            folder = self.config_dir.find_folder_containing(CONFFILE)
            self.config_file = str(folder / CONFFILE) if folder is not None else ""

    def load(self) -> None:
        """Read settings from ``config_file``, if there is one."""
        if not self.config_file:
            return
        if not os.path.exists(self.config_file):
            folder = self.config_dir.find_folder_containing(self.config_file)
            if folder is None:
                return
            self.config_file = str(folder / self.config_file)
        try:
            text = Path(self.config_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"failed to read {self.config_file}: {exc}") from exc
        self.load_from(io.StringIO(text))

    def load_from(self, stream: TextIO | str) -> None:
        """Apply ``key=value`` lines from *stream*; ``#`` starts a comment line."""
        lines: Iterable[str] = (
            stream.splitlines() if isinstance(stream, str) else stream
        )
        for line_no, raw in enumerate(lines, start=1):
            text = raw.strip()
            if text.startswith("#"):
                continue
            parts = text.split("=")
            if len(parts) != 2:
                raise ConfigError(f"invalid config syntax: {text!r}")
            key, value = parts[0].lower(), parts[1]
            self._apply(key, value, line_no)

    def _line_error(self, line_no: int, exc: Exception) -> ConfigError:
        return ConfigError(f"error on line {line_no}: {exc}")

    def _bool(self, value: str, line_no: int) -> bool:
        try:
            return _parse_bool(value)
        except ValueError as exc:
            raise self._line_error(line_no, exc) from exc

    def _int(self, value: str, line_no: int) -> int:
        try:
            return _parse_int(value)
        except ValueError as exc:
            raise self._line_error(line_no, exc) from exc

    def _apply(self, key: str, value: str, line_no: int) -> None:
        match key:
            case k if k in _DEPRECATED:
                _log.warning(
                    "line %d: option %s=%s is deprecated and ignored",
                    line_no,
                    key,
                    value,
                )
            case "graphhorizontalscale":
                try:
                    self.graph_horizontal_scale = _parse_int(value)
                except ValueError as exc:
                    raise ConfigError(str(exc)) from exc
            case "helpvisible":
                self.help_visible = self._bool(value, line_no)
            case "colorscheme":
                try:
                    self.colorscheme = from_name(self.config_dir, value)
                except ColorschemeError as exc:
                    raise self._line_error(line_no, exc) from exc
            case "updateinterval":
                self.update_interval = self._int(value, line_no)
            case "averagecpu":
                self.average_load = self._bool(value, line_no)
            case "percpuload":
                self.percpu_load = self._bool(value, line_no)
            case "tempscale":
                if value in ("C", "F"):
                    self.temp_scale = TempScale(value)
                else:
                    self.temp_scale = TempScale.CELSIUS
                    raise ConfigError(
                        f"invalid tempscale {value!r}; must be C or F"
                    )
            case "statusbar":
                self.statusbar = self._bool(value, line_no)
            case "netinterface":
                self.net_interface = value
            case "layout":
                self.layout = value
            case "maxlogsize":
                self.max_log_size = self._int(value, line_no)
            case "metricsexportport":
                self.export_port = value
            case "mbps":
                self.mbps = True
            case "temperatures":
                self.temps = value.split(",")
            case "nvidia":
                self.nvidia = self._bool(value, line_no)
            case _:
                self.extension_vars[key] = value

    def marshal(self) -> str:
        """Return the settings in configuration-file form."""
        name = self.colorscheme.name if self.colorscheme else ""

        def flag(value: bool) -> str:
            return "true" if value else "false"

        out = [
            "# Scale graphs to this level; 7 is the default, 2 is zoomed out.",
            f"{_GRAPH_HORIZONTAL_SCALE}={self.graph_horizontal_scale}",
            "# If true, start the UI with the help visible",
            f"{_HELP_VISIBLE}={flag(self.help_visible)}",
            "# The color scheme to use.  See `--list colorschemes`",
            f"{_COLORSCHEME}={name}",
            "# How frequently to update the UI, in nanoseconds",
            f"{_UPDATE_INTERVAL}={self.update_interval}",
            "# If true, show the average CPU load",
            f"{_AVERAGE_CPU}={flag(self.average_load)}",
            "# If true, show load per CPU",
            f"{_PERCPU_LOAD}={flag(self.percpu_load)}",
            "# Temperature units. C for Celsius, F for Fahrenheit",
            f"{_TEMP_SCALE}={TempScale(self.temp_scale).value}",
            "# If true, display a status bar",
            f"{_STATUSBAR}={flag(self.statusbar)}",
            "# The network interface to monitor",
            f"{_NET_INTERFACE}={self.net_interface}",
            "# A layout name. See `--list layouts`",
            f"{_LAYOUT}={self.layout}",
            "# The maximum log file size, in bytes",
            f"{_MAX_LOG_SIZE}={self.max_log_size}",
            "# If set, export data as Promethius metrics on the interface:port.",
            "# E.g., `:8080` (colon is required, interface is not)",
            ("" if self.export_port else "#") + f"{_EXPORT}={self.export_port}",
            "# Display network IO in mpbs if true",
            f"{_MBPS}={flag(self.mbps)}",
            "# A list of enabled temp sensors.  See `--list devices`",
            ("" if self.temps else "#") + f"{_TEMPERATURES}={','.join(self.temps)}",
            "# Enable NVidia GPU metrics.",
            f"{_NVIDIA}={flag(self.nvidia)}",
            "# To configure the NVidia refresh rate, set a duration:",
            "#nvidiarefresh=30s",
        ]
        return "\n".join(out) + "\n"

    def write(self) -> str:
        """Write the settings to ``config_file`` or the user folder.

        Returns the path written.
        """
        if not self.config_file:
            folders = self.config_dir.query_folders(FolderKind.GLOBAL)
            if not folders:
                folders = self.config_dir.query_folders(FolderKind.LOCAL)
                if not folders:
                    raise ConfigError("error locating config folders")
            directory = folders[0]
            directory.mkdir(parents=True, exist_ok=True)
            filename = CONFFILE
        else:
            directory = Path(self.config_file).parent
            filename = Path(self.config_file).name
        path = directory / filename
        path.write_text(self.marshal(), encoding="utf-8")
        return str(path)