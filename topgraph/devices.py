"""Registries through which device back ends feed data to the widgets.

Back ends register update functions for CPU load, memory use and
temperatures. An update function fills the mapping it is given and returns
either None or a mapping from a source name to the exception met while
reading it; those exceptions are logged and otherwise ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, MutableMapping, Optional

TEMPERATURES = "Temperatures"
DOMAINS = [TEMPERATURES]

_log = logging.getLogger(__name__)

ErrorMap = Optional[Mapping[str, BaseException]]
CPUUpdater = Callable[[MutableMapping[str, int], bool], ErrorMap]
MemUpdater = Callable[[MutableMapping[str, "MemoryInfo"]], ErrorMap]
TempUpdater = Callable[[MutableMapping[str, int]], ErrorMap]


@dataclass(frozen=True)
class MemoryInfo:
    """Size and use of one kind of memory, in bytes."""

    total: int
    used: int
    used_percent: float


_shutdown_funcs: list[Callable[[], None]] = []
_startup_funcs: list[Callable[[Mapping[str, str]], None]] = []
_devices: dict[str, list[str]] = {}
_defaults: dict[str, list[str]] = {}
_cpu_funcs: list[CPUUpdater] = []
_mem_funcs: list[MemUpdater] = []
_temp_funcs: list[TempUpdater] = []


def _reset() -> None:
    for registry in (
        _shutdown_funcs,
        _startup_funcs,
        _cpu_funcs,
        _mem_funcs,
        _temp_funcs,
    ):
        registry.clear()
    _devices.clear()
    _defaults.clear()


def register_shutdown(f: Callable[[], None]) -> None:
    """Register *f* to release resources when the program exits cleanly."""
    _shutdown_funcs.append(f)


def register_startup(f: Callable[[Mapping[str, str]], None]) -> None:
    """Register *f* to run once the configuration has been read."""
    _startup_funcs.append(f)


def startup(variables: Mapping[str, str]) -> list[Exception]:
    """Run every startup function with the extension settings.

    Returns the exceptions raised; a failing function does not stop the rest.
    """
    errors: list[Exception] = []
    for f in list(_startup_funcs):
        try:
            f(variables)
        except Exception as exc:  # each back end may fail in its own way
            errors.append(exc)
    return errors


def shutdown() -> None:
    """Run every shutdown function, logging any failure."""
    for f in list(_shutdown_funcs):
        try:
            f()
        except Exception as exc:
            _log.error("%s", exc)


def register_device_list(
    domain: str,
    all_devices: Callable[[], list[str]],
    defaults: Callable[[], list[str]],
) -> None:
    """Add the devices reported by *all_devices* and *defaults* to *domain*."""
    _devices.setdefault(domain, []).extend(all_devices())
    _defaults.setdefault(domain, []).extend(defaults())


def devices(domain: str, all_devices: bool) -> list[str]:
    """Return every device of *domain*, or only its default ones."""
    source = _devices if all_devices else _defaults
    return list(source.get(domain, []))


def _log_errors(errors: ErrorMap, template: str) -> None:
    if errors:
        for key, exc in errors.items():
            _log.warning(template, key, exc)


def register_cpu(f: CPUUpdater) -> None:
    """Register a CPU load source."""
    _cpu_funcs.append(f)


def update_cpu(
    cpus: MutableMapping[str, int], interval: float, logical: bool
) -> None:
    """Fill *cpus* with load percentages from every CPU source.

    *interval* is accepted for callers that pass their refresh period.
    """
    for f in list(_cpu_funcs):
        _log_errors(f(cpus, logical), "%s: %s")


def register_mem(f: MemUpdater) -> None:
    """Register a memory source."""
    _mem_funcs.append(f)


def update_mem(mems: MutableMapping[str, MemoryInfo]) -> None:
    """Fill *mems* from every memory source."""
    for f in list(_mem_funcs):
        _log_errors(f(mems), "%s: %s")


def register_temp(f: TempUpdater) -> None:
    """Register a temperature source."""
    _temp_funcs.append(f)


def update_temps(temps: MutableMapping[str, int]) -> None:
    """Update the sensors named in *temps* from every temperature source."""
    for f in list(_temp_funcs):
        _log_errors(f(temps), "failed to fetch temp from %s: %s")