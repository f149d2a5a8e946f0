"""Local CPU, memory and temperature sources backed by psutil."""

from __future__ import annotations

import logging
from typing import MutableMapping

import psutil

from . import devices, nvidia
from .devices import MemoryInfo

_log = logging.getLogger(__name__)

# Sensor key -> display label, filled by temperature_sensors().
_sensor_map: dict[str, str] = {}


def cpu_count() -> int:
    """Return the number of physical CPU cores."""
    physical = psutil.cpu_count(logical=False)
    if physical:
        return physical
    logical = psutil.cpu_count(logical=True)
    if not logical:
        raise RuntimeError("unable to determine the number of CPUs")
    return logical // 2 if logical > 1 else logical


def local_cpu_percent(
    cpus: MutableMapping[str, int], logical: bool
) -> dict[str, BaseException] | None:
    """Store the load of each CPU (or of all together) in *cpus*."""
    try:
        count = cpu_count()
    except Exception:
        return None
    template = "CPU{:02d}" if count > 10 else "CPU{}"
    try:
        values = psutil.cpu_percent(interval=None, percpu=logical)
    except Exception as exc:
        return {"psutil": exc}
    if not logical:
        values = [values]
    for index, value in enumerate(values):
        cpus[template.format(index)] = int(min(value, 100))
    return None


def main_memory(
    mems: MutableMapping[str, MemoryInfo]
) -> dict[str, BaseException] | None:
    """Store main memory use under ``Main``."""
    try:
        memory = psutil.virtual_memory()
    except Exception as exc:
        return {"Main": exc}
    mems["Main"] = MemoryInfo(memory.total, memory.used, memory.percent)
    return None


def swap_memory(
    mems: MutableMapping[str, MemoryInfo]
) -> dict[str, BaseException] | None:
    """Store swap use under ``Swap``."""
    try:
        memory = psutil.swap_memory()
    except Exception as exc:
        return {"Swap": exc}
    mems["Swap"] = MemoryInfo(memory.total, memory.used, memory.percent)
    return None


def sensor_label(key: str) -> str:
    """Return the display label of a sensor key."""
    label = key.removesuffix("_input")
    return label.removesuffix("_thermal")


def _readings() -> list[tuple[str, float]]:
    reader = getattr(psutil, "sensors_temperatures", None)
    if reader is None:
        return []
    readings = []
    for name, entries in reader().items():
        for index, entry in enumerate(entries):
            label = "".join((entry.label or "").lower().split())
            if not label and len(entries) > 1:
                label = str(index)
            key = f"{name}_{label}_input" if label else f"{name}_input"
            readings.append((key, entry.current))
    return readings


def temperature_sensors() -> list[str]:
    """Return the labels of every temperature sensor present."""
    try:
        readings = _readings()
    except Exception as exc:
        _log.warning("temperature sensors unavailable: %s", exc)
        return []
    if not readings:
        _log.info("no temperature sensors returned")
    labels = []
    for key, _ in readings:
        label = sensor_label(key)
        _sensor_map[key] = label
        labels.append(label)
    return labels


def default_sensors() -> list[str]:
    """Return the labels of the sensors that report live input readings."""
    return [label for key, label in _sensor_map.items() if key != label]


def read_temperatures(
    temps: MutableMapping[str, int]
) -> dict[str, BaseException] | None:
    """Update the sensors already named in *temps* with current readings."""
    try:
        readings = _readings()
    except Exception as exc:
        return {"psutil host": exc}
    for key, value in readings:
        label = _sensor_map.get(key, "")
        if label in temps:
            temps[label] = int(value)
    return None


def install() -> None:
    """Register the local sources and the GPU startup hook."""
    devices.register_cpu(local_cpu_percent)
    devices.register_mem(main_memory)
    devices.register_mem(swap_memory)
    temperature_sensors()
    devices.register_temp(read_temperatures)
    devices.register_device_list(
        devices.TEMPERATURES, temperature_sensors, default_sensors
    )
    devices.register_startup(nvidia.start_nvidia)