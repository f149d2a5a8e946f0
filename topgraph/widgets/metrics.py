"""Named gauges and counters that can be exported in Prometheus text form."""

from __future__ import annotations

import threading
from typing import Callable, Protocol, TextIO, Union, runtime_checkable

from ..ui.block import Buffer

PREFIX = "topgraph"


@runtime_checkable
class Scalable(Protocol):
    """A drawable widget whose horizontal scale can be changed."""

    def draw(self, buf: Buffer) -> None:
        ...

    def scale(self, i: int) -> None:
        ...


class Counter:
    """A monotonically increasing integer metric."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._value = 0
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def add(self, n: int) -> None:
        """Increase the counter by *n*."""
        with self._lock:
            self._value += n


_Metric = Union[Callable[[], float], Counter]
_registry: dict[str, _Metric] = {}
_registry_lock = threading.Lock()


def _reset() -> None:
    with _registry_lock:
        _registry.clear()


def make_name(*args: object) -> str:
    """Join *args* into a metric name in the program's namespace."""
    return "_".join([PREFIX, *(str(a) for a in args)])


def _register(name: str, metric: _Metric) -> None:
    with _registry_lock:
        if name in _registry:
            raise ValueError(f"metric {name!r} is already registered")
        _registry[name] = metric


def new_gauge(name: str, fn: Callable[[], float]) -> None:
    """Register a gauge whose value is read from *fn* at export time."""
    _register(name, fn)


def new_counter(name: str) -> Counter:
    """Register and return a new counter."""
    counter = Counter(name)
    _register(name, counter)
    return counter


def _format(value: float) -> str:
    value = float(value)
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def write_prometheus(stream: TextIO) -> None:
    """Write every metric as ``name value`` lines, sorted by name."""
    with _registry_lock:
        items = sorted(_registry.items())
    for name, metric in items:
        if isinstance(metric, Counter):
            stream.write(f"{name} {metric.value}\n")
        else:
            stream.write(f"{name} {_format(metric())}\n")