"""Network throughput widget with receive and transmit sparklines."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Iterable, Mapping

import psutil

from ..ui.sparkline import Sparkline, SparklineGroup
from ..units import convert_bytes
from . import metrics

NET_INTERFACE_ALL = "all"
NET_INTERFACE_VPN = "tun0"

_log = logging.getLogger(__name__)

CountersSource = Callable[[], Mapping[str, Any]]


def _default_source() -> Mapping[str, Any]:
    return psutil.net_io_counters(pernic=True)


def sum_interfaces(counters: Mapping[str, Any], wanted: Iterable[str]) -> tuple[int, int]:
    """Total received and sent bytes over the selected interfaces.

    *wanted* lists interface names; a leading ``!`` excludes one. Naming any
    interface to include turns off ``all``. The VPN interface is excluded
    unless named.
    """
    selection = {NET_INTERFACE_ALL: True, NET_INTERFACE_VPN: False}
    for iface in wanted:
        if iface.startswith("!"):
            selection[iface[1:]] = False
        else:
            selection.pop(NET_INTERFACE_ALL, None)
            selection[iface] = True
    recv = sent = 0
    for name, counter in counters.items():
        if name in selection:
            if not selection[name]:
                continue
        elif not selection.get(NET_INTERFACE_ALL, False):
            continue
        recv += counter.bytes_recv
        sent += counter.bytes_sent
    return recv, sent


class NetWidget(SparklineGroup):
    """Shows total and recent network traffic for the selected interfaces."""

    def __init__(
        self,
        net_interface: str = NET_INTERFACE_ALL,
        source: CountersSource = _default_source,
        update_interval: float = 1.0,
    ) -> None:
        super().__init__(Sparkline(), Sparkline())
        self.update_interval = update_interval
        self.net_interface = net_interface.split(",")
        self.total_bytes_recv = 0
        self.total_bytes_sent = 0
        self.mbps = False
        self.recv_metric: metrics.Counter | None = None
        self.sent_metric: metrics.Counter | None = None
        self._source = source
        self.title = " Network Usage "
        if net_interface != NET_INTERFACE_ALL:
            self.title = f" Network Usage: {net_interface} "
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.update()

    def enable_metric(self) -> None:
        """Export received and sent byte counters."""
        self.recv_metric = metrics.new_counter(metrics.make_name("net", "recv"))
        self.sent_metric = metrics.new_counter(metrics.make_name("net", "sent"))

    def update(self) -> None:
        """Read the counters, append recent traffic and refresh the titles."""
        try:
            counters = self._source()
        except Exception as exc:
            _log.error("failed to get network activity: %s", exc)
            return
        total_recv, total_sent = sum_interfaces(counters, self.net_interface)

        recent_recv = recent_sent = 0
        if self.total_bytes_recv != 0:
            recent_recv = total_recv - self.total_bytes_recv
            recent_sent = total_sent - self.total_bytes_sent
            if recent_recv < 0:
                _log.warning("error: negative value for recently received bytes: %d", recent_recv)
                recent_recv = 0
            if recent_sent < 0:
                _log.warning("error: negative value for recently sent bytes: %d", recent_sent)
                recent_sent = 0
            self.lines[0].data.append(recent_recv)
            self.lines[1].data.append(recent_sent)
            if self.sent_metric is not None and self.recv_metric is not None:
                self.sent_metric.add(recent_sent)
                self.recv_metric.add(recent_recv)

        self.total_bytes_recv = total_recv
        self.total_bytes_sent = total_sent

        rx, tx = ("mbps", "mbps") if self.mbps else ("RX/s", "TX/s")
        fmt = " {}: {:9.1f} {:>2}/s"
        for spark, total, label, rate, recent in (
            (self.lines[0], total_recv, "RX", rx, recent_recv),
            (self.lines[1], total_sent, "TX", tx, recent_sent),
        ):
            total_converted, unit_total = convert_bytes(total)
            if self.mbps:
                recent_converted, unit_recent = recent * 0.000008, ""
                fmt = " {}: {:11.3f} {:>2}"
            else:
                recent_converted, unit_recent = convert_bytes(recent)
            spark.title1 = f" Total {label}: {total_converted:5.1f} {unit_total}"
            spark.title2 = fmt.format(rate, recent_converted, unit_recent)

    def start(self) -> None:
        """Refresh every ``update_interval`` seconds in a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()

        def loop() -> None:
            while not self._stop.wait(self.update_interval):
                with self.lock:
                    self.update()

        self._thread = threading.Thread(target=loop, name="net-update", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh and wait for it."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None