import io
from types import SimpleNamespace

import pytest

from topgraph.units import GB, KB
from topgraph.widgets import metrics
from topgraph.widgets.disk import DiskWidget


@pytest.fixture(autouse=True)
def clean_metrics():
    metrics._reset()
    yield
    metrics._reset()


class FakeSystem:
    def __init__(self):
        self.parts = [
            SimpleNamespace(device="/dev/sda1", mountpoint="/"),
            SimpleNamespace(device="/dev/loop0", mountpoint="/snap/x"),
            SimpleNamespace(device="/dev/mapper/vg-home", mountpoint="/home"),
            SimpleNamespace(device="/dev/sdb1", mountpoint="/var/lib/docker/overlay"),
        ]
        self.read = 1000
        self.written = 500

    def partitions(self):
        return list(self.parts)

    def usage(self, mount):
        return SimpleNamespace(percent=42.4, free=5 * GB)

    def io(self, device):
        return {
            "sda1": SimpleNamespace(read_bytes=self.read, write_bytes=self.written),
        }


def test_skips_loop_and_docker():
    system = FakeSystem()
    w = DiskWidget(system.partitions, system.usage, system.io)
    assert set(w.partitions) == {"/dev/sda1", "/dev/mapper/vg-home"}


def test_rows_sorted_and_formatted():
    system = FakeSystem()
    w = DiskWidget(system.partitions, system.usage, system.io)
    assert [r[0] for r in w.rows] == ["vg-home", "sda1"]
    sda = w.rows[1]
    assert sda[1] == "/"
    assert sda[2] == "42%"
    assert sda[3] == "  5GB"
    assert sda[4] == "0B"
    assert sda[5] == "0B"


def test_rates_after_second_update():
    system = FakeSystem()
    w = DiskWidget(system.partitions, system.usage, system.io)
    system.read += 2 * KB
    system.written += 10
    w.update()
    row = next(r for r in w.rows if r[0] == "sda1")
    assert row[4] == "2KB"
    assert row[5] == "10B"
    assert w.partitions["/dev/sda1"].bytes_read == system.read


def test_removed_partition_is_deleted():
    system = FakeSystem()
    w = DiskWidget(system.partitions, system.usage, system.io)
    system.parts = [p for p in system.parts if p.device != "/dev/sda1"]
    w.update()
    assert "/dev/sda1" not in w.partitions
    assert [r[0] for r in w.rows] == ["vg-home"]


def test_column_widths_have_minimums():
    system = FakeSystem()
    w = DiskWidget(system.partitions, system.usage, system.io)
    w.set_rect(0, 0, 20, 10)
    w.col_resizer()
    assert w.col_widths[:2] == [4, 5]
    assert len(w.col_widths) == len(w.header)


def test_metrics_use_fraction():
    system = FakeSystem()
    w = DiskWidget(system.partitions, system.usage, system.io)
    w.enable_metric()
    out = io.StringIO()
    metrics.write_prometheus(out)
    assert "topgraph_disk_:dev:sda1 0.42\n" in out.getvalue()