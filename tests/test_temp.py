import io

import pytest

from topgraph.ui.block import Buffer, Rect
from topgraph.units import celsius_to_fahrenheit
from topgraph.widgets import metrics
from topgraph.widgets.temp import TempWidget


@pytest.fixture(autouse=True)
def clean_metrics():
    metrics._reset()
    yield
    metrics._reset()


def make_source(values):
    def source(temps):
        for key, value in values.items():
            if key in temps:
                temps[key] = value

    return source


def test_filter_selects_sensors():
    w = TempWidget("C", ["cpu", "gpu"], source=make_source({"cpu": 45, "nvme": 30}))
    assert w.data == {"cpu": 45, "gpu": 0}
    assert w.temp_threshold == 80


def test_fahrenheit_conversion():
    w = TempWidget("F", ["cpu"], source=make_source({"cpu": 45}))
    assert w.data["cpu"] == celsius_to_fahrenheit(45)
    assert w.temp_threshold == celsius_to_fahrenheit(80)


def test_invalid_scale_raises():
    with pytest.raises(ValueError):
        TempWidget("K", ["cpu"], source=make_source({}))


def test_draw_sorted_with_colors():
    w = TempWidget("C", ["b", "a"], source=make_source({"a": 40, "b": 90}))
    w.temp_low_color = 2
    w.temp_high_color = 1
    w.set_rect(0, 0, 20, 5)
    buf = Buffer(Rect(0, 0, 20, 5))
    w.draw(buf)
    assert buf.line(1)[1:].startswith("a")
    assert buf.line(2)[1:].startswith("b")
    assert " 40°C" in buf.line(1)
    assert " 90°C" in buf.line(2)
    c_pos = buf.line(1).index("°")
    assert buf.get_cell(c_pos, 1).style.fg == 2
    assert buf.get_cell(buf.line(2).index("°"), 2).style.fg == 1


def test_draw_stops_at_inner_height():
    w = TempWidget("C", ["a", "b", "c"], source=make_source({}))
    w.set_rect(0, 0, 20, 4)
    buf = Buffer(Rect(0, 0, 20, 4))
    w.draw(buf)
    assert "c" not in buf.line(3)[1:-1]
    assert buf.line(2)[1:].startswith("b")


def test_metrics():
    w = TempWidget("C", ["cpu"], source=make_source({"cpu": 55}))
    w.enable_metric()
    out = io.StringIO()
    metrics.write_prometheus(out)
    assert "topgraph_temp_cpu 55\n" in out.getvalue()