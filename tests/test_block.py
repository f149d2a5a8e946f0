from topgraph.text import string_width
from topgraph.ui.block import (
    BOTTOM_RIGHT,
    ELLIPSIS,
    TOP_LEFT,
    Block,
    Buffer,
    Cell,
    Gauge,
    Rect,
    Style,
    trim_string,
)


def test_rect_orders_corners():
    assert Rect(5, 6, 1, 2) == Rect(1, 2, 5, 6)


def test_rect_size():
    r = Rect(0, 0, 10, 4)
    assert (r.dx, r.dy) == (10, 4)


def test_buffer_drops_cells_outside_area():
    buf = Buffer(Rect(0, 0, 3, 3))
    buf.set_cell(Cell("x"), 5, 5)
    assert buf.get_cell(5, 5) == Cell()
    assert buf.cells == {}


def test_buffer_set_string_advances_by_width():
    buf = Buffer(Rect(0, 0, 10, 1))
    buf.set_string("ｆa", Style(), 0, 0)
    assert buf.get_cell(0, 0).char == "ｆ"
    assert buf.get_cell(2, 0).char == "a"


def test_trim_string_keeps_short_text():
    assert trim_string("abc", 5) == "abc"


def test_trim_string_non_positive_width():
    assert trim_string("abc", 0) == ""


def test_trim_string_cuts_to_width():
    out = trim_string("abcdefgh", 4)
    assert out.endswith(ELLIPSIS)
    assert string_width(out) <= 4
    assert "abcdefgh".startswith(out[:-1])


def test_block_inner_is_inside_rect():
    b = Block()
    b.set_rect(0, 0, 10, 5)
    assert b.inner.min_x == b.rect.min_x + 1
    assert b.inner.max_y == b.rect.max_y - 1


def test_block_draws_corners_and_title():
    b = Block()
    b.title = "CPU"
    b.set_rect(0, 0, 10, 5)
    buf = Buffer(b.rect)
    b.draw(buf)
    assert buf.get_cell(0, 0).char == TOP_LEFT
    assert buf.get_cell(9, 4).char == BOTTOM_RIGHT
    assert "CPU" in buf.line(0)


def test_block_without_border_draws_only_title():
    b = Block()
    b.border = False
    b.set_rect(0, 0, 10, 5)
    buf = Buffer(b.rect)
    b.draw(buf)
    assert buf.cells == {}


def test_gauge_draws_default_label_and_shrinks():
    g = Gauge()
    g.percent = 50
    g.set_rect(0, 0, 20, 3)
    inner = g.inner
    buf = Buffer(g.rect)
    g.draw(buf)
    assert "50%" in buf.line(inner.min_y)
    assert g.rect == Rect(0, 0, inner.dx, inner.dy)