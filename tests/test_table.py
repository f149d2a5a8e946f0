import pytest

from topgraph.ui.block import MODIFIER_REVERSE, Buffer
from topgraph.ui.table import Table


@pytest.fixture
def table():
    t = Table()
    t.header = ["PID", "Command"]
    t.rows = [[str(i), f"cmd{i}"] for i in range(10)]
    t.col_widths = [5, 10]
    t.set_rect(0, 0, 20, 7)
    return t


def _visible(t):
    return t.top_row <= t.selected_row <= t.top_row + t.inner.dy - 2


def test_scroll_down_and_up(table):
    table.scroll_down()
    assert table.selected_row == 1
    table.scroll_up()
    table.scroll_up()
    assert table.selected_row == 0


def test_scroll_bottom_keeps_cursor_visible(table):
    table.scroll_bottom()
    assert table.selected_row == len(table.rows) - 1
    assert _visible(table)


def test_scroll_top_resets(table):
    table.scroll_bottom()
    table.scroll_top()
    assert (table.selected_row, table.top_row) == (0, 0)


def test_page_down_moves_a_page(table):
    table.scroll_page_down()
    assert table.selected_row == table.inner.dy - 2
    assert _visible(table)


def test_page_down_clamps_at_end(table):
    for _ in range(10):
        table.scroll_page_down()
    assert table.selected_row == len(table.rows) - 1
    table.scroll_page_up()
    assert table.selected_row == len(table.rows) - 1 - (table.inner.dy - 2)


def test_half_page_round_trip(table):
    table.scroll_half_page_down()
    moved = table.selected_row
    assert moved > 0
    table.scroll_half_page_up()
    assert table.selected_row == 0


def test_scroll_clears_selected_item(table):
    table.selected_item = "3"
    table.scroll_down()
    assert table.selected_item == ""


def test_handle_click_selects_row(table):
    table.handle_click(table.rect.min_x + 1, table.rect.min_y + 3)
    assert table.selected_row == table.top_row + 1


def test_handle_click_outside_is_ignored(table):
    table.handle_click(table.rect.max_x + 5, table.rect.min_y + 3)
    assert table.selected_row == 0


def test_draw_header_rows_and_cursor(table):
    table.show_cursor = True
    buf = Buffer(table.rect)
    table.draw(buf)
    inner = table.inner
    assert "PID" in buf.line(inner.min_y)
    assert "Command" in buf.line(inner.min_y)
    assert "cmd0" in buf.line(inner.min_y + 1)
    assert buf.get_cell(inner.min_x, inner.min_y + 1).style.modifier == MODIFIER_REVERSE
    assert table.selected_item == "0"


def test_draw_location(table):
    table.show_location = True
    buf = Buffer(table.rect)
    table.draw(buf)
    assert "of 10" in buf.line(table.rect.min_y)


def test_negative_top_row_draws_no_rows(table):
    table.top_row = -1
    buf = Buffer(table.rect)
    table.draw(buf)
    assert "cmd" not in "".join(buf.line(y) for y in range(7))