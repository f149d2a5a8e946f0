from datetime import datetime

from topgraph.ui.block import Buffer, Rect
from topgraph.widgets.help import APP_NAME, HELP_TEXT, HelpMenu, StatusBar


def test_short_text_uses_minimum_width():
    menu = HelpMenu("alpha\nbeta")
    menu.resize(100, 40)
    assert menu.rect.dx == 53


def test_long_line_widens_panel():
    long_line = "x" * 60
    menu = HelpMenu("a\n" + long_line)
    menu.resize(200, 40)
    assert menu.rect.dx > len(long_line)


def test_panel_is_centred():
    menu = HelpMenu()
    menu.resize(120, 60)
    left = menu.rect.min_x
    right = 120 - menu.rect.max_x
    assert abs(left - right) <= 1
    top = menu.rect.min_y
    bottom = 60 - menu.rect.max_y
    assert abs(top - bottom) <= 1


def test_height_grows_with_lines():
    short = HelpMenu("a\nb")
    tall = HelpMenu("a\nb\nc\nd")
    short.resize(100, 40)
    tall.resize(100, 40)
    assert tall.rect.dy - short.rect.dy == 2


def test_draw_shows_text():
    menu = HelpMenu("alpha\nbeta\ngamma")
    menu.resize(100, 40)
    buf = Buffer(Rect(0, 0, 100, 40))
    menu.draw(buf)
    text = "\n".join(buf.line(y) for y in range(40))
    assert "alpha" in text
    assert "beta" in text


def test_default_help_mentions_quit_key():
    menu = HelpMenu()
    menu.resize(100, 60)
    buf = Buffer(Rect(0, 0, 100, 60))
    menu.draw(buf)
    first_line = HELP_TEXT.split("\n")[0]
    assert any(first_line in buf.line(y) for y in range(60))


def test_status_bar_shows_host_time_and_name():
    bar = StatusBar(
        clock=lambda: datetime(2024, 1, 2, 12, 34, 56),
        hostname=lambda: "host1",
    )
    bar.set_rect(0, 0, 60, 3)
    buf = Buffer(Rect(0, 0, 60, 3))
    bar.draw(buf)
    row = buf.line(1)
    assert row.startswith(" host1")
    assert "12:34:56" in row
    assert APP_NAME in row
    assert row.index("host1") < row.index("12:34:56") < row.index(APP_NAME)


def test_status_bar_without_hostname_draws_nothing():
    def broken():
        raise OSError("no host")

    bar = StatusBar(hostname=broken)
    bar.set_rect(0, 0, 60, 3)
    buf = Buffer(Rect(0, 0, 60, 3))
    bar.draw(buf)
    assert buf.line(1).strip() == ""