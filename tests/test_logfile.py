import logging
import os

from topgraph.config import Config
from topgraph.dirs import ConfigDir
from topgraph.logfile import LOGFILE, RotateWriter, open_log


def test_rotation_keeps_at_most_four_files(tmp_path):
    path = tmp_path / LOGFILE
    chunk = b"x" * 100
    with RotateWriter(str(path), 300) as wc:
        assert len(os.listdir(tmp_path)) == 1
        for i in range(1, 6):
            assert wc.write(chunk) == 100
            assert wc.write(chunk) == 100
            assert wc.write(chunk) == 100
            assert wc.write(b"\n") == 1
            assert len(os.listdir(tmp_path)) == min(i, 4)


def test_rotation_names(tmp_path):
    path = tmp_path / LOGFILE
    with RotateWriter(str(path), 5) as wc:
        wc.write("first-")
        wc.write("second")
        wc.write("third")
    assert path.read_text() == "third"
    assert (tmp_path / f"{LOGFILE}.0").read_text() == "second"
    assert (tmp_path / f"{LOGFILE}.1").read_text() == "first-"


def test_write_returns_byte_count(tmp_path):
    with RotateWriter(str(tmp_path / LOGFILE), 1000) as wc:
        assert wc.write("héllo") == 6


def test_reopen_moves_old_log(tmp_path):
    path = tmp_path / LOGFILE
    path.write_text("old")
    with RotateWriter(str(path), 1000) as wc:
        wc.write("new")
    assert path.read_text() == "new"
    assert (tmp_path / f"{LOGFILE}.0").read_text() == "old"


def test_open_log_routes_logging(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    config = Config(config_dir=ConfigDir("topgraphtest"), config_file="")
    saved_stderr = os.dup(2)
    try:
        writer = open_log(config)
        try:
            logging.getLogger("topgraph.test").warning("marker message")
            written = writer.write(b"direct line\n")
        finally:
            writer.close()
    finally:
        os.dup2(saved_stderr, 2)
        os.close(saved_stderr)
    assert written == 12
    folder = tmp_path / "topgraphtest"
    assert os.listdir(folder) == [LOGFILE]
    content = (folder / LOGFILE).read_text()
    assert "marker message" in content
    assert "direct line" in content
    assert all(
        not isinstance(getattr(h, "stream", None), RotateWriter)
        for h in logging.getLogger().handlers
    )