import io

import pytest

from topgraph.colorschemes import from_name
from topgraph.config import CONFFILE, Config, ConfigError, TempScale
from topgraph.dirs import ConfigDir


def fresh(tmp_path=None):
    if tmp_path is None:
        return Config(config_file="")
    return Config(config_dir=ConfigDir("topgraph", local_path=tmp_path), config_file="")


def test_key_without_value_is_error():
    c = fresh()
    with pytest.raises(ConfigError):
        c.load_from(io.StringIO("graphhorizontalscale"))


def test_two_equals_is_error():
    c = fresh()
    with pytest.raises(ConfigError):
        c.load_from(io.StringIO("helpvisible=true=false"))


def test_keys_are_case_insensitive():
    c = fresh()
    c.load_from(io.StringIO("GRAPHHORIZONTALSCALE=1\nhelpVisible=true"))
    assert c.graph_horizontal_scale == 1
    assert c.help_visible is True


def test_bad_int_is_error():
    c = fresh()
    with pytest.raises(ConfigError):
        c.load_from(io.StringIO("graphhorizontalscale=a"))


def test_bad_bool_is_error():
    c = fresh()
    with pytest.raises(ConfigError):
        c.load_from(io.StringIO("helpvisible=a"))


def test_many_values():
    c = fresh()
    c.load_from(
        io.StringIO(
            "helpvisible=true\nupdateinterval=30\naveragecpu=true\nPerCPULoad=true\n"
            "tempscale=F\nstatusbar=true\nnetinterface=eth0\nlayout=minimal\nmaxlogsize=200"
        )
    )
    assert c.help_visible is True
    assert c.update_interval == 30
    assert c.average_load is True
    assert c.percpu_load is True
    assert c.temp_scale is TempScale.FAHRENHEIT
    assert c.temp_scale == "F"
    assert c.statusbar is True
    assert c.net_interface == "eth0"
    assert c.layout == "minimal"
    assert c.max_log_size == 200


def test_defaults():
    c = fresh()
    assert c.graph_horizontal_scale == 7
    assert c.update_interval == 1_000_000_000
    assert c.percpu_load is True
    assert c.net_interface == "all"
    assert c.max_log_size == 5_000_000
    assert c.colorscheme.name == "default"


def test_bad_tempscale_resets_to_celsius():
    c = fresh()
    c.temp_scale = TempScale.FAHRENHEIT
    with pytest.raises(ConfigError):
        c.load_from("tempscale=K")
    assert c.temp_scale is TempScale.CELSIUS


def test_unknown_key_goes_to_extension_vars():
    c = fresh()
    c.load_from("Remote-Home-URL=http://localhost:8080\n# comment")
    assert c.extension_vars == {"remote-home-url": "http://localhost:8080"}


def test_deprecated_keys_ignored():
    c = fresh()
    c.load_from("logdir=/tmp\nconfigdir=/tmp")
    assert c.extension_vars == {}


def test_temperatures_and_colorscheme():
    c = fresh()
    c.load_from("temperatures=a,b,c\ncolorscheme=monokai\nnvidia=true\nmbps=true")
    assert c.temps == ["a", "b", "c"]
    assert c.colorscheme == from_name(None, "monokai")
    assert c.nvidia is True
    assert c.mbps is True


def test_unknown_colorscheme_is_error(tmp_path):
    c = fresh(tmp_path)
    with pytest.raises(ConfigError):
        c.load_from("colorscheme=nosuchscheme")


def test_marshal_comments_unset_values():
    c = fresh()
    text = c.marshal()
    assert text.startswith(
        "# Scale graphs to this level; 7 is the default, 2 is zoomed out.\n"
        "graphhorizontalscale=7\n"
    )
    assert "\n#metricsexportport=\n" in text
    assert "\n#temperatures=\n" in text
    assert "\ntempscale=C\n" in text
    assert text.endswith("#nvidiarefresh=30s\n")


def test_marshal_set_values():
    c = fresh()
    c.export_port = ":8080"
    c.temps = ["x", "y"]
    text = c.marshal()
    assert "\nmetricsexportport=:8080\n" in text
    assert "\ntemperatures=x,y\n" in text


def test_marshal_round_trip():
    c = fresh()
    c.graph_horizontal_scale = 3
    c.help_visible = True
    c.temp_scale = TempScale.FAHRENHEIT
    c.layout = "procs"
    c.temps = ["cpu"]
    c.export_port = ":9000"
    d = fresh()
    d.load_from(io.StringIO(c.marshal()))
    assert d.graph_horizontal_scale == 3
    assert d.help_visible is True
    assert d.temp_scale is TempScale.FAHRENHEIT
    assert d.layout == "procs"
    assert d.temps == ["cpu"]
    assert d.export_port == ":9000"
    assert d.update_interval == c.update_interval


def test_load_from_file(tmp_path):
    path = tmp_path / "my.conf"
    path.write_text("layout=minimal\nmaxlogsize=42\n")
    c = Config(config_dir=ConfigDir("topgraph", local_path=tmp_path), config_file=str(path))
    c.load()
    assert c.layout == "minimal"
    assert c.max_log_size == 42


def test_load_relative_name_found_in_folder(tmp_path):
    (tmp_path / "topgraph-relative-test.conf").write_text("layout=battery\n")
    c = Config(
        config_dir=ConfigDir("topgraph", local_path=tmp_path),
        config_file="topgraph-relative-test.conf",
    )
    c.load()
    assert c.layout == "battery"
    assert c.config_file == str(tmp_path / "topgraph-relative-test.conf")


def test_load_missing_file_is_noop(tmp_path):
    c = Config(
        config_dir=ConfigDir("topgraph", local_path=tmp_path),
        config_file="does-not-exist.conf",
    )
    c.load()
    assert c.layout == "default"


def test_discovers_default_file(tmp_path):
    (tmp_path / CONFFILE).write_text("layout=minimal\n")
    c = Config(config_dir=ConfigDir("topgraph", local_path=tmp_path))
    assert c.config_file == str(tmp_path / CONFFILE)


def test_write_to_config_file(tmp_path):
    target = tmp_path / "out.conf"
    c = fresh(tmp_path)
    c.config_file = str(target)
    written = c.write()
    assert written == str(target)
    assert target.read_text() == c.marshal()


def test_write_to_user_folder(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    c = Config(config_dir=ConfigDir("topgraph"), config_file="")
    written = c.write()
    assert written == str(tmp_path / "topgraph" / CONFFILE)
    assert (tmp_path / "topgraph" / CONFFILE).read_text() == c.marshal()