# topgraph

Building blocks for a terminal activity monitor. The package collects CPU,
memory, swap, disk, network, temperature and process data, and draws it as
widgets onto an in-memory character-cell buffer: braille line graphs,
sparklines, tables, gauges and a text entry used for filtering processes.

## Modules

- `topgraph.config` – `Config` with its defaults, the `key=value` file
  format (`load`, `load_from`, `marshal`, `write`), `TempScale` and
  `ConfigError`. Unknown keys are kept in `Config.extension_vars`.
- `topgraph.colorschemes` – `Colorscheme`, the built-in schemes (`default`,
  `default-dark`, `monokai`, `nord`, `solarized`, `solarized16-dark`,
  `solarized16-light`, `vice`), `register`, `builtin_names`, and
  `from_name`, which falls back to `<name>.json` in the configuration
  folders and raises `ColorschemeError` when nothing is found.
- `topgraph.dirs` – `ConfigDir` (local, per-user and system folders, plus a
  cache folder), `FolderKind`, `get_config_dir` and `get_log_dir`.
- `topgraph.layoutspec` – `parse_layout`, returning a `Layout` of
  `WidgetRule` rows.
- `topgraph.devices` – registries for CPU, memory and temperature sources
  (`register_cpu`, `update_cpu`, `register_mem`, `update_mem`,
  `register_temp`, `update_temps`), device lists, and `startup` /
  `shutdown` hooks for extensions.
- `topgraph.sensors` – local sources backed by psutil; `install()`
  registers them and the GPU startup hook.
- `topgraph.nvidia` – `NvidiaMonitor` and `start_nvidia`, which poll
  `nvidia-smi` in a background thread when the `nvidia` setting is `true`.
- `topgraph.logfile` – `RotateWriter`, a size-limited log that keeps three
  old files, and `open_log`, which opens it in the cache folder and points
  the root logger and standard error at it.
- `topgraph.drawille` – a braille pixel `Canvas`, `Point` and the `line`
  rasteriser.
- `topgraph.units` – byte-size and temperature conversions.
- `topgraph.text` – `string_width` and `truncate_front`.
- `topgraph.ui` – `Buffer`, `Block`, `Gauge`, `Style`, `Cell`, `Rect`
  (`ui.block`), `LineGraph` with `numbered_less` / `sort_numbered`
  (`ui.linegraph`), `Table` (`ui.table`), `Sparkline` and `SparklineGroup`
  (`ui.sparkline`) and `Entry` (`ui.entry`).
- `topgraph.widgets` – `CPUWidget`, `MemWidget`, `TempWidget`, `DiskWidget`,
  `NetWidget`, `ProcWidget`, `HelpMenu`, `StatusBar`, and named gauges and
  counters in `widgets.metrics` with `write_prometheus` to dump them as text.
  Each data widget has `update()`, plus `start()` / `stop()` to refresh in a
  background thread, and accepts its data source as an argument.

## Layout language

Each line is a row. A widget is written `(rowspan:)?widget(/weight)?`;
weights become each widget's share of its row's width, and a row span makes
a widget as tall as that many rows. Blank lines and lines starting with `#`
are skipped; bad spans and weights count as 1.

```python
from topgraph.layoutspec import parse_layout

spec = parse_layout("2:cpu\ndisk/1 2:mem/2\ntemp\n2:net 2:procs")
for row in spec.rows:
    print([(rule.widget, rule.height, rule.weight) for rule in row])
```

## Configuration

```python
import io
from topgraph.config import Config

config = Config()
config.load_from(io.StringIO("graphhorizontalscale=5\ntempscale=F\nlayout=minimal"))
print(config.marshal())
```

`Config.write()` saves to `config_file`, or to `topgraph.conf` in the
per-user configuration folder, and returns the path.

## Drawing a widget

Widgets draw into a `Buffer`, which can be read back line by line.

```python
from topgraph.ui.block import Buffer, Rect
from topgraph.widgets.proc import Proc, ProcWidget

procs = [
    Proc(1, "init", "/sbin/init", 0.5, 0.1),
    Proc(42, "sh", "sh -c sleep 60", 2.0, 0.3),
]
widget = ProcWidget(source=lambda: procs, cpu_count=1)
widget.set_rect(0, 0, 60, 8)
buf = Buffer(Rect(0, 0, 60, 8))
widget.draw(buf)
for y in range(8):
    print(buf.line(y))
```

## Small utilities

```python
from topgraph.units import convert_bytes
from topgraph.text import truncate_front
from topgraph.drawille import Canvas

print(convert_bytes(3 * 1024 * 1024))        # (3.0, 'MB')
print(truncate_front("abcdef", 5, "…"))      # '…cdef'

canvas = Canvas()
canvas.draw_line(0, 0, 20, 12)
print(canvas.frame(canvas.min_x(), canvas.min_y(), canvas.max_x(), canvas.max_y()))
```

## What the package does not do

- There is no command to run and no interactive screen: nothing reads the
  keyboard, puts a `Buffer` on a real terminal, or runs an event loop.
- A parsed `Layout` is not turned into a grid of widgets; placing widgets
  is left to the caller.
- There are no battery widgets and no remote-host data source.
- Metrics are only written as text by `write_prometheus`; no HTTP server
  exposes them.

## Tests

The tests use pytest, declared in the `test` extra:

```
pip install -e .[test]
pytest
```