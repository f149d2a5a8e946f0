"""Colour schemes for the user interface.

Colours are terminal 256-colour indexes; -1 means the terminal default.
A colour may be combined with BOLD, UNDERLINE or REVERSE using ``|``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from typing import Any

from .dirs import ConfigDir, FolderKind

BOLD = 1 << 9
UNDERLINE = 1 << 10
REVERSE = 1 << 11


class ColorschemeError(Exception):
    """A colour scheme could not be found or read."""


@dataclass(frozen=True)
class Colorscheme:
    """Colours used by the interface elements."""

    name: str = ""
    author: str = ""
    fg: int = 0
    bg: int = 0
    border_label: int = 0
    border_line: int = 0
    cpu_lines: tuple[int, ...] = ()
    batt_lines: tuple[int, ...] = ()
    mem_lines: tuple[int, ...] = ()
    proc_cursor: int = 0
    sparklines: tuple[int, int] = (0, 0)
    disk_bar: int = 0
    temp_low: int = 0
    temp_high: int = 0


_registry: dict[str, Colorscheme] = {}

_STRING_FIELDS = {"name", "author"}
_LIST_FIELDS = {"cpu_lines", "batt_lines", "mem_lines"}
_JSON_KEYS = {f.name.replace("_", ""): f.name for f in fields(Colorscheme)}


def register(name: str, scheme: Colorscheme) -> None:
    """Make *scheme* available under *name*."""
    _registry[name] = replace(scheme, name=name)


def builtin_names() -> list[str]:
    """Return the names of all registered schemes, sorted."""
    return sorted(_registry)


def from_name(config_dir: ConfigDir | None, name: str) -> Colorscheme:
    """Return the scheme called *name*.

    Registered schemes are found first; otherwise ``<name>.json`` is looked
    up in the configuration folders.
    """
    if not name:
        name = "default"
    scheme = _registry.get(name)
    if scheme is not None:
        return scheme
    return _load_custom(config_dir, name)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _int_list(key: str, value: Any) -> list[int]:
    if not isinstance(value, list) or not all(_is_int(v) for v in value):
        raise ColorschemeError(f"failed to parse colorscheme: {key} must be a list of integers")
    return value


def _from_json(data: Any) -> Colorscheme:
    if not isinstance(data, dict):
        raise ColorschemeError("failed to parse colorscheme: expected an object")
    values: dict[str, Any] = {}
    for key, value in data.items():
        field_name = _JSON_KEYS.get(key.replace("_", "").lower())
        if field_name is None or value is None:
            continue
        if field_name in _STRING_FIELDS:
            if not isinstance(value, str):
                raise ColorschemeError(f"failed to parse colorscheme: {key} must be a string")
            values[field_name] = value
        elif field_name in _LIST_FIELDS:
            values[field_name] = tuple(_int_list(key, value))
        elif field_name == "sparklines":
            pair = _int_list(key, value)[:2]
            values[field_name] = tuple(pair + [0] * (2 - len(pair)))
        else:
            if not _is_int(value):
                raise ColorschemeError(f"failed to parse colorscheme: {key} must be an integer")
            values[field_name] = value
    return Colorscheme(**values)


def _load_custom(config_dir: ConfigDir | None, name: str) -> Colorscheme:
    filename = f"{name}.json"
    folder = config_dir.find_folder_containing(filename) if config_dir else None
    if folder is None:
        searched = config_dir.query_folders(FolderKind.EXISTING) if config_dir else []
        paths = ", ".join(str(p) for p in searched)
        raise ColorschemeError(
            f"failed to find colorscheme file {filename} in {paths}"
        )
    path = folder / filename
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ColorschemeError(f"failed to read colorscheme {path}: {exc}") from exc
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise ColorschemeError(f"failed to parse colorscheme: {exc}") from exc
    return _from_json(data)


register(
    "default",
    Colorscheme(
        fg=7,
        bg=-1,
        border_label=7,
        border_line=6,
        cpu_lines=(4, 3, 2, 1, 5, 6, 7, 8),
        batt_lines=(4, 3, 2, 1, 5, 6, 7, 8),
        mem_lines=(5, 11, 4, 3, 2, 1, 6, 7, 8),
        proc_cursor=4,
        sparklines=(4, 5),
        disk_bar=7,
        temp_low=2,
        temp_high=1,
    ),
)

register(
    "default-dark",
    Colorscheme(
        fg=235,
        bg=-1,
        border_label=235,
        border_line=6,
        cpu_lines=(4, 3, 2, 1, 5, 6, 7, 8),
        batt_lines=(4, 3, 2, 1, 5, 6, 7, 8),
        mem_lines=(5, 3, 4, 2, 1, 6, 7, 8, 11),
        proc_cursor=33,
        sparklines=(4, 5),
        disk_bar=252,
        temp_low=2,
        temp_high=1,
    ),
)

register(
    "monokai",
    Colorscheme(
        fg=249,
        bg=-1,
        border_label=249,
        border_line=239,
        cpu_lines=(81, 70, 208, 197, 249, 141, 221, 186),
        batt_lines=(81, 70, 208, 197, 249, 141, 221, 186),
        mem_lines=(208, 186, 81, 70, 208, 197, 249, 141, 221, 186),
        proc_cursor=197,
        sparklines=(81, 186),
        disk_bar=102,
        temp_low=70,
        temp_high=208,
    ),
)

register(
    "nord",
    Colorscheme(
        fg=254,
        bg=-1,
        border_label=254,
        border_line=96,
        cpu_lines=(4, 3, 2, 1, 5, 6, 7, 8),
        batt_lines=(4, 3, 2, 1, 5, 6, 7, 8),
        mem_lines=(172, 221, 4, 3, 2, 1, 5, 6, 7, 8),
        proc_cursor=31,
        sparklines=(31, 96),
        disk_bar=254,
        temp_low=64,
        temp_high=167,
    ),
)

# Neutral Solarized palette; the grey averages base0 and base00.
register(
    "solarized",
    Colorscheme(
        fg=-1,
        bg=-1,
        border_label=-1,
        border_line=37,
        cpu_lines=(61, 33, 37, 64, 125, 160, 166, 136),
        batt_lines=(61, 33, 37, 64, 125, 160, 166, 136),
        mem_lines=(125, 166, 61, 33, 37, 64, 125, 160, 166, 136),
        proc_cursor=136,
        sparklines=(33, 136),
        disk_bar=243,
        temp_low=64,
        temp_high=160,
    ),
)

# The two 16-colour variants assume a Solarized terminal; only disk_bar differs.
register(
    "solarized16-dark",
    Colorscheme(
        fg=-1,
        bg=-1,
        border_label=-1,
        border_line=6,
        cpu_lines=(13, 4, 6, 2, 5, 1, 9, 3),
        batt_lines=(13, 4, 6, 2, 5, 1, 9, 3),
        mem_lines=(5, 9, 13, 4, 6, 2, 1, 3),
        proc_cursor=4,
        sparklines=(4, 5),
        disk_bar=12,
        temp_low=2,
        temp_high=1,
    ),
)

register(
    "solarized16-light",
    Colorscheme(
        fg=-1,
        bg=-1,
        border_label=-1,
        border_line=6,
        cpu_lines=(13, 4, 6, 2, 5, 1, 9, 3),
        batt_lines=(13, 4, 6, 2, 5, 1, 9, 3),
        mem_lines=(5, 9, 13, 4, 6, 2, 1, 3),
        proc_cursor=4,
        sparklines=(4, 5),
        disk_bar=11,
        temp_low=2,
        temp_high=1,
    ),
)

register(
    "vice",
    Colorscheme(
        fg=231,
        bg=-1,
        border_label=123,
        border_line=102,
        cpu_lines=(212, 218, 123, 159, 229, 158, 183, 146),
        batt_lines=(212, 218, 123, 159, 229, 158, 183, 146),
        mem_lines=(201, 97, 212, 218, 123, 159, 229, 158, 183, 146),
        proc_cursor=159,
        sparklines=(183, 146),
        disk_bar=158,
        temp_low=49,
        temp_high=197,
    ),
)