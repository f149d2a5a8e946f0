"""Locations of configuration, cache and log directories."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


def get_config_dir(name: str) -> str:
    """Return the XDG configuration directory for *name*."""
    base = os.environ.get("XDG_CONFIG_HOME") or os.path.join(
        os.environ.get("HOME", ""), ".config"
    )
    return os.path.join(base, name)


def get_log_dir(name: str) -> str:
    """Return the XDG state directory used for logs of *name*."""
    base = os.environ.get("XDG_STATE_HOME") or os.path.join(
        os.environ.get("HOME", ""), ".local", "state"
    )
    return os.path.join(base, name)


class FolderKind(Enum):
    """Which configuration folders a query should return."""

    SYSTEM = "system"
    GLOBAL = "global"
    LOCAL = "local"
    ALL = "all"
    EXISTING = "existing"


@dataclass
class ConfigDir:
    """The set of folders an application searches for its settings.

    Folders are searched in the order local, per-user, system-wide.
    """

    application: str
    vendor: str = ""
    local_path: Path | None = None

    def _relative(self) -> str:
        return os.path.join(self.vendor, self.application)

    def _global_folder(self) -> Path:
        return Path(get_config_dir(self._relative()))

    def _system_folders(self) -> list[Path]:
        roots = os.environ.get("XDG_CONFIG_DIRS") or "/etc/xdg"
        return [
            Path(root, self._relative()) for root in roots.split(os.pathsep) if root
        ]

    def query_folders(self, kind: FolderKind) -> list[Path]:
        """Return the folders of the given kind, in search order."""
        folders: list[Path] = []
        if self.local_path is not None and kind not in (
            FolderKind.SYSTEM,
            FolderKind.GLOBAL,
        ):
            folders.append(Path(self.local_path))
        if kind not in (FolderKind.SYSTEM, FolderKind.LOCAL):
            folders.append(self._global_folder())
        if kind not in (FolderKind.GLOBAL, FolderKind.LOCAL):
            folders.extend(self._system_folders())
        if kind is FolderKind.EXISTING:
            folders = [folder for folder in folders if folder.is_dir()]
        return folders

    def find_folder_containing(self, filename: str) -> Path | None:
        """Return the first existing folder holding *filename*, or None."""
        for folder in self.query_folders(FolderKind.EXISTING):
            if (folder / filename).exists():
                return folder
        return None

    def cache_folder(self) -> Path:
        """Return the per-user cache folder of the application."""
        base = os.environ.get("XDG_CACHE_HOME") or os.path.join(
            os.environ.get("HOME", ""), ".cache"
        )
        return Path(base, self._relative())