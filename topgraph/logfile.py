"""A size-limited, rotating log file that also receives standard error."""

from __future__ import annotations

import logging
import os
import threading

from .config import Config

LOGFILE = "errors.log"


class RotateWriter:
    """A writable log file that rotates once it grows past a size limit.

    Up to three old files are kept, named ``<file>.0`` to ``<file>.2``.
    """

    def __init__(self, filename: str, max_log_size: int) -> None:
        self.filename = filename
        self.max_log_size = max_log_size
        self._lock = threading.Lock()
        self._fp = None
        self._handler: logging.Handler | None = None
        self._rotate()

    def fileno(self) -> int:
        """Return the file descriptor of the open log file."""
        return self._fp.fileno()

    def _rotate(self) -> None:
        if self._fp is not None:
            fp, self._fp = self._fp, None
            fp.close()
        for i in (1, 0):
            source = f"{self.filename}.{i}"
            if os.path.exists(source):
                os.replace(source, f"{self.filename}.{i + 1}")
        if os.path.exists(self.filename):
            os.replace(self.filename, f"{self.filename}.0")
        try:
            fd = os.open(
                self.filename, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o660
            )
        except OSError as exc:
            raise OSError(f"failed to open log file {self.filename}: {exc}") from exc
        self._fp = os.fdopen(fd, "wb", buffering=0)

    def write(self, data: bytes | str) -> int:
        """Write *data*, rotating first if the file is over the limit."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        with self._lock:
            try:
                size = os.stat(self.filename).st_size
            except OSError:
                size = -1
            if size > self.max_log_size:
                self._rotate()
            return self._fp.write(data)

    def flush(self) -> None:
        """Nothing is buffered; present for stream compatibility."""

    def close(self) -> None:
        """Detach from logging and close the file."""
        if self._handler is not None:
            logging.getLogger().removeHandler(self._handler)
            self._handler = None
        if self._fp is not None:
            fp, self._fp = self._fp, None
            fp.close()

    def __enter__(self) -> RotateWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def open_log(config: Config) -> RotateWriter:
    """Open the log in the cache folder and route logging and stderr to it.

    The returned writer should be closed when the program exits.
    """
    cache = config.config_dir.cache_folder()
    cache.mkdir(parents=True, exist_ok=True)
    writer = RotateWriter(str(cache / LOGFILE), config.max_log_size)
    handler = logging.StreamHandler(writer)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(filename)s:%(lineno)d: %(message)s", datefmt="%H:%M:%S"
        )
    )
    root = logging.getLogger()
    for old in list(root.handlers):
        if isinstance(old, logging.StreamHandler) and isinstance(
            old.stream, RotateWriter
        ):
            root.removeHandler(old)
    root.addHandler(handler)
    writer._handler = handler
    os.dup2(writer.fileno(), 2)
    return writer