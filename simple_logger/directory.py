"""Resolves and creates the on-disk logging root."""

import logging
import os
import threading

from simple_logger.config import Config, load_config
from simple_logger.errors import DirectoryError

logger = logging.getLogger(__name__)

LOGGING_DIRNAME = "logging"


class LogDirectory:
    """Lazily creates ``<storage_dir>/logging`` and memoizes the path.

    A failed resolution is not cached; the next call tries again.
    """

    def __init__(self, config: Config):
        self._config = config
        self._root: str | None = None
        self._lock = threading.Lock()

    @property
    def config(self) -> Config:
        return self._config

    def resolve(self) -> str:
        root = self._root
        if root is not None:
            return root

        with self._lock:
            if self._root is None:
                self._root = self._create()
            return self._root

    def _create(self) -> str:
        path = os.path.join(self._config.storage_dir, LOGGING_DIRNAME)
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise DirectoryError(path, str(e)) from e

        if not os.path.isdir(path):
            raise DirectoryError(path, "not a directory")
        if not os.access(path, os.W_OK | os.X_OK):
            raise DirectoryError(path, "not writable")

        logger.debug("Logging root ready at %s", path)
        return path


_default: LogDirectory | None = None
_default_lock = threading.Lock()


def default_directory() -> LogDirectory:
    """Process-wide manager, built from ``load_config()`` on first use."""
    global _default
    with _default_lock:
        if _default is None:
            _default = LogDirectory(load_config())
        return _default


def set_default_directory(config: Config) -> LogDirectory:
    """Replace the process-wide manager with one for ``config``."""
    global _default
    with _default_lock:
        _default = LogDirectory(config)
        return _default
