"""Resolution and persistence of the active profile file path."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from .config import AppConfig, load_config, save_config
from .errors import InvalidPathError, PathNotSetError

LOG = logging.getLogger(__name__)


@runtime_checkable
class PathSlot(Protocol):
    """Key-value slot that remembers the last active path across restarts."""

    def read(self) -> str | None:
        """Return the remembered path, if any."""

    def write(self, path: str) -> None:
        """Remember the given path."""


class ConfigPathSlot:
    """Path slot stored under ``last_path`` in the app config file."""

    def read(self) -> str | None:
        stored = load_config().last_path
        if stored is None or not stored.strip():
            return None
        return stored.strip()

    def write(self, path: str) -> None:
        config = load_config()
        if config.last_path == path:
            return
        save_config(config.with_last_path(path))


class MemoryPathSlot:
    """In-process slot used by tests and by ``--no-remember`` sessions."""

    def __init__(self, initial: str | None = None) -> None:
        self.value = initial

    def read(self) -> str | None:
        return self.value

    def write(self, path: str) -> None:
        self.value = path


def normalize_path(candidate: str, *, cwd: Path | None = None) -> Path:
    """Expand ``~``/environment variables and anchor relative paths at ``cwd``."""

    trimmed = candidate.strip()
    if not trimmed:
        raise InvalidPathError("Path must not be empty.")
    path = Path(os.path.expandvars(trimmed)).expanduser()
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    return path


class PathResolver:
    """Tracks which file backs the profile collection."""

    def __init__(
        self,
        *,
        slot: PathSlot | None = None,
        config: AppConfig | None = None,
        cwd: Path | None = None,
    ) -> None:
        self._slot = slot or ConfigPathSlot()
        self._config = config
        self._cwd = cwd
        self._active: Path | None = None

    @property
    def active_path(self) -> Path | None:
        return self._active

    def require_active_path(self) -> Path:
        """Return the active path or raise ``PathNotSetError``."""

        if self._active is None:
            raise PathNotSetError()
        return self._active

    def get_default_path(self) -> Path | None:
        """Return the cached active path, else the configured default path."""

        if self._active is not None:
            return self._active
        config = self._config or load_config()
        if config.default_path and config.default_path.strip():
            return normalize_path(config.default_path, cwd=self._cwd)
        return None

    def set_active_path(self, candidate: str) -> Path:
        """Normalize, adopt and remember ``candidate``."""

        path = normalize_path(candidate, cwd=self._cwd)
        self._active = path
        try:
            self._slot.write(str(path))
        except OSError:
            LOG.exception("Failed to remember active path", extra={"path": str(path)})
        LOG.info("Active path set", extra={"path": str(path)})
        return path

    def bootstrap(self) -> Path | None:
        """Adopt the remembered path, else the default path, else nothing."""

        stored = self._slot.read()
        if stored:
            return self.set_active_path(stored)
        default = self.get_default_path()
        if default is not None and str(default).strip():
            return self.set_active_path(str(default))
        LOG.info("No profile file configured")
        return None


__all__ = [
    "ConfigPathSlot",
    "MemoryPathSlot",
    "PathResolver",
    "PathSlot",
    "normalize_path",
]
