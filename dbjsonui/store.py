"""JSON-backed store that owns the on-disk profile collection."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigIOError, ParseError, ValidationError
from .models import Profile, ProfileCollection
from .paths import PathResolver

LOG = logging.getLogger(__name__)


class DefaultPolicy(str, Enum):
    """How ``isDefault`` flags are treated when a profile is saved."""

    PERMISSIVE = "permissive"
    EXCLUSIVE = "exclusive"


class ConfigStore:
    """Reads and mutates the profile file at the resolver's active path.

    Every mutation returns the complete post-mutation collection; callers
    replace their state with it instead of merging.
    """

    def __init__(
        self,
        resolver: PathResolver,
        *,
        default_policy: DefaultPolicy = DefaultPolicy.PERMISSIVE,
    ) -> None:
        self._resolver = resolver
        self._default_policy = default_policy

    @property
    def default_policy(self) -> DefaultPolicy:
        return self._default_policy

    def load(self) -> ProfileCollection:
        """Read the collection from the active path."""

        path = self._resolver.require_active_path()
        collection = self._read(path)
        LOG.info("Loaded profiles", extra={"path": str(path), "count": len(collection.databases)})
        return collection

    def upsert(self, profile: Profile) -> ProfileCollection:
        """Replace the same-named profile in place, or append it."""

        path = self._resolver.require_active_path()
        if not profile.name.strip():
            raise ValidationError("Profile name must not be empty.")
        if not profile.connection_string.strip():
            raise ValidationError("Connection string must not be empty.")
        entry = profile.normalized()
        current = self._read(path, missing_ok=True)
        profiles = list(current.databases)
        if self._default_policy is DefaultPolicy.EXCLUSIVE and entry.is_default:
            profiles = [
                item.with_updates(is_default=False) if item.is_default and item.name != entry.name else item
                for item in profiles
            ]
        position = current.index_of(entry.name)
        if position is None:
            profiles.append(entry)
        else:
            profiles[position] = entry
        updated = ProfileCollection(databases=tuple(profiles))
        self._write(path, updated)
        LOG.info(
            "Saved profile",
            extra={"path": str(path), "profile": entry.name, "replaced": position is not None},
        )
        return updated

    def delete(self, name: str) -> ProfileCollection:
        """Remove the named profile; a missing name leaves the file untouched."""

        path = self._resolver.require_active_path()
        if not name.strip():
            raise ValidationError("Name of the profile to delete must not be empty.")
        current = self._read(path, missing_ok=True)
        if current.index_of(name) is None:
            LOG.info("Delete skipped, profile not found", extra={"path": str(path), "profile": name})
            return current
        updated = ProfileCollection(
            databases=tuple(item for item in current.databases if item.name != name)
        )
        self._write(path, updated)
        LOG.info("Deleted profile", extra={"path": str(path), "profile": name})
        return updated

    def _read(self, path: Path, *, missing_ok: bool = False) -> ProfileCollection:
        try:
            raw = path.read_bytes()
        except FileNotFoundError as exc:
            if missing_ok:
                return ProfileCollection()
            raise ConfigIOError(f"Configuration file not found: {path}") from exc
        except OSError as exc:
            raise ConfigIOError(f"Failed to read configuration file: {path} ({exc})") from exc
        try:
            return ProfileCollection.from_json(raw)
        except PydanticValidationError as exc:
            raise ParseError(f"Failed to parse configuration file: {path} ({_summarize(exc)})") from exc

    def _write(self, path: Path, collection: ProfileCollection) -> None:
        content = collection.to_json()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(content)
                _match_mode(path, tmp_name)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise ConfigIOError(f"Failed to write configuration file: {path} ({exc})") from exc


def _match_mode(path: Path, tmp_name: str) -> None:
    # mkstemp creates 0600 files; keep the target readable as before.
    if path.exists():
        shutil.copymode(path, tmp_name)
        return
    umask = os.umask(0)
    os.umask(umask)
    os.chmod(tmp_name, 0o666 & ~umask)


def _summarize(exc: PydanticValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    suffix = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {message}{suffix}" if location else f"{message}{suffix}"


__all__ = ["ConfigStore", "DefaultPolicy"]
