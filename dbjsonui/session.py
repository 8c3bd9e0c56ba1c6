"""Profile session wiring the path resolver, store and selection into the UI."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from . import settings_codec
from .errors import BackendError, OperationInProgressError, ProfileError, ValidationError
from .models import EngineType, Profile, ProfileCollection
from .paths import PathResolver
from .selection import Selection, draft_selection, reconcile
from .settings_codec import DecodedSettings
from .store import ConfigStore
from .templates import switch_engine

LOG = logging.getLogger(__name__)

SessionListener = Callable[["SessionState"], None]

_EDITABLE_FIELDS = frozenset({"name", "connection_string", "description", "is_default"})


@dataclass(frozen=True, slots=True)
class SessionState:
    """Snapshot of everything the UI renders."""

    path: Path | None
    collection: ProfileCollection | None
    selection: Selection
    draft: Profile
    settings_text: str
    loaded_path: Path | None = None
    loading: bool = False
    saving: bool = False

    @property
    def settings(self) -> DecodedSettings:
        return settings_codec.decode(self.settings_text)

    @property
    def settings_invalid(self) -> bool:
        return isinstance(self.settings, settings_codec.SettingsInvalid)

    @property
    def busy(self) -> bool:
        return self.loading or self.saving

    @property
    def configured(self) -> bool:
        return self.path is not None

    @property
    def stale(self) -> bool:
        """True when the collection was read from a different file than ``path``."""

        return self.collection is not None and self.loaded_path != self.path

    @property
    def dirty(self) -> bool:
        """True when the editor differs from the selected profile."""

        return self.draft != self.selection.profile or self.settings_text != self.selection.settings_text


class ProfileSession:
    """Coordinates profile file operations and keeps the selection consistent.

    Store calls are serialized by a non-blocking lock: a call issued while
    another is running fails with ``OperationInProgressError`` rather than
    queueing. A failed operation leaves the collection, selection and draft
    exactly as they were.
    """

    def __init__(self, resolver: PathResolver, store: ConfigStore) -> None:
        self._resolver = resolver
        self._store = store
        self._collection: ProfileCollection | None = None
        self._loaded_path: Path | None = None
        self._selection: Selection = draft_selection()
        self._draft: Profile = self._selection.profile
        self._settings_text = ""
        self._loading = False
        self._saving = False
        self._lock = threading.Lock()
        self._listeners: set[SessionListener] = set()

    @property
    def state(self) -> SessionState:
        """Current session state."""

        return SessionState(
            path=self._resolver.active_path,
            collection=self._collection,
            selection=self._selection,
            draft=self._draft,
            settings_text=self._settings_text,
            loaded_path=self._loaded_path,
            loading=self._loading,
            saving=self._saving,
        )

    @property
    def collection(self) -> ProfileCollection | None:
        return self._collection

    @property
    def selected_name(self) -> str | None:
        return self._selection.name

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Subscribe to session updates; returns an unsubscribe handle."""

        self._listeners.add(listener)
        listener(self.state)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def bootstrap(self) -> SessionState:
        """Adopt the remembered or default path and load it when one exists."""

        path = self._resolver.bootstrap()
        if path is None:
            self._notify()
            return self.state
        return self.reload()

    def apply_path(self, candidate: str) -> SessionState:
        """Make ``candidate`` the active file and load it."""

        with self._operation("apply path", loading=True):
            self._resolver.set_active_path(candidate)
            collection = self._store.load()
            self._apply(collection)
        return self.state

    def reload(self) -> SessionState:
        """Re-read the active file, keeping the current selection when possible."""

        with self._operation("reload", loading=True):
            collection = self._store.load()
            self._apply(collection)
        return self.state

    def save(self) -> SessionState:
        """Upsert the draft; invalid input is rejected before the store is called."""

        self._resolver.require_active_path()
        if not self._draft.name.strip():
            raise ValidationError("Profile name must not be empty.")
        if self.state.stale and not self._selection.is_draft:
            raise ValidationError(
                f"Profile '{self._selection.name}' belongs to {self._loaded_path}; "
                "reload or start a new profile first."
            )
        settings = settings_codec.require_settings(self._settings_text)
        payload = self._draft.with_updates(settings=settings)
        with self._operation("save", saving=True):
            collection = self._store.upsert(payload)
            self._apply(collection, requested=payload.name.strip())
        return self.state

    def delete(self, name: str | None = None) -> SessionState:
        """Delete ``name`` (default: the selected profile)."""

        target = name if name is not None else (self._selection.name or "")
        if not target.strip():
            raise ValidationError("Select a profile to delete.")
        self._resolver.require_active_path()
        if self.state.stale:
            raise ValidationError(f"{self._resolver.active_path} is not loaded; reload it first.")
        with self._operation("delete", loading=True):
            collection = self._store.delete(target)
            self._apply(collection)
        return self.state

    def select(self, name: str) -> SessionState:
        """Show the named profile from the loaded collection in the editor."""

        if self._collection is None or self._collection.get(name) is None:
            raise ValidationError(f"Profile '{name}' not found.")
        self._show(reconcile(self._collection, requested=name))
        self._notify()
        return self.state

    def reset(self) -> SessionState:
        """Discard the selection and start a fresh draft."""

        self._show(draft_selection())
        self._notify()
        return self.state

    def edit(self, **changes: object) -> SessionState:
        """Update draft fields (name, connection_string, description, is_default)."""

        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
        self._draft = self._draft.with_updates(**changes)
        self._notify()
        return self.state

    def change_engine(self, engine: EngineType | str) -> SessionState:
        """Retarget the draft, refreshing an untouched connection string."""

        try:
            engine_type = EngineType(engine)
        except ValueError as exc:
            raise ValidationError(f"Unsupported engine type: {engine}") from exc
        self._draft = switch_engine(self._draft, engine_type)
        self._notify()
        return self.state

    def set_settings_text(self, text: str) -> SessionState:
        self._settings_text = text
        self._notify()
        return self.state

    @contextmanager
    def _operation(self, name: str, *, loading: bool = False, saving: bool = False) -> Iterator[None]:
        if not self._lock.acquire(blocking=False):
            raise OperationInProgressError(name)
        self._loading, self._saving = loading, saving
        self._notify()
        try:
            yield
        except ProfileError as exc:
            LOG.warning("Operation failed", extra={"operation": name, "error": str(exc)})
            raise
        except Exception as exc:
            LOG.exception("Unexpected failure", extra={"operation": name})
            raise BackendError(f"{name} failed: {exc}") from exc
        finally:
            self._loading = self._saving = False
            self._lock.release()
            self._notify()

    def _apply(self, collection: ProfileCollection, *, requested: str | None = None) -> None:
        # Only called with a collection just read from or written to the active path.
        self._collection = collection
        self._loaded_path = self._resolver.active_path
        self._show(reconcile(collection, requested=requested, previous=self._selection.name))

    def _show(self, selection: Selection) -> None:
        self._selection = selection
        self._draft = selection.profile
        self._settings_text = selection.settings_text

    def _notify(self) -> None:
        state = self.state
        for listener in tuple(self._listeners):
            listener(state)


__all__ = ["ProfileSession", "SessionListener", "SessionState"]
