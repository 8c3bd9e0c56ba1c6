"""Status bar widget that mirrors session information."""

from __future__ import annotations

from typing import Callable

from rich.markup import escape
from textual.widgets import Static

from dbjsonui.session import ProfileSession, SessionState


class StatusBar(Static):
    """Compact status strip rendered above Textual's footer."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-3;
        color: $text;
    }
    """

    def __init__(self, session: ProfileSession) -> None:
        super().__init__("", id="status-bar")
        self._session = session
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._session.subscribe(self._handle_session_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_session_update(self, state: SessionState) -> None:
        self.update(" | ".join(status_parts(state)))


def status_parts(state: SessionState) -> list[str]:
    path = escape(str(state.path)) if state.path else "not set"
    if state.stale:
        path += " (not loaded)"
    count = len(state.collection.databases) if state.collection is not None else 0
    current = escape(state.selection.name) if state.selection.name else "draft"
    if state.loading:
        activity = "Loading…"
    elif state.saving:
        activity = "Saving…"
    else:
        activity = "Idle"
    return [
        f"File: {path}",
        f"Profiles: {count}",
        f"Current: {current}",
        activity,
    ]


__all__ = ["StatusBar", "status_parts"]
