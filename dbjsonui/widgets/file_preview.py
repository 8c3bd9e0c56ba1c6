"""Read-only JSON preview of the loaded profile file."""

from __future__ import annotations

from typing import Callable

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Static

from dbjsonui.models import ProfileCollection
from dbjsonui.session import ProfileSession, SessionState


class FilePreview(VerticalScroll):
    """Shows the collection exactly as it was last read or written."""

    DEFAULT_CSS = """
    FilePreview {
        width: 48;
        min-width: 30;
        border-left: solid $surface-darken-1;
        padding: 0 1;
        height: 1fr;
    }

    FilePreview .preview-heading {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    def __init__(self, session: ProfileSession) -> None:
        super().__init__(id="file-preview")
        self._session = session
        self._body: Static | None = None
        self._rendered: ProfileCollection | None = None
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        yield Static("File contents", classes="preview-heading")
        self._body = Static("", id="preview-body", markup=False)
        yield self._body

    async def on_mount(self) -> None:
        self._unsubscribe = self._session.subscribe(self._handle_session_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_session_update(self, state: SessionState) -> None:
        if self._body is None or state.collection is self._rendered:
            return
        self._rendered = state.collection
        self._body.update(state.collection.to_json() if state.collection is not None else "")


__all__ = ["FilePreview"]
