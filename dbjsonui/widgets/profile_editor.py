"""Form for editing the current draft profile."""

from __future__ import annotations

from typing import Callable

from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Input, Label, Select, Static, Switch, TextArea

from dbjsonui.models import EngineType
from dbjsonui.session import ProfileSession, SessionState

ENGINE_OPTIONS = tuple((engine.value, engine.value) for engine in EngineType)


class ProfileEditor(VerticalScroll):
    """Binds form controls to the session draft in both directions.

    Widget values are only written when they differ from the draft, and
    change events only reach the session when they differ from it, so the
    round trip settles after one update.
    """

    DEFAULT_CSS = """
    ProfileEditor {
        padding: 0 1;
        height: 1fr;
    }

    ProfileEditor .field-label {
        margin-top: 1;
        color: $text-muted;
    }

    ProfileEditor #connection-string {
        height: 5;
    }

    ProfileEditor #settings-text {
        height: 8;
    }

    ProfileEditor #settings-error {
        color: $error;
        text-style: bold;
        height: auto;
    }

    ProfileEditor #editor-actions {
        height: auto;
        margin-top: 1;
    }

    ProfileEditor #editor-actions Button {
        margin-right: 1;
    }
    """

    def __init__(self, session: ProfileSession) -> None:
        super().__init__(id="profile-editor")
        self._session = session
        self._unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        draft = self._session.state.draft
        yield Static("", id="editor-title")
        yield Label("Name", classes="field-label")
        yield Input(value=draft.name, placeholder="Unique profile name", id="name")
        yield Label("Engine", classes="field-label")
        yield Select(ENGINE_OPTIONS, value=draft.engine_type.value, allow_blank=False, id="engine")
        yield Label("Connection string", classes="field-label")
        yield TextArea(draft.connection_string, id="connection-string")
        yield Label("Description", classes="field-label")
        yield Input(value=draft.description or "", placeholder="Human readable note", id="description")
        with Horizontal(classes="field-label"):
            yield Switch(value=bool(draft.is_default), id="is-default")
            yield Label(" Default profile")
        yield Label("Settings (JSON)", classes="field-label")
        yield TextArea("", id="settings-text")
        yield Static("", id="settings-error")
        with Horizontal(id="editor-actions"):
            yield Button("Save", variant="primary", id="save")
            yield Button("New / Reset", id="reset")
            yield Button("Delete", variant="error", id="delete")

    async def on_mount(self) -> None:
        self._unsubscribe = self._session.subscribe(self._handle_session_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_session_update(self, state: SessionState) -> None:
        draft = state.draft
        self._sync_input("#name", draft.name)
        self._sync_input("#description", draft.description or "")
        select = self.query_one("#engine", Select)
        if select.value != draft.engine_type.value:
            select.value = draft.engine_type.value
        self._sync_text("#connection-string", draft.connection_string)
        self._sync_text("#settings-text", state.settings_text)
        switch = self.query_one("#is-default", Switch)
        if switch.value != bool(draft.is_default):
            switch.value = bool(draft.is_default)

        if state.selection.is_draft:
            title = "New profile (unsaved)"
        else:
            title = f"Editing: {escape(state.selection.name or '')}"
        if state.dirty:
            title += "  (modified)"
        self.query_one("#editor-title", Static).update(title)
        error = self.query_one("#settings-error", Static)
        error.update("Settings JSON cannot be parsed; fix it before saving." if state.settings_invalid else "")

        self.query_one("#save", Button).disabled = state.busy or not state.configured
        self.query_one("#reset", Button).disabled = state.saving
        self.query_one("#delete", Button).disabled = state.busy or state.stale or state.selection.is_draft

    def _sync_input(self, selector: str, value: str) -> None:
        widget = self.query_one(selector, Input)
        if widget.value != value:
            widget.value = value

    def _sync_text(self, selector: str, value: str) -> None:
        widget = self.query_one(selector, TextArea)
        if widget.text != value:
            widget.load_text(value)

    # Events can arrive after a later programmatic update, so read the
    # widget rather than the event payload.
    @on(Input.Changed, "#name")
    def _name_changed(self, event: Input.Changed) -> None:
        value = event.input.value
        if value != self._session.state.draft.name:
            self._session.edit(name=value)

    @on(Input.Changed, "#description")
    def _description_changed(self, event: Input.Changed) -> None:
        value = event.input.value
        if value != (self._session.state.draft.description or ""):
            self._session.edit(description=value)

    @on(Select.Changed, "#engine")
    def _engine_changed(self, event: Select.Changed) -> None:
        value = event.select.value
        if value is Select.BLANK:
            return
        if value != self._session.state.draft.engine_type.value:
            self._session.change_engine(str(value))

    @on(TextArea.Changed, "#connection-string")
    def _connection_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text != self._session.state.draft.connection_string:
            self._session.edit(connection_string=text)

    @on(TextArea.Changed, "#settings-text")
    def _settings_changed(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text != self._session.state.settings_text:
            self._session.set_settings_text(text)

    @on(Switch.Changed, "#is-default")
    def _default_changed(self, event: Switch.Changed) -> None:
        value = event.switch.value
        if value != bool(self._session.state.draft.is_default):
            self._session.edit(is_default=value)


__all__ = ["ENGINE_OPTIONS", "ProfileEditor"]
