"""Sidebar list of the profiles in the loaded file."""

from __future__ import annotations

from typing import Callable

from rich.markup import escape
from textual import on
from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Label, ListItem, ListView, Static

from dbjsonui.models import Profile, ProfileCollection
from dbjsonui.session import ProfileSession, SessionState


class ProfileList(Container):
    """Lists profiles in file order and highlights the current one."""

    DEFAULT_CSS = """
    ProfileList {
        width: 32;
        min-width: 24;
        border-right: solid $surface-darken-1;
        padding: 1;
        height: 1fr;
        background: $surface-darken-2;
    }

    ProfileList .list-heading {
        text-style: bold;
        margin-bottom: 1;
    }

    #profile-list {
        height: 1fr;
        border: round $primary 30%;
    }

    #profile-list .current {
        text-style: bold;
    }

    #profile-empty {
        color: $text-muted;
        padding-top: 1;
    }
    """

    def __init__(self, session: ProfileSession, *, width: int | None = None) -> None:
        super().__init__(id="profile-sidebar")
        self._session = session
        self._list: ListView | None = None
        self._empty: Static | None = None
        self._items: list[ProfileListItem] = []
        self._rendered: ProfileCollection | None = None
        self._unsubscribe: Callable[[], None] | None = None
        if width:
            self.styles.width = width

    def compose(self) -> ComposeResult:
        yield Static("Profiles", classes="list-heading")
        self._list = ListView(id="profile-list")
        yield self._list
        self._empty = Static("", id="profile-empty")
        yield self._empty

    async def on_mount(self) -> None:
        self._unsubscribe = self._session.subscribe(self._handle_session_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    @property
    def item_names(self) -> tuple[str, ...]:
        return tuple(item.profile_name for item in self._items)

    def _handle_session_update(self, state: SessionState) -> None:
        if self._list is None:
            return
        if state.collection is not self._rendered:
            self._rebuild(state.collection)
            # Rows are mounted asynchronously; highlight once they exist.
            self.call_after_refresh(self._render_current)
        else:
            self._render_current(state)
        self._list.disabled = state.busy
        if self._empty is not None:
            self._empty.update(_empty_hint(state))

    def _rebuild(self, collection: ProfileCollection | None) -> None:
        assert self._list is not None
        self._rendered = collection
        self._list.clear()
        self._items = []
        if collection is None:
            return
        for profile in collection.databases:
            item = ProfileListItem(profile)
            self._items.append(item)
            self._list.append(item)

    def _render_current(self, state: SessionState | None = None) -> None:
        if self._list is None:
            return
        state = state or self._session.state
        current = state.selection.name
        # Duplicate names in a hand-edited file: the first row wins.
        target = next((idx for idx, item in enumerate(self._items) if item.profile_name == current), None)
        for idx, item in enumerate(self._items):
            item.set_class(idx == target, "current")
        if target is not None and self._list.index != target:
            self._list.index = target

    @on(ListView.Selected, "#profile-list")
    def _handle_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, ProfileListItem):
            selector = getattr(self.app, "select_profile", None)
            if selector is not None:
                selector(item.profile_name)
            event.stop()


class ProfileListItem(ListItem):
    """List row showing the profile name, engine and default marker."""

    def __init__(self, profile: Profile) -> None:
        marker = " *" if profile.is_default else ""
        label = f"{escape(profile.name)}{marker}\n[dim]{profile.engine_type.value}[/dim]"
        super().__init__(Label(label))
        self.profile_name = profile.name


def _empty_hint(state: SessionState) -> str:
    if not state.configured:
        return "No file selected. Enter a path above."
    if state.collection is None:
        return "File not loaded."
    if not state.collection.databases:
        return "No profiles yet. Fill in the form and save."
    return ""


__all__ = ["ProfileList", "ProfileListItem"]
