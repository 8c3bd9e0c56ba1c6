"""Modal file browser for choosing the profile file."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DirectoryTree, Label


def json_entries(paths: Iterable[Path]) -> list[Path]:
    """Keep directories and ``.json`` files, hiding dotfiles."""

    return [
        path
        for path in paths
        if not path.name.startswith(".") and (path.is_dir() or path.suffix.lower() == ".json")
    ]


class JsonDirectoryTree(DirectoryTree):
    """Directory tree listing only folders and JSON files."""

    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return json_entries(paths)


class PathPickerScreen(ModalScreen[str | None]):
    """Browse for a profile file; dismisses with its path or ``None``."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    CSS = """
    PathPickerScreen {
        align: center middle;
    }
    #path-picker-dialog {
        width: 80;
        height: 80%;
        border: solid $primary;
        padding: 1 2;
        background: $surface;
    }
    #path-picker-tree {
        height: 1fr;
        margin: 1 0;
    }
    #path-picker-actions {
        height: auto;
    }
    """

    def __init__(self, start: Path) -> None:
        super().__init__()
        self._start = start

    @property
    def start(self) -> Path:
        return self._start

    def compose(self) -> ComposeResult:
        with Vertical(id="path-picker-dialog"):
            yield Label("Choose a JSON profile file", id="path-picker-title")
            yield JsonDirectoryTree(self._start, id="path-picker-tree")
            with Horizontal(id="path-picker-actions"):
                yield Button("Cancel", id="path-picker-cancel")

    def action_cancel(self) -> None:
        self.dismiss(None)

    @on(DirectoryTree.FileSelected, "#path-picker-tree")
    def _file_selected(self, event: DirectoryTree.FileSelected) -> None:
        event.stop()
        self.dismiss(str(event.path))

    @on(Button.Pressed, "#path-picker-cancel")
    def _cancel_pressed(self) -> None:
        self.dismiss(None)


def picker_start(current: Path | None, cwd: Path | None = None) -> Path:
    """Folder the picker opens in: the active file's folder, else ``cwd``."""

    if current is not None and current.parent.is_dir():
        return current.parent
    return cwd or Path.cwd()


__all__ = ["JsonDirectoryTree", "PathPickerScreen", "json_entries", "picker_start"]
