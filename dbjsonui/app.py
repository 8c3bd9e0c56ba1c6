"""Textual application entry point for dbjsonui."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Sequence

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, Input

from . import __version__
from .config import AppConfig, load_config, save_config
from .errors import InvalidPathError, InvalidSettingsError, ProfileError, ValidationError
from .models import EngineType
from .paths import ConfigPathSlot, MemoryPathSlot, PathResolver
from .providers import EngineSwitchProvider, ProfileSelectProvider, ReloadProvider
from .session import ProfileSession, SessionState
from .store import ConfigStore, DefaultPolicy
from .widgets import FilePreview, PathPickerScreen, ProfileEditor, ProfileList, StatusBar
from .widgets.path_picker import picker_start

LOG = logging.getLogger(__name__)

_CLIENT_ERRORS = (InvalidPathError, InvalidSettingsError, ValidationError)


def _load_app_config() -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config()


class DbJsonApp(App[None]):
    """Editor for the profiles of one JSON connection file."""

    TITLE = "Database JSON Manager"
    COMMANDS = App.COMMANDS | {ProfileSelectProvider, EngineSwitchProvider, ReloadProvider}
    CSS = """
    Screen {
        layout: vertical;
    }
    #path-bar {
        height: auto;
        padding: 0 1;
    }
    #path-input {
        width: 1fr;
    }
    #content {
        layout: horizontal;
        height: 1fr;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+s", "save", "Save"),
        ("ctrl+n", "reset", "New"),
        ("ctrl+r", "reload", "Reload"),
        ("ctrl+d", "delete", "Delete"),
        ("ctrl+o", "browse", "Browse"),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(self, *, initial_path: str | None = None, remember_path: bool = True) -> None:
        super().__init__()
        self._config = _load_app_config()
        slot = ConfigPathSlot() if remember_path else MemoryPathSlot()
        self._resolver = PathResolver(slot=slot, config=self._config)
        policy = DefaultPolicy.EXCLUSIVE if self._config.exclusive_default else DefaultPolicy.PERMISSIVE
        self._store = ConfigStore(self._resolver, default_policy=policy)
        self._session = ProfileSession(self._resolver, self._store)
        self._initial_path = initial_path
        self._shown_path: Path | None = None
        self._session_unsubscribe: Callable[[], None] | None = None

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header(show_clock=True)
        with Horizontal(id="path-bar"):
            yield Input(placeholder="Path to the JSON profile file (relative or absolute)", id="path-input")
            yield Button("Browse…", id="browse-path")
            yield Button("Apply & load", id="apply-path")
        with Horizontal(id="content"):
            yield ProfileList(self._session, width=self._config.layout.list_width)
            yield ProfileEditor(self._session)
            yield FilePreview(self._session)
        yield StatusBar(self._session)
        yield Footer()

    async def on_mount(self) -> None:
        if self._config.theme in self.available_themes:
            self.theme = self._config.theme
        self._session_unsubscribe = self._session.subscribe(self._handle_session_state)
        if self._initial_path is not None:
            self.apply_path(self._initial_path)
        else:
            self._run("Startup", self._session.bootstrap)

    async def _shutdown(self) -> None:
        if self._session_unsubscribe:
            self._session_unsubscribe()
            self._session_unsubscribe = None
        await super()._shutdown()

    @property
    def session(self) -> ProfileSession:
        """Expose the profile session for tests and command providers."""

        return self._session

    @property
    def config(self) -> AppConfig:
        return self._config

    def watch_theme(self, theme: str) -> None:
        if theme == self._config.theme:
            return
        self._config = self._config.with_theme(theme)
        # Re-read so the remembered path written by the resolver is kept.
        save_config(load_config().with_theme(theme))

    def apply_path(self, candidate: str) -> bool:
        return self._run(
            "Apply path",
            self._session.apply_path,
            candidate,
            success="Path updated and file loaded.",
        )

    def select_profile(self, name: str) -> bool:
        return self._run("Select", self._session.select, name)

    def change_engine(self, engine: EngineType | str) -> bool:
        return self._run("Change engine", self._session.change_engine, engine)

    def action_save(self) -> None:
        self._run("Save", self._session.save, success="Profile saved.")

    def action_reset(self) -> None:
        self._session.reset()

    def action_delete(self) -> None:
        name = self._session.selected_name
        self._run("Delete", self._session.delete, success=f"Deleted {name}." if name else None)

    def action_reload(self) -> None:
        self._run("Reload", self._session.reload, success="File reloaded.")

    def action_browse(self) -> None:
        start = picker_start(self._session.state.path)
        self.push_screen(PathPickerScreen(start), callback=self._path_picked)

    def _path_picked(self, path: str | None) -> None:
        if path:
            self.apply_path(path)

    @on(Button.Pressed, "#browse-path")
    def _browse_pressed(self) -> None:
        self.action_browse()

    @on(Button.Pressed, "#apply-path")
    def _apply_path_pressed(self) -> None:
        self.apply_path(self.query_one("#path-input", Input).value)

    @on(Input.Submitted, "#path-input")
    def _path_submitted(self, event: Input.Submitted) -> None:
        self.apply_path(event.value)

    @on(Button.Pressed, "#save")
    def _save_pressed(self) -> None:
        self.action_save()

    @on(Button.Pressed, "#reset")
    def _reset_pressed(self) -> None:
        self.action_reset()

    @on(Button.Pressed, "#delete")
    def _delete_pressed(self) -> None:
        self.action_delete()

    def _run(
        self,
        label: str,
        operation: Callable[..., SessionState],
        *args: object,
        success: str | None = None,
    ) -> bool:
        try:
            operation(*args)
        except _CLIENT_ERRORS as exc:
            self.notify(str(exc), title="Invalid input", severity="warning")
            return False
        except ProfileError as exc:
            LOG.info("%s failed: %s", label, exc)
            self.notify(str(exc), title=f"{label} failed", severity="error")
            return False
        if success:
            self.notify(success, severity="information")
        return True

    def _handle_session_state(self, state: SessionState) -> None:
        self.sub_title = str(state.path) if state.path else "No file selected"
        if state.path != self._shown_path:
            self._shown_path = state.path
            self.query_one("#path-input", Input).value = str(state.path) if state.path else ""
        self.query_one("#apply-path", Button).disabled = state.busy
        self.query_one("#browse-path", Button).disabled = state.busy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dbjsonui",
        description="Manage database connection profiles in a JSON file.",
    )
    parser.add_argument("path", nargs="?", help="profile file to open instead of the remembered one")
    parser.add_argument("--no-remember", action="store_true", help="do not persist the active path")
    parser.add_argument("--log-file", type=Path, default=None, help="write diagnostics to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="minimum level written to --log-file",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(log_file: Path | None, level: str) -> None:
    """Route log records to a file; the terminal belongs to the UI."""

    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Invoke the Textual application."""

    args = build_parser().parse_args(argv)
    configure_logging(args.log_file, args.log_level)
    DbJsonApp(initial_path=args.path, remember_path=not args.no_remember).run()


if __name__ == "__main__":
    main()
