"""App-level tests driving the Textual shell."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from textual.widgets import ListView

from dbjsonui.app import DbJsonApp, build_parser
from dbjsonui.config import AppConfig, load_config, save_config
from dbjsonui.errors import ProfileError
from dbjsonui.models import EngineType
from dbjsonui.providers import EngineSwitchProvider, ProfileSelectProvider, ReloadProvider
from dbjsonui.store import DefaultPolicy
from dbjsonui.templates import template_for
from dbjsonui.widgets import PathPickerScreen, ProfileList
from dbjsonui.widgets.path_picker import json_entries, picker_start
from dbjsonui.widgets.status_bar import status_parts


def _write(path: Path, *names: str) -> None:
    entries = [{"name": name, "connectionString": f"cs-{name}", "engineType": "Sqlite"} for name in names]
    path.write_text(json.dumps({"databases": entries}))


class _DummyScreen:
    """Minimal stub so providers can reach the app without pushing a screen."""

    def __init__(self, app: DbJsonApp) -> None:
        self.app = app
        self.focused = None


@pytest.mark.anyio
async def test_app_bootstraps_remembered_path(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "alpha", "beta")
    save_config(AppConfig(last_path=str(db_file)))

    app = DbJsonApp()
    async with app.run_test() as pilot:
        await pilot.pause()
        state = app.session.state
        assert state.path == db_file
        assert state.selection.name == "alpha"
        assert app.query_one(ProfileList).item_names == ("alpha", "beta")


@pytest.mark.anyio
async def test_app_starts_unconfigured_without_paths() -> None:
    app = DbJsonApp()
    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.session.state.path is None
        assert app.session.state.selection.is_draft


@pytest.mark.anyio
async def test_initial_path_is_applied_and_remembered(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one")

    app = DbJsonApp(initial_path=str(db_file))
    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.session.state.selection.name == "one"

    assert load_config().last_path == str(db_file)


@pytest.mark.anyio
async def test_no_remember_keeps_config_untouched(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one")

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.session.state.path == db_file

    assert load_config().last_path is None


@pytest.mark.anyio
async def test_save_action_rejects_invalid_settings(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one")
    before = db_file.read_bytes()

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        app.session.set_settings_text("{broken")
        app.action_save()
        await pilot.pause()
        assert app.session.state.settings_invalid

    assert db_file.read_bytes() == before


@pytest.mark.anyio
async def test_save_and_delete_actions_round_trip(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one")

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        app.action_reset()
        app.session.edit(name="two")
        app.action_save()
        await pilot.pause()
        assert app.session.state.selection.name == "two"
        app.action_delete()
        await pilot.pause()
        assert app.session.state.selection.name == "one"

    data = json.loads(db_file.read_text())
    assert [entry["name"] for entry in data["databases"]] == ["one"]


@pytest.mark.anyio
async def test_profile_select_provider_switches_editor(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one", "two")

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        provider = ProfileSelectProvider(_DummyScreen(app))  # type: ignore[arg-type]
        hits = [hit async for hit in provider.discover()]
        target = next(hit for hit in hits if "two" in str(hit.display))
        await target.command()
        assert app.session.state.selection.name == "two"


@pytest.mark.anyio
async def test_engine_provider_and_reload_provider(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    db_file.write_text('{"databases": []}')

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        engine_hits = [hit async for hit in EngineSwitchProvider(_DummyScreen(app)).search("DuckDB")]  # type: ignore[arg-type]
        assert engine_hits
        await max(engine_hits, key=lambda hit: hit.score).command()
        assert app.session.state.draft.connection_string == template_for(EngineType.DUCKDB)

        _write(db_file, "fresh")
        reload_hits = [hit async for hit in ReloadProvider(_DummyScreen(app)).discover()]  # type: ignore[arg-type]
        await reload_hits[0].command()
        assert app.session.state.selection.name == "fresh"


def test_status_parts_describe_state() -> None:
    app = DbJsonApp(remember_path=False)

    parts = status_parts(app.session.state)

    assert parts[0] == "File: not set"
    assert parts[2] == "Current: draft"


def test_parser_accepts_path_and_flags(tmp_path: Path) -> None:
    args = build_parser().parse_args([str(tmp_path / "x.json"), "--no-remember", "--log-level", "DEBUG"])

    assert args.path == str(tmp_path / "x.json")
    assert args.no_remember is True
    assert args.log_level == "DEBUG"


def test_exclusive_default_config_selects_exclusive_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("dbjsonui.app._load_app_config", lambda: AppConfig(exclusive_default=True))

    app = DbJsonApp(remember_path=False)

    assert app.config.exclusive_default is True
    assert app.session.resolver.active_path is None
    assert app._store.default_policy is DefaultPolicy.EXCLUSIVE


@pytest.mark.anyio
async def test_duplicate_names_keep_one_row_each(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "dup", "dup", "other")

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        assert app.query_one(ProfileList).item_names == ("dup", "dup", "other")
        app.select_profile("other")
        await pilot.pause()
        assert app.query_one("#profile-list", ListView).index == 2


@pytest.mark.anyio
async def test_browse_applies_picked_file(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "picked")

    app = DbJsonApp(remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        app.action_browse()
        await pilot.pause()
        picker = app.screen
        assert isinstance(picker, PathPickerScreen)
        await picker.dismiss(str(db_file))
        await pilot.pause()
        assert app.session.state.path == db_file
        assert app.session.state.selection.name == "picked"


@pytest.mark.anyio
async def test_browse_cancel_keeps_path(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one")

    app = DbJsonApp(initial_path=str(db_file), remember_path=False)
    async with app.run_test() as pilot:
        await pilot.pause()
        app.action_browse()
        await pilot.pause()
        picker = app.screen
        assert isinstance(picker, PathPickerScreen)
        assert picker.start == tmp_path
        await pilot.press("escape")
        await pilot.pause()
        assert not isinstance(app.screen, PathPickerScreen)
        assert app.session.state.path == db_file


def test_picker_lists_folders_and_json_files(tmp_path: Path) -> None:
    (tmp_path / "nested").mkdir()
    for name in ("a.json", "B.JSON", "notes.txt", ".hidden.json"):
        (tmp_path / name).write_text("{}")

    kept = json_entries(sorted(tmp_path.iterdir()))

    assert sorted(path.name for path in kept) == ["B.JSON", "a.json", "nested"]


def test_picker_starts_next_to_active_file(tmp_path: Path) -> None:
    assert picker_start(tmp_path / "Database.json") == tmp_path
    assert picker_start(tmp_path / "gone" / "Database.json", cwd=tmp_path) == tmp_path
    assert picker_start(None, cwd=tmp_path) == tmp_path


def test_status_marks_unloaded_file(tmp_path: Path) -> None:
    db_file = tmp_path / "Database.json"
    _write(db_file, "one")
    app = DbJsonApp(remember_path=False)
    app.session.apply_path(str(db_file))
    with pytest.raises(ProfileError):
        app.session.apply_path(str(tmp_path / "missing.json"))

    parts = status_parts(app.session.state)

    assert parts[0].endswith("(not loaded)")
