"""Tests for AppConfig helpers."""

from __future__ import annotations

from pathlib import Path

from dbjsonui.config import AppConfig, LayoutState, load_config, save_config


def test_load_config_returns_defaults_when_missing() -> None:
    result = load_config()

    assert result == AppConfig()


def test_load_config_reads_values(isolated_app_config: Path) -> None:
    isolated_app_config.parent.mkdir(parents=True, exist_ok=True)
    isolated_app_config.write_text(
        """
theme = "nord"
last_path = "/srv/app/Database.json"
default_path = "~/Database.json"
exclusive_default = true

[layout]
list_width = 40
"""
    )

    result = load_config()

    assert result.theme == "nord"
    assert result.last_path == "/srv/app/Database.json"
    assert result.default_path == "~/Database.json"
    assert result.exclusive_default is True
    assert result.layout.list_width == 40


def test_load_config_ignores_blank_paths(isolated_app_config: Path) -> None:
    isolated_app_config.parent.mkdir(parents=True, exist_ok=True)
    isolated_app_config.write_text('last_path = "   "\n')

    assert load_config().last_path is None


def test_load_config_handles_toml_errors(isolated_app_config: Path) -> None:
    isolated_app_config.parent.mkdir(parents=True, exist_ok=True)
    isolated_app_config.write_text("theme = [unterminated")

    result = load_config()

    assert result == AppConfig()


def test_save_config_round_trips_values() -> None:
    config = AppConfig(
        theme="nord",
        last_path='C:\\configs\\"quoted"\\Database.json',
        default_path="/tmp/db.json",
        exclusive_default=True,
        layout=LayoutState(list_width=36),
    )

    save_config(config)

    assert load_config() == config


def test_save_config_writes_toml_sections(isolated_app_config: Path) -> None:
    save_config(AppConfig(last_path="/data/Database.json", layout=LayoutState(list_width=30)))

    content = isolated_app_config.read_text()
    assert 'last_path = "/data/Database.json"' in content
    assert "exclusive_default = false" in content
    assert "[layout]" in content
    assert "list_width = 30" in content


def test_with_last_path_updates_field() -> None:
    config = AppConfig()

    updated = config.with_last_path("/tmp/x.json")

    assert updated.last_path == "/tmp/x.json"
    assert config.last_path is None


def test_with_layout_updates_state() -> None:
    updated = AppConfig().with_layout(list_width=44)

    assert updated.layout.list_width == 44
