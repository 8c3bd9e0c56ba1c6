"""Shared fixtures keeping tests away from the user's real config."""

from __future__ import annotations

from pathlib import Path

import pytest

from dbjsonui import config as config_module


@pytest.fixture(autouse=True)
def isolated_app_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    config_path = tmp_path / "app-config" / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    return config_path


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
