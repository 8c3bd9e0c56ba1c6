"""App configuration loading helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

CONFIG_FILE = Path.home() / ".config" / "dbjsonui" / "config.toml"

LOG = logging.getLogger(__name__)


class LayoutState(BaseModel):
    """Persisted layout hints for the TUI."""

    list_width: int | None = None


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    theme: str = "textual-dark"
    last_path: str | None = None
    default_path: str | None = None
    exclusive_default: bool = False
    layout: LayoutState = Field(default_factory=LayoutState)

    def with_last_path(self, path: str | None) -> AppConfig:
        """Return a copy with the remembered profile file path updated."""

        return self.model_copy(update={"last_path": path})

    def with_theme(self, theme: str) -> AppConfig:
        return self.model_copy(update={"theme": theme})

    def with_layout(self, **updates: object) -> AppConfig:
        """Return a copy with layout state changes applied."""

        layout = self.layout.model_copy(update=updates)
        return self.model_copy(update={"layout": layout})


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError) as exc:
        LOG.warning("Ignoring unreadable app config", extra={"path": str(CONFIG_FILE), "error": str(exc)})
        return AppConfig()

    return AppConfig(
        theme=data.get("theme", AppConfig.model_fields["theme"].default),
        last_path=data.get("last_path"),
        default_path=data.get("default_path"),
        exclusive_default=data.get(
            "exclusive_default", AppConfig.model_fields["exclusive_default"].default
        ),
        layout=data.get("layout", LayoutState()),
    )


def save_config(config: AppConfig) -> None:
    """Persist configuration to disk."""

    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f"theme = {_quote(config.theme)}",
        f"exclusive_default = {str(config.exclusive_default).lower()}",
    ]
    if config.last_path:
        lines.append(f"last_path = {_quote(config.last_path)}")
    if config.default_path:
        lines.append(f"default_path = {_quote(config.default_path)}")
    if config.layout.list_width is not None:
        lines.append("")
        lines.append("[layout]")
        lines.append(f"list_width = {config.layout.list_width}")
    CONFIG_FILE.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _quote(value: str) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes.
    return json.dumps(value, ensure_ascii=False)


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if isinstance(raw, dict):
        for key in ("theme", "last_path", "default_path"):
            value = raw.get(key)
            if isinstance(value, str) and value.strip():
                data[key] = value
        exclusive = raw.get("exclusive_default")
        if isinstance(exclusive, bool):
            data["exclusive_default"] = exclusive
        layout = raw.get("layout")
        if isinstance(layout, dict):
            state: dict[str, object] = {}
            list_width = layout.get("list_width")
            if isinstance(list_width, int):
                state["list_width"] = list_width
            data["layout"] = LayoutState(**state)
    return data


__all__ = ["AppConfig", "CONFIG_FILE", "LayoutState", "load_config", "save_config"]
