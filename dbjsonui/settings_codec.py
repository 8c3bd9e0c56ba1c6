"""Conversion between a profile's settings block and its editable JSON text."""

from __future__ import annotations

import json
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidSettingsError
from .models import ProfileSettings


@dataclass(frozen=True, slots=True)
class SettingsAbsent:
    """No settings block; the engine defaults apply."""


@dataclass(frozen=True, slots=True)
class SettingsValid:
    """Text that parsed into a settings block."""

    block: ProfileSettings


@dataclass(frozen=True, slots=True)
class SettingsInvalid:
    """Non-empty text that could not be parsed; must never be saved."""

    raw_text: str
    reason: str


DecodedSettings = SettingsAbsent | SettingsValid | SettingsInvalid

ABSENT = SettingsAbsent()


def decode(text: str) -> DecodedSettings:
    """Parse editor text into one of the three settings states."""

    if not text.strip():
        return ABSENT
    try:
        block = ProfileSettings.model_validate_json(text)
    except PydanticValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        return SettingsInvalid(raw_text=text, reason=str(first.get("msg", exc)))
    return SettingsValid(block)


def encode(block: ProfileSettings | SettingsAbsent | None) -> str:
    """Render a settings block as pretty-printed JSON; absent renders as ``""``."""

    if block is None or isinstance(block, SettingsAbsent):
        return ""
    payload = block.model_dump(by_alias=True, exclude_none=True)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def require_settings(text: str) -> ProfileSettings | None:
    """Return the block to save, raising ``InvalidSettingsError`` for unparseable text."""

    decoded = decode(text)
    if isinstance(decoded, SettingsInvalid):
        raise InvalidSettingsError(f"Settings JSON cannot be parsed: {decoded.reason}")
    if isinstance(decoded, SettingsValid):
        return decoded.block
    return None


__all__ = [
    "ABSENT",
    "DecodedSettings",
    "SettingsAbsent",
    "SettingsInvalid",
    "SettingsValid",
    "decode",
    "encode",
    "require_settings",
]
