"""Derives the single "current" profile from a freshly loaded collection."""

from __future__ import annotations

from dataclasses import dataclass

from . import settings_codec
from .models import Profile, ProfileCollection
from .templates import new_draft


@dataclass(frozen=True, slots=True)
class Selection:
    """Profile presented as current, plus its settings rendered as text."""

    name: str | None
    profile: Profile
    settings_text: str

    @property
    def is_draft(self) -> bool:
        return self.name is None


def draft_selection() -> Selection:
    return Selection(name=None, profile=new_draft(), settings_text="")


def select_profile(profile: Profile) -> Selection:
    return Selection(
        name=profile.name,
        profile=profile,
        settings_text=settings_codec.encode(profile.settings),
    )


def reconcile(
    collection: ProfileCollection,
    requested: str | None = None,
    previous: str | None = None,
) -> Selection:
    """Pick the current profile; the first matching rule wins.

    1. empty collection: an unsaved draft
    2. the requested name, when present in the collection
    3. the previously selected name, when it survived
    4. the first profile in collection order
    """

    first = collection.first()
    if first is None:
        return draft_selection()
    for candidate in (requested, previous):
        if candidate is None:
            continue
        found = collection.get(candidate)
        if found is not None:
            return select_profile(found)
    return select_profile(first)


__all__ = ["Selection", "draft_selection", "reconcile", "select_profile"]
