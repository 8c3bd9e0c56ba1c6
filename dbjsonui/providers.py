"""Command palette providers for core app features."""

from __future__ import annotations

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType

from .models import EngineType
from .session import ProfileSession


def _session_for(provider: Provider) -> ProfileSession | None:
    session = getattr(provider.app, "session", None)
    if isinstance(session, ProfileSession):
        return session
    return None


class ProfileSelectProvider(Provider):
    """Expose the loaded profiles to the command palette."""

    async def search(self, query: str) -> Hits:
        session = _session_for(self)
        if session is None or session.collection is None:
            return
        matcher = self.matcher(query)
        for name in session.collection.names():
            match = matcher.match(name)
            if match > 0:
                yield Hit(
                    score=match,
                    match_display=f"Edit profile: {matcher.highlight(name)}",
                    command=self._build_callback(name),
                    help="Show the profile in the editor.",
                )

    async def discover(self) -> Hits:
        session = _session_for(self)
        if session is None or session.collection is None:
            return
        for name in session.collection.names():
            yield DiscoveryHit(
                display=f"Edit profile: {name}",
                command=self._build_callback(name),
                help="Show the profile in the editor.",
            )

    def _build_callback(self, name: str) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            selector = getattr(self.app, "select_profile", None)
            if selector is None:
                return
            selector(name)

        return _run


class EngineSwitchProvider(Provider):
    """Retarget the draft at another engine from the palette."""

    async def search(self, query: str) -> Hits:
        if _session_for(self) is None:
            return
        matcher = self.matcher(query)
        for engine in EngineType:
            label = f"Set engine: {engine.value}"
            score = matcher.match(label)
            if score > 0:
                yield Hit(
                    score=score,
                    match_display=matcher.highlight(label),
                    command=self._build_callback(engine),
                    help="Untouched connection strings are replaced by the engine template.",
                )

    def _build_callback(self, engine: EngineType) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            changer = getattr(self.app, "change_engine", None)
            if changer is None:
                return
            changer(engine)

        return _run


class ReloadProvider(Provider):
    """Expose a reload action for the active file."""

    _LABEL = "Reload profile file"

    async def search(self, query: str) -> Hits:
        if _session_for(self) is None:
            return
        matcher = self.matcher(query)
        score = matcher.match(self._LABEL)
        if score > 0:
            yield Hit(
                score=score,
                match_display=matcher.highlight(self._LABEL),
                command=self._build_callback(),
                help="Trigger Ctrl+R equivalent reload.",
            )

    async def discover(self) -> Hits:
        if _session_for(self) is None:
            return
        yield DiscoveryHit(
            display=self._LABEL,
            command=self._build_callback(),
            help="Trigger Ctrl+R equivalent reload.",
        )

    def _build_callback(self) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            reload = getattr(self.app, "action_reload", None)
            if reload is None:
                return
            reload()

        return _run


__all__ = ["EngineSwitchProvider", "ProfileSelectProvider", "ReloadProvider"]
