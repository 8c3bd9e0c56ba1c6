"""Error taxonomy shared by the path resolver, store and session."""

from __future__ import annotations


class ProfileError(RuntimeError):
    """Base class for every failure surfaced to the user."""


class PathNotSetError(ProfileError):
    """Raised when an operation needs an active path and none is configured."""

    def __init__(self, message: str = "No configuration file path has been set.") -> None:
        super().__init__(message)


class InvalidPathError(ProfileError):
    """Raised when a candidate path is empty or whitespace."""


class ValidationError(ProfileError):
    """Client-side validation failure (blank name, blank connection string)."""


class ParseError(ProfileError):
    """Malformed settings text or a malformed configuration file."""


class InvalidSettingsError(ParseError):
    """Settings text in the editor is not valid JSON for a settings block."""


class ConfigIOError(ProfileError):
    """The configuration file could not be read or written."""


class BackendError(ProfileError):
    """Catch-all for unexpected failures while talking to the store."""


class OperationInProgressError(BackendError):
    """Raised when a second store operation starts while one is in flight."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Cannot {operation}: another operation is still running.")
        self.operation = operation


__all__ = [
    "BackendError",
    "ConfigIOError",
    "InvalidPathError",
    "InvalidSettingsError",
    "OperationInProgressError",
    "ParseError",
    "PathNotSetError",
    "ProfileError",
    "ValidationError",
]
