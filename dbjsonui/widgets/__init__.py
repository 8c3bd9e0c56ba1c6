"""Widget library for the Textual UI."""

from __future__ import annotations

from .file_preview import FilePreview
from .profile_editor import ProfileEditor
from .profile_list import ProfileList
from .path_picker import PathPickerScreen
from .status_bar import StatusBar

__all__ = ["FilePreview", "PathPickerScreen", "ProfileEditor", "ProfileList", "StatusBar"]
