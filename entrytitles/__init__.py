"""entrytitles package initialization."""

from __future__ import annotations

from .api import (
    EntryTitlesError,
    clear_titles,
    get_title,
    index_titles,
    load_titles,
    set_config_dir,
)
from .models import FileIndex, FileRecord

__all__ = [
    "__version__",
    "EntryTitlesError",
    "FileIndex",
    "FileRecord",
    "clear_titles",
    "get_title",
    "get_version",
    "index_titles",
    "load_titles",
    "set_config_dir",
]

__version__ = "0.51.0"


def get_version() -> str:
    """Return the current package version."""
    return __version__
