"""Host-provided file index records consumed by the title cache."""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Mapping

from .config import DEFAULT_FILE_EXTENSIONS


@dataclass(frozen=True, slots=True)
class FileRecord:
    file_id: str
    fullname: str
    ext: str
    cat_id: str
    basename: str


@dataclass(slots=True)
class FileIndex:
    """Authoritative file set produced by the host before titles are indexed."""

    files: Mapping[str, FileRecord] = field(default_factory=dict)
    file_extensions: Mapping[str, str] = field(
        default_factory=lambda: dict(DEFAULT_FILE_EXTENSIONS)
    )
    categories: Mapping[str, object] = field(default_factory=dict)

    def has_category(self, cat_id: str) -> bool:
        """Return True when *cat_id* is a known, defined category."""
        return self.categories.get(cat_id) is not None
