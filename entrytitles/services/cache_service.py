"""Shared helpers for loading and saving the persisted title cache."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path

from ..config import Config

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SaveOutcome:
    saved: bool
    path: Path | None = None
    error: str | None = None


def init_caching(config: Config) -> bool:
    """Return True if the title cache can be used for this run."""

    if not config.use_caching:
        logger.info("EntryTitles: cache disabled by configuration")
        return False
    from ..cache import backend_available  # local import

    if not backend_available():
        logger.info("EntryTitles: cache disabled, SQLite backend not available")
        return False
    logger.info("EntryTitles: using caching")
    return True


def load_cache(cachefile: Path, *, enabled: bool) -> dict[str, str] | None:
    """Load the persisted titles, returning None when the cache is unusable."""

    if not enabled:
        return None
    from ..cache import load_titles  # local import

    try:
        titles = load_titles(cachefile)
    except FileNotFoundError:
        logger.info("EntryTitles: no cached state at %s; flushing caches", cachefile)
        return None
    except (OSError, sqlite3.DatabaseError) as exc:
        logger.warning("EntryTitles: unreadable cache %s (%s); flushing caches", cachefile, exc)
        return None
    logger.info("EntryTitles: using cached state (%d titles)", len(titles))
    return titles


def save_cache(
    cachefile: Path,
    titles: dict[str, str],
    *,
    enabled: bool,
) -> SaveOutcome:
    """Persist *titles*; failures are logged and reported, never raised."""

    if not enabled:
        return SaveOutcome(saved=False)
    from ..cache import store_titles  # local import

    logger.info("EntryTitles: saving caches")
    try:
        path = store_titles(cachefile, titles)
    except (OSError, sqlite3.Error) as exc:
        logger.warning("EntryTitles: could not save cache %s: %s", cachefile, exc)
        return SaveOutcome(saved=False, path=Path(cachefile), error=str(exc))
    return SaveOutcome(saved=True, path=path)
