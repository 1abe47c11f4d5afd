"""Public Python API for entrytitles."""

from __future__ import annotations

from pathlib import Path
from collections.abc import Mapping

from .cache import clear_titles as _clear_store
from .config import (
    Config,
    config_dir_context,
    config_from_json,
    load_config,
    resolve_titles_cachefile,
)
from .config import set_config_dir as _set_config_dir
from .models import FileIndex, FileRecord
from .services.cache_service import init_caching, load_cache
from .services.index_service import ReindexDirective, TitleIndexRun
from .services.index_service import index_titles as _index_titles
from .services.title_extract_service import (
    TitleExtractorRegistry,
    default_registry,
)
from .services.title_extract_service import get_title as _get_title
from .utils import build_file_index


class EntryTitlesError(ValueError):
    """Raised when the entrytitles public API input is invalid."""


def set_config_dir(path: Path | str | None) -> None:
    """Set the directory holding config.json and the default state dir."""
    _set_config_dir(path)


def _resolve_config(
    config: Config | Mapping[str, object] | str | None,
    *,
    use_caching: bool | None,
    titles_cachefile: Path | str | None,
) -> Config:
    if config is None:
        base = load_config()
    elif isinstance(config, Config):
        base = config
    else:
        try:
            base = config_from_json(config)
        except ValueError as exc:
            raise EntryTitlesError(str(exc)) from exc
    overrides: dict[str, object] = {}
    if use_caching is not None:
        overrides["use_caching"] = use_caching
    if titles_cachefile is not None:
        overrides["titles_cachefile"] = str(titles_cachefile)
    if overrides:
        base = config_from_json(overrides, base=base)
    return base


def _resolve_file_index(source: FileIndex | Path | str, config: Config) -> FileIndex:
    if isinstance(source, FileIndex):
        return source
    try:
        return build_file_index(source, config.file_extensions)
    except (FileNotFoundError, NotADirectoryError) as exc:
        raise EntryTitlesError(str(exc)) from exc


def index_titles(
    source: FileIndex | Path | str,
    *,
    reindex_all: bool = False,
    reindex: bool = False,
    reindex_cat: str | None = None,
    delindex: bool = False,
    use_caching: bool | None = None,
    titles_cachefile: Path | str | None = None,
    config: Config | Mapping[str, object] | str | None = None,
    config_dir: Path | str | None = None,
    registry: TitleExtractorRegistry | None = None,
) -> TitleIndexRun:
    """Index the titles of *source* (a FileIndex or a data directory)."""

    with config_dir_context(config_dir):
        effective = _resolve_config(
            config, use_caching=use_caching, titles_cachefile=titles_cachefile
        )
        file_index = _resolve_file_index(source, effective)
        directive = ReindexDirective.from_params(
            {
                "reindex_all": reindex_all,
                "reindex": reindex,
                "reindex_cat": reindex_cat,
                "delindex": delindex,
            }
        )
        return _index_titles(file_index, directive, config=effective, registry=registry)


def load_titles(
    *,
    titles_cachefile: Path | str | None = None,
    config: Config | Mapping[str, object] | str | None = None,
    config_dir: Path | str | None = None,
) -> dict[str, str]:
    """Return the persisted titles without reindexing (empty when unavailable)."""

    with config_dir_context(config_dir):
        effective = _resolve_config(
            config, use_caching=None, titles_cachefile=titles_cachefile
        )
        titles = load_cache(
            resolve_titles_cachefile(effective),
            enabled=init_caching(effective),
        )
    return titles or {}


def clear_titles(
    *,
    titles_cachefile: Path | str | None = None,
    config: Config | Mapping[str, object] | str | None = None,
    config_dir: Path | str | None = None,
) -> int:
    """Remove the persisted title store, returning how many titles it held."""

    with config_dir_context(config_dir):
        effective = _resolve_config(
            config, use_caching=None, titles_cachefile=titles_cachefile
        )
        return _clear_store(resolve_titles_cachefile(effective))


def get_title(
    record: FileRecord,
    file_extensions: Mapping[str, str] | None = None,
    *,
    registry: TitleExtractorRegistry | None = None,
) -> str:
    """Extract the title of a single entry file without touching the cache."""

    extensions = file_extensions if file_extensions is not None else Config().file_extensions
    return _get_title(record, extensions, registry or default_registry())
