"""Logic helpers for the `entrytitles index` command."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

from .cache_service import init_caching, load_cache, save_cache
from .title_extract_service import TitleExtractorRegistry, default_registry, get_title
from ..config import Config, resolve_titles_cachefile
from ..models import FileIndex

logger = logging.getLogger(__name__)

CATEGORY_SEPARATOR = "/"


class ReindexMode(str, Enum):
    NONE = "none"
    ALL = "all"
    CATEGORY = "category"
    INCREMENTAL = "incremental"
    DELETE = "delete"


class IndexStatus(str, Enum):
    UP_TO_DATE = "up_to_date"
    STORED = "stored"
    MEMORY_ONLY = "memory_only"
    UNSAVED = "unsaved"


def normalize_category(value: str | None) -> str | None:
    """Drop one leading and one trailing separator; empty means none."""

    if value is None:
        return None
    cleaned = str(value)
    if cleaned.startswith(CATEGORY_SEPARATOR):
        cleaned = cleaned[1:]
    if cleaned.endswith(CATEGORY_SEPARATOR):
        cleaned = cleaned[:-1]
    return cleaned or None


def is_in_category(cat_id: str, category: str) -> bool:
    """Return True if *cat_id* is *category* or one of its sub-categories."""

    if cat_id == category:
        return True
    return cat_id.startswith(category + CATEGORY_SEPARATOR)


def _param_flag(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() not in {"", "0"}
    return bool(value)


@dataclass(frozen=True, slots=True)
class ReindexDirective:
    """Reindex request derived once per run from request parameters."""

    reindex_all: bool = False
    reindex: bool = False
    category: str | None = None
    delete: bool = False

    @classmethod
    def from_params(cls, params: Mapping[str, object]) -> "ReindexDirective":
        raw_category = params.get("reindex_cat")
        return cls(
            reindex_all=_param_flag(params.get("reindex_all")),
            reindex=_param_flag(params.get("reindex")),
            category=normalize_category(
                None if raw_category is None else str(raw_category)
            ),
            delete=_param_flag(params.get("delindex")),
        )

    @property
    def mode(self) -> ReindexMode:
        if self.reindex_all:
            return ReindexMode.ALL
        if self.category:
            return ReindexMode.CATEGORY
        if self.reindex:
            return ReindexMode.INCREMENTAL
        if self.delete:
            return ReindexMode.DELETE
        return ReindexMode.NONE


@dataclass(slots=True)
class IndexResult:
    status: IndexStatus
    mode: ReindexMode
    mutated: frozenset[str] = frozenset()
    cache_path: Path | None = None
    persisted: bool = False
    save_error: str | None = None
    entries: int = 0


@dataclass(slots=True)
class TitleIndexRun:
    """Title cache state owned by a single indexing run."""

    file_index: FileIndex
    cachefile: Path
    registry: TitleExtractorRegistry = field(default_factory=default_registry)
    caching_enabled: bool = False
    titles: dict[str, str] = field(default_factory=dict)
    applied_mode: ReindexMode = ReindexMode.NONE
    result: IndexResult | None = None

    def title_for(self, file_id: str, default: str | None = None) -> str | None:
        return self.titles.get(file_id, default)

    def extract_title(self, file_id: str) -> str:
        record = self.file_index.files[file_id]
        return get_title(record, self.file_index.file_extensions, self.registry)


def load(run: TitleIndexRun) -> bool:
    """Adopt the persisted titles on *run*; reset to empty when unusable."""

    titles = load_cache(run.cachefile, enabled=run.caching_enabled)
    run.titles.clear()
    if titles is None:
        return False
    run.titles.update(titles)
    return True


def reconcile(
    run: TitleIndexRun,
    directive: ReindexDirective,
    loaded_ok: bool,
) -> set[str]:
    """Bring ``run.titles`` in line with the file index; return mutated ids."""

    files = run.file_index.files
    mutated: set[str] = set()

    if directive.reindex_all or not loaded_ok:
        logger.info("EntryTitles: reindexing ALL")
        rebuilt = {file_id: run.extract_title(file_id) for file_id in files}
        mutated.update(rebuilt)
        mutated.update(file_id for file_id in run.titles if file_id not in rebuilt)
        run.titles.clear()
        run.titles.update(rebuilt)
        run.applied_mode = ReindexMode.ALL
        return mutated

    category = directive.category
    if category and run.file_index.has_category(category):
        logger.info("EntryTitles: reindexing %s", category)
        for file_id, record in files.items():
            if is_in_category(record.cat_id, category):
                run.titles[file_id] = run.extract_title(file_id)
                mutated.add(file_id)
        run.applied_mode = ReindexMode.CATEGORY
        return mutated
    if category:
        logger.warning("EntryTitles: unknown category %s; skipping category reindex", category)

    added = 0
    for file_id in files:
        if file_id not in run.titles:
            run.titles[file_id] = run.extract_title(file_id)
            mutated.add(file_id)
            added += 1
    if added:
        logger.info("EntryTitles: added %d new files", added)
    run.applied_mode = ReindexMode.INCREMENTAL

    if directive.delete:
        logger.info("EntryTitles: checking for deleted files")
        gone = [file_id for file_id in run.titles if file_id not in files]
        for file_id in gone:
            del run.titles[file_id]
        mutated.update(gone)
        if gone:
            logger.info("EntryTitles: deleted %d gone files", len(gone))
        run.applied_mode = ReindexMode.DELETE
    return mutated


def index_titles(
    file_index: FileIndex,
    directive: ReindexDirective | None = None,
    *,
    config: Config | None = None,
    registry: TitleExtractorRegistry | None = None,
    cachefile: Path | None = None,
) -> TitleIndexRun:
    """Initialize, load, reconcile and save the title cache for *file_index*."""

    active_config = config if config is not None else Config()
    active_directive = directive if directive is not None else ReindexDirective()
    run = TitleIndexRun(
        file_index=file_index,
        cachefile=Path(cachefile) if cachefile is not None else resolve_titles_cachefile(active_config),
        registry=registry if registry is not None else default_registry(),
    )
    run.caching_enabled = init_caching(active_config)
    loaded_ok = False
    if run.caching_enabled and not active_directive.reindex_all:
        loaded_ok = load(run)

    mutated = reconcile(run, active_directive, loaded_ok)

    result = IndexResult(
        status=IndexStatus.UP_TO_DATE,
        mode=run.applied_mode,
        mutated=frozenset(mutated),
        entries=len(run.titles),
    )
    # a full reindex always replaces the stored mapping
    needs_save = bool(mutated) or run.applied_mode == ReindexMode.ALL
    if not run.caching_enabled:
        result.status = IndexStatus.MEMORY_ONLY
    elif needs_save:
        outcome = save_cache(run.cachefile, run.titles, enabled=True)
        result.cache_path = outcome.path
        result.persisted = outcome.saved
        result.save_error = outcome.error
        result.status = IndexStatus.STORED if outcome.saved else IndexStatus.UNSAVED
    run.result = result
    return run
