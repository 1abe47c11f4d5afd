from __future__ import annotations

import sqlite3
from pathlib import Path

import entrytitles.cache as cache
from entrytitles.config import Config
from entrytitles.services import cache_service


def test_init_caching_respects_config_flag(monkeypatch) -> None:
    monkeypatch.setattr("entrytitles.cache.backend_available", lambda: True)

    assert cache_service.init_caching(Config(use_caching=False)) is False
    assert cache_service.init_caching(Config(use_caching=True)) is True


def test_init_caching_disabled_when_backend_missing(monkeypatch) -> None:
    monkeypatch.setattr("entrytitles.cache.backend_available", lambda: False)

    assert cache_service.init_caching(Config(use_caching=True)) is False


def test_load_cache_skips_when_disabled(tmp_path: Path, monkeypatch) -> None:
    def fail_load(*_args, **_kwargs):
        raise AssertionError("load should not be attempted")

    monkeypatch.setattr("entrytitles.cache.load_titles", fail_load)

    assert cache_service.load_cache(tmp_path / "titles.dat", enabled=False) is None


def test_load_cache_returns_none_when_missing(tmp_path: Path) -> None:
    assert cache_service.load_cache(tmp_path / "titles.dat", enabled=True) is None


def test_load_cache_returns_none_when_corrupt(tmp_path: Path) -> None:
    cachefile = tmp_path / "titles.dat"
    cachefile.write_bytes(b"garbage" * 200)

    assert cache_service.load_cache(cachefile, enabled=True) is None


def test_load_cache_returns_stored_titles(tmp_path: Path) -> None:
    cachefile = tmp_path / "titles.dat"
    cache.store_titles(cachefile, {"a": "Alpha"})

    assert cache_service.load_cache(cachefile, enabled=True) == {"a": "Alpha"}


def test_save_cache_noop_when_disabled(tmp_path: Path) -> None:
    cachefile = tmp_path / "titles.dat"

    outcome = cache_service.save_cache(cachefile, {"a": "Alpha"}, enabled=False)

    assert outcome.saved is False
    assert outcome.error is None
    assert not cachefile.exists()


def test_save_cache_writes_store(tmp_path: Path) -> None:
    cachefile = tmp_path / "state" / "titles.dat"

    outcome = cache_service.save_cache(cachefile, {"a": "Alpha"}, enabled=True)

    assert outcome.saved is True
    assert outcome.path == cachefile
    assert cache.load_titles(cachefile) == {"a": "Alpha"}


def test_save_cache_reports_write_failure(tmp_path: Path, monkeypatch) -> None:
    def failing_store(path, titles):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr("entrytitles.cache.store_titles", failing_store)

    outcome = cache_service.save_cache(tmp_path / "titles.dat", {"a": "A"}, enabled=True)

    assert outcome.saved is False
    assert outcome.error == "database is locked"
