from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

import entrytitles.cache as cache


def test_store_and_load_titles_round_trip(tmp_path: Path) -> None:
    db_path = tmp_path / "state" / "titles.dat"
    titles = {
        "stories/intro": "Once <em>upon</em> a time",
        "blank": "",
        "notes/todo": "Could not open /data/notes/todo.txt",
        "unicode": "Café\tcrème",
    }

    stored = cache.store_titles(db_path, titles)

    assert stored == db_path
    assert db_path.exists()
    assert cache.load_titles(db_path) == titles


def test_store_titles_replaces_previous_mapping(tmp_path: Path) -> None:
    db_path = tmp_path / "titles.dat"
    cache.store_titles(db_path, {"a": "A", "b": "B"})

    cache.store_titles(db_path, {"b": "Bee", "c": "C"})

    assert cache.load_titles(db_path) == {"b": "Bee", "c": "C"}
    meta = cache.load_title_metadata(db_path)
    assert meta is not None
    assert meta["entry_count"] == 2
    assert meta["version"] == cache.CACHE_VERSION


def test_store_empty_mapping(tmp_path: Path) -> None:
    db_path = tmp_path / "titles.dat"
    cache.store_titles(db_path, {"a": "A"})
    cache.store_titles(db_path, {})

    assert cache.load_titles(db_path) == {}


def test_load_titles_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        cache.load_titles(tmp_path / "missing.dat")


def test_load_titles_without_schema(tmp_path: Path) -> None:
    db_path = tmp_path / "other.db"
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE unrelated (id INTEGER)")
    conn.commit()
    conn.close()

    with pytest.raises(FileNotFoundError):
        cache.load_titles(db_path)


def test_load_titles_corrupt_file(tmp_path: Path) -> None:
    db_path = tmp_path / "titles.dat"
    db_path.write_bytes(b"this is definitely not sqlite" * 100)

    with pytest.raises(sqlite3.DatabaseError):
        cache.load_titles(db_path)


def test_store_titles_recovers_corrupt_file(tmp_path: Path) -> None:
    db_path = tmp_path / "titles.dat"
    db_path.write_bytes(b"this is definitely not sqlite" * 100)

    cache.store_titles(db_path, {"a": "Alpha"})

    assert cache.load_titles(db_path) == {"a": "Alpha"}


def test_clear_titles_removes_store(tmp_path: Path) -> None:
    db_path = tmp_path / "titles.dat"
    cache.store_titles(db_path, {"a": "A", "b": "B"})

    assert cache.clear_titles(db_path) == 2
    assert not db_path.exists()
    assert not Path(f"{db_path}-wal").exists()
    assert cache.clear_titles(db_path) == 0


def test_load_title_metadata_missing(tmp_path: Path) -> None:
    assert cache.load_title_metadata(tmp_path / "missing.dat") is None


def test_backend_available_requires_wal_support(monkeypatch) -> None:
    assert cache.backend_available() is True

    monkeypatch.setattr(cache.sqlite3, "sqlite_version_info", (3, 6, 23))
    assert cache.backend_available() is False

