"""Title cache store for entrytitles backed by SQLite."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Sequence

CACHE_VERSION = 1
MIN_SQLITE_VERSION = (3, 7, 0)
BUSY_TIMEOUT_MS = 5000
_SIDECAR_SUFFIXES = ("-wal", "-shm", "-journal")


def backend_available() -> bool:
    """Return True if the SQLite backend can provide locked load/store."""

    # WAL requires 3.7.0+
    version = getattr(sqlite3, "sqlite_version_info", None)
    if not version:
        return False
    return tuple(version) >= MIN_SQLITE_VERSION


def _connect(
    db_path: Path,
    *,
    readonly: bool = False,
) -> sqlite3.Connection:
    if readonly:
        db_uri = f"file:{db_path.as_posix()}?mode=ro"
        conn = sqlite3.connect(db_uri, uri=True)
    else:
        conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute(f"PRAGMA busy_timeout = {BUSY_TIMEOUT_MS};")
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
        except sqlite3.OperationalError as exc:
            if "readonly" not in str(exc).lower():
                raise
        conn.execute("PRAGMA synchronous = NORMAL;")
        if readonly:
            conn.execute("PRAGMA query_only = ON;")
    except sqlite3.DatabaseError:
        conn.close()
        raise
    return conn


def _table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table,),
    ).fetchone()
    return row is not None


def _ensure_schema_readonly(
    conn: sqlite3.Connection,
    *,
    tables: Sequence[str],
) -> None:
    for table in tables:
        if not _table_exists(conn, table):
            raise sqlite3.OperationalError(f"Missing table: {table}")


def _ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS title_metadata (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            version INTEGER NOT NULL,
            generated_at TEXT NOT NULL,
            entry_count INTEGER NOT NULL DEFAULT 0
        );

        CREATE TABLE IF NOT EXISTS entry_title (
            file_id TEXT PRIMARY KEY,
            title TEXT NOT NULL DEFAULT ''
        );
        """
    )


def _discard_store(db_path: Path) -> None:
    if db_path.exists():
        db_path.unlink()
    for suffix in _SIDECAR_SUFFIXES:
        sidecar = Path(f"{db_path}{suffix}")
        if sidecar.exists():
            sidecar.unlink()


def load_titles(db_path: Path) -> dict[str, str]:
    """Return the stored ``file_id -> title`` mapping.

    Raises FileNotFoundError when the store is missing, has no title schema or
    was written by an older cache version. Corrupt files surface as
    ``sqlite3.DatabaseError``.
    """

    db_path = Path(db_path)
    if not db_path.is_file():
        raise FileNotFoundError(db_path)

    conn = _connect(db_path, readonly=True)
    try:
        try:
            _ensure_schema_readonly(conn, tables=("title_metadata", "entry_title"))
        except sqlite3.OperationalError:
            raise FileNotFoundError(db_path)
        meta = conn.execute(
            "SELECT version FROM title_metadata WHERE id = 1"
        ).fetchone()
        if meta is None or int(meta["version"] or 0) < CACHE_VERSION:
            raise FileNotFoundError(db_path)
        rows = conn.execute("SELECT file_id, title FROM entry_title").fetchall()
        return {row["file_id"]: row["title"] for row in rows}
    finally:
        conn.close()


def store_titles(db_path: Path, titles: Mapping[str, str]) -> Path:
    """Replace the stored mapping with *titles* in a single transaction."""

    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        conn = _open_for_write(db_path)
    except sqlite3.DatabaseError as exc:
        if "not a database" not in str(exc).lower():
            raise
        _discard_store(db_path)
        conn = _open_for_write(db_path)
    try:
        generated_at = datetime.now(timezone.utc).isoformat()
        conn.execute("BEGIN IMMEDIATE;")
        try:
            conn.execute("DELETE FROM entry_title;")
            conn.executemany(
                "INSERT INTO entry_title (file_id, title) VALUES (?, ?)",
                [(str(file_id), str(title)) for file_id, title in titles.items()],
            )
            conn.execute(
                """
                INSERT INTO title_metadata (id, version, generated_at, entry_count)
                VALUES (1, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    version = excluded.version,
                    generated_at = excluded.generated_at,
                    entry_count = excluded.entry_count
                """,
                (CACHE_VERSION, generated_at, len(titles)),
            )
        except Exception:
            conn.rollback()
            raise
        conn.commit()
        return db_path
    finally:
        conn.close()


def _open_for_write(db_path: Path) -> sqlite3.Connection:
    conn = _connect(db_path)
    # explicit BEGIN/COMMIT below
    conn.isolation_level = None
    try:
        _ensure_schema(conn)
    except sqlite3.DatabaseError:
        conn.close()
        raise
    return conn


def load_title_metadata(db_path: Path) -> dict[str, object] | None:
    """Return version/timestamp/count of the store, or None when unavailable."""

    db_path = Path(db_path)
    if not db_path.is_file():
        return None
    try:
        conn = _connect(db_path, readonly=True)
    except sqlite3.DatabaseError:
        return None
    try:
        try:
            _ensure_schema_readonly(conn, tables=("title_metadata",))
        except sqlite3.OperationalError:
            return None
        row = conn.execute(
            "SELECT version, generated_at, entry_count FROM title_metadata WHERE id = 1"
        ).fetchone()
        if row is None:
            return None
        return {
            "version": int(row["version"] or 0),
            "generated_at": row["generated_at"],
            "entry_count": int(row["entry_count"] or 0),
        }
    except sqlite3.DatabaseError:
        return None
    finally:
        conn.close()


def clear_titles(db_path: Path) -> int:
    """Remove the title store, returning the number of titles it held."""

    db_path = Path(db_path)
    if not db_path.exists():
        return 0
    try:
        total = len(load_titles(db_path))
    except (FileNotFoundError, sqlite3.DatabaseError):
        total = 0
    _discard_store(db_path)
    return total
