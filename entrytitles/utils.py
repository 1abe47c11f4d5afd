"""Utility helpers for filesystem access and building a file index."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Mapping
import os

from .models import FileIndex, FileRecord


def resolve_directory(path: Path | str) -> Path:
    """Resolve and validate a user supplied directory path."""
    dir_path = Path(path).expanduser().resolve()
    if not dir_path.exists():
        raise FileNotFoundError(f"Directory does not exist: {dir_path}")
    if not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    return dir_path


def _relative_posix(path: Path, root: Path) -> str:
    rel = path.relative_to(root)
    if rel == Path("."):
        return ""
    return rel.as_posix()


def _read_gitignore_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return []


def _scope_gitignore_line(line: str, base_dir: str) -> str | None:
    """Rewrite a .gitignore line found in *base_dir* relative to the scan root."""
    if not line or (line.startswith("#") and not line.startswith(r"\#")):
        return None
    if not base_dir:
        return line
    negated = line.startswith("!") and not line.startswith(r"\!")
    prefix = "!" if negated else ""
    body = line[1:] if negated else line
    if body.startswith("/"):
        return f"{prefix}{base_dir}/{body[1:]}"
    if "/" in body.rstrip("/"):
        return f"{prefix}{base_dir}/{body}"
    return f"{prefix}{base_dir}/**/{body}"


def _extend_spec(spec, gitignore_file: Path, base_dir: str):
    from pathspec.gitignore import GitIgnoreSpec

    scoped = [
        scoped_line
        for scoped_line in (
            _scope_gitignore_line(line, base_dir)
            for line in _read_gitignore_lines(gitignore_file)
        )
        if scoped_line is not None
    ]
    addition = GitIgnoreSpec.from_lines(scoped)
    return addition if spec is None else spec + addition


def _is_ignored(spec, rel_path: str, *, is_dir: bool) -> bool:
    if spec is None or not rel_path:
        return False
    candidate = f"{rel_path}/" if is_dir else rel_path
    return spec.match_file(candidate)


def collect_files(
    root: Path | str,
    include_hidden: bool = False,
    extensions: Iterable[str] | None = None,
    respect_gitignore: bool = True,
) -> List[Path]:
    """Collect entry files under *root*, honouring .gitignore files inside it."""

    directory = resolve_directory(root)
    wanted = {ext.lower().lstrip(".") for ext in extensions or ()}
    files: List[Path] = []
    spec_by_dir: dict[Path, object] = {directory: None}

    for dirpath, dirnames, filenames in os.walk(directory, topdown=True):
        current_dir = Path(dirpath)
        if not include_hidden:
            dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            filenames = [f for f in filenames if not f.startswith(".")]
        spec = spec_by_dir.get(current_dir)
        if respect_gitignore:
            dirnames[:] = [d for d in dirnames if d != ".git"]
            gitignore_file = current_dir / ".gitignore"
            if gitignore_file.is_file():
                spec = _extend_spec(spec, gitignore_file, _relative_posix(current_dir, directory))
        kept: list[str] = []
        for dirname in sorted(dirnames):
            child = current_dir / dirname
            if respect_gitignore and _is_ignored(
                spec, _relative_posix(child, directory), is_dir=True
            ):
                continue
            kept.append(dirname)
            spec_by_dir[child] = spec
        dirnames[:] = kept

        for filename in filenames:
            candidate = current_dir / filename
            if wanted and candidate.suffix.lower().lstrip(".") not in wanted:
                continue
            if respect_gitignore and _is_ignored(
                spec, _relative_posix(candidate, directory), is_dir=False
            ):
                continue
            files.append(candidate)

    files.sort()
    return files


def build_file_index(
    root: Path | str,
    file_extensions: Mapping[str, str],
    *,
    include_hidden: bool = False,
    respect_gitignore: bool = True,
) -> FileIndex:
    """Return a FileIndex for the entry files found under *root*.

    ``file_id`` is the path relative to *root* without its extension and the
    category is the relative directory (``""`` for the top level). Every
    ancestor directory of an entry is registered as a category.
    """

    directory = resolve_directory(root)
    records: dict[str, FileRecord] = {}
    categories: dict[str, object] = {"": True}
    for path in collect_files(
        directory,
        include_hidden=include_hidden,
        extensions=file_extensions.keys(),
        respect_gitignore=respect_gitignore,
    ):
        rel = _relative_posix(path, directory)
        ext = path.suffix.lstrip(".").lower()
        file_id = rel[: -len(path.suffix)] if path.suffix else rel
        cat_id = _relative_posix(path.parent, directory)
        records[file_id] = FileRecord(
            file_id=file_id,
            fullname=str(path),
            ext=ext,
            cat_id=cat_id,
            basename=path.stem,
        )
        parts = cat_id.split("/") if cat_id else []
        for depth in range(1, len(parts) + 1):
            categories["/".join(parts[:depth])] = True
    return FileIndex(
        files=records,
        file_extensions=dict(file_extensions),
        categories=categories,
    )

