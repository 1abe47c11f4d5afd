from __future__ import annotations

from pathlib import Path

import pytest

import entrytitles.utils as utils
from entrytitles.config import DEFAULT_FILE_EXTENSIONS


def _write(path: Path, text: str = "Title\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_resolve_directory_validates(tmp_path):
    with pytest.raises(FileNotFoundError):
        utils.resolve_directory(tmp_path / "missing")

    file_path = tmp_path / "file.txt"
    file_path.write_text("x", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        utils.resolve_directory(file_path)

    assert utils.resolve_directory(tmp_path) == tmp_path.resolve()


def test_scope_gitignore_line_variants():
    assert utils._scope_gitignore_line("", "base") is None
    assert utils._scope_gitignore_line("# comment", "base") is None
    assert utils._scope_gitignore_line(r"\#not-comment", "base") == r"base/**/\#not-comment"
    assert utils._scope_gitignore_line("foo", "") == "foo"

    assert utils._scope_gitignore_line("/foo.txt", "src") == "src/foo.txt"
    assert utils._scope_gitignore_line("foo.txt", "src") == "src/**/foo.txt"
    assert utils._scope_gitignore_line("nested/foo.txt", "src") == "src/nested/foo.txt"
    assert utils._scope_gitignore_line("build/", "src") == "src/**/build/"
    assert utils._scope_gitignore_line("!keep.txt", "src") == "!src/**/keep.txt"


def test_read_gitignore_lines_returns_empty_on_error(tmp_path):
    assert utils._read_gitignore_lines(tmp_path / "missing" / ".gitignore") == []


def test_collect_files_filters_hidden_and_extensions(tmp_path):
    root = tmp_path / "data"
    _write(root / "one.txt")
    _write(root / "two.html")
    _write(root / "image.png")
    _write(root / ".hidden.txt")
    _write(root / ".drafts" / "draft.txt")

    files = utils.collect_files(root, extensions=["txt", ".HTML"])

    assert [p.name for p in files] == ["one.txt", "two.html"]

    with_hidden = utils.collect_files(root, include_hidden=True, extensions=["txt"])
    assert {p.name for p in with_hidden} == {"one.txt", ".hidden.txt", "draft.txt"}


def test_collect_files_respects_nested_gitignore(tmp_path):
    root = tmp_path / "data"
    _write(root / ".gitignore", "drafts/\n*.bak.txt\n")
    _write(root / "keep.txt")
    _write(root / "old.bak.txt")
    _write(root / "drafts" / "wip.txt")
    _write(root / "stories" / ".gitignore", "secret.txt\n")
    _write(root / "stories" / "secret.txt")
    _write(root / "stories" / "public.txt")
    _write(root / "other" / "secret.txt")

    files = utils.collect_files(root, extensions=["txt"])
    rel = sorted(p.relative_to(root.resolve()).as_posix() for p in files)

    assert rel == ["keep.txt", "other/secret.txt", "stories/public.txt"]

    unfiltered = utils.collect_files(root, extensions=["txt"], respect_gitignore=False)
    assert len(unfiltered) == 6


def test_build_file_index_records_and_categories(tmp_path):
    root = tmp_path / "data"
    _write(root / "welcome.txt")
    _write(root / "stories" / "buffy" / "Episode.HTML", "<title>Ep</title>")
    _write(root / "stories" / "intro.txt")
    _write(root / "notes.md")

    index = utils.build_file_index(root, DEFAULT_FILE_EXTENSIONS)

    assert set(index.files) == {"welcome", "stories/buffy/Episode", "stories/intro"}
    episode = index.files["stories/buffy/Episode"]
    assert episode.ext == "html"
    assert episode.cat_id == "stories/buffy"
    assert episode.basename == "Episode"
    assert Path(episode.fullname) == (root / "stories" / "buffy" / "Episode.HTML").resolve()
    assert index.files["welcome"].cat_id == ""

    assert index.has_category("")
    assert index.has_category("stories")
    assert index.has_category("stories/buffy")
    assert not index.has_category("stories/bu")
    assert not index.has_category("notes")


def test_build_file_index_missing_root(tmp_path):
    with pytest.raises(FileNotFoundError):
        utils.build_file_index(tmp_path / "nope", DEFAULT_FILE_EXTENSIONS)
