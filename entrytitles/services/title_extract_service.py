"""Helpers to extract display titles from entry files of various formats."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import BinaryIO, Dict, Mapping, Protocol

from charset_normalizer import from_bytes
from docx import Document
from pptx import Presentation
from pypdf import PdfReader

from ..models import FileRecord

logger = logging.getLogger(__name__)

UNOPENABLE_TITLE = "Could not open {path}"
TEXT_FORMAT = "text"
HTML_TITLE_PATTERN = re.compile(r"<title>(.*?)</title>", re.IGNORECASE | re.DOTALL)


class TitleExtractor(Protocol):
    """Protocol describing a title extractor for one file format."""

    def __call__(self, stream: BinaryIO) -> str | None:
        ...


@dataclass(frozen=True)
class ExtractorEntry:
    formats: tuple[str, ...]
    extractor: TitleExtractor


class TitleExtractorRegistry:
    """Map format names to extractors, with plain-text as the fallback."""

    def __init__(self, fallback: TitleExtractor | None = None) -> None:
        self._extractors: Dict[str, TitleExtractor] = {}
        self._fallback = fallback

    def register(self, entry: ExtractorEntry) -> None:
        for fmt in entry.formats:
            self._extractors[fmt.lower()] = entry.extractor

    def resolve(self, fmt: str | None) -> TitleExtractor:
        extractor = self._extractors.get((fmt or "").lower())
        if extractor is not None:
            return extractor
        if self._fallback is not None:
            return self._fallback
        return self._extractors[TEXT_FORMAT]

    def formats(self) -> tuple[str, ...]:
        return tuple(sorted(self._extractors))


def get_title(
    record: FileRecord,
    file_extensions: Mapping[str, str],
    registry: TitleExtractorRegistry | None = None,
) -> str:
    """Return the title of *record* by reading its file.

    The format is looked up from the record's extension; unknown extensions
    are read as plain text. An empty result falls back to the basename, and
    a file that cannot be opened yields a placeholder naming its path.
    """

    active = registry if registry is not None else default_registry()
    fmt = file_extensions.get(record.ext.lower())
    extractor = active.resolve(fmt)
    try:
        stream = open(record.fullname, "rb")
    except OSError:
        title = UNOPENABLE_TITLE.format(path=record.fullname)
        logger.debug("%s title=%s", record.file_id, title)
        return title
    with stream:
        try:
            title = extractor(stream)
        except OSError:
            title = None
    if not title:
        title = record.basename
    logger.debug("%s title=%s", record.file_id, title)
    return title


def _decode(data: bytes) -> str:
    if not data:
        return ""
    result = from_bytes(data)
    best = result.best() if result is not None else None
    if best is None:
        return data.decode("utf-8", errors="replace")
    return str(best)


def _html_extractor(stream: BinaryIO) -> str | None:
    html = _decode(stream.read())
    match = HTML_TITLE_PATTERN.search(html)
    if match is None:
        return None
    return match.group(1)


def _first_line_extractor(stream: BinaryIO) -> str | None:
    line = _decode(stream.readline())
    return line.rstrip("\r\n") or None


def _docx_extractor(stream: BinaryIO) -> str | None:
    try:
        document = Document(stream)
    except Exception:
        return None
    title = (document.core_properties.title or "").strip()
    if title:
        return title
    for paragraph in document.paragraphs:
        text = paragraph.text.strip()
        if text:
            return text
    return None


def _pptx_extractor(stream: BinaryIO) -> str | None:
    try:
        presentation = Presentation(stream)
    except Exception:
        return None
    for slide in presentation.slides:
        title_shape = slide.shapes.title
        if title_shape is not None:
            text = (title_shape.text or "").strip()
            if text:
                return text
        for shape in slide.shapes:
            text = (getattr(shape, "text", "") or "").strip()
            if text:
                return text.splitlines()[0]
        break
    return None


def _pdf_extractor(stream: BinaryIO) -> str | None:
    try:
        reader = PdfReader(stream)
    except Exception:
        return None
    try:
        metadata = reader.metadata
        title = (metadata.title or "").strip() if metadata is not None else ""
    except Exception:
        title = ""
    if title:
        return title
    try:
        first_page = reader.pages[0]
        text = first_page.extract_text() or ""
    except Exception:
        return None
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None


def default_registry() -> TitleExtractorRegistry:
    """Return a fresh registry holding the built-in extractors."""

    registry = TitleExtractorRegistry(fallback=_first_line_extractor)
    registry.register(ExtractorEntry((TEXT_FORMAT, "blx"), _first_line_extractor))
    registry.register(ExtractorEntry(("html",), _html_extractor))
    registry.register(ExtractorEntry(("docx",), _docx_extractor))
    registry.register(ExtractorEntry(("pptx",), _pptx_extractor))
    registry.register(ExtractorEntry(("pdf",), _pdf_extractor))
    return registry
