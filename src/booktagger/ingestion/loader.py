"""PDF and EPUB text extraction.

Uses PyMuPDF (fitz), which opens both formats through the same document
API. EPUB chapters come back as rendered text; any markup that survives
is stripped before the text reaches the tokenizer. PDF pages are plain
text already and keep angle brackets untouched.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Dict, Iterator, Union

import fitz  # PyMuPDF

from booktagger.errors import DecodeError
from booktagger.models import ExtractedText
from booktagger.utils.text import normalize_whitespace, strip_markup

LOGGER = logging.getLogger(__name__)

# MuPDF is not thread-safe; decoding is serialized while tokenization is not.
_MUPDF_LOCK = threading.Lock()


def _open(path: Path) -> "fitz.Document":
    try:
        doc = fitz.open(path)
    except Exception as exc:
        raise DecodeError(path, f"cannot open: {exc}") from exc
    if doc.needs_pass:
        doc.close()
        raise DecodeError(path, "password protected")
    return doc


def iter_text_parts(doc: "fitz.Document", path: Path) -> Iterator[str]:
    """Yield text content page by page, skipping unreadable pages."""
    is_epub = Path(path).suffix.lower() == ".epub"
    for index in range(len(doc)):
        try:
            page = doc[index]
            text = page.get_text() or ""
            normalized = normalize_whitespace([strip_markup(text) if is_epub else text])
            if normalized:
                yield normalized + "\n"
        except Exception as exc:  # pragma: no cover
            LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)


def get_metadata(doc: "fitz.Document", path: Path) -> Dict[str, Union[str, int]]:
    metadata = doc.metadata or {}
    title = (metadata.get("title") or "").strip() or path.stem
    return {
        "title": title,
        "page_count": len(doc),
    }


def extract_text(path: Path) -> ExtractedText:
    """Decode a PDF or EPUB file into raw text.

    Raises:
        DecodeError: If the file cannot be opened or yields no pages.
    """
    with _MUPDF_LOCK:
        doc = _open(path)
        try:
            meta = get_metadata(doc, path)
            if len(doc) == 0:
                raise DecodeError(path, "document has no pages")
            text = "".join(iter_text_parts(doc, path))
        finally:
            doc.close()
    LOGGER.debug("Extracted %d characters from %s", len(text), path)
    return ExtractedText(path=path, title=meta["title"], text=text)
