"""Text helpers: whitespace, markup and grapheme-aware casing."""

from __future__ import annotations

import re
from typing import Iterable, List

import regex

_TAG_RE = re.compile(r"<[^>]+>")
_GRAPHEME_RE = regex.compile(r"\X")


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())


def strip_markup(text: str) -> str:
    """Remove XML/HTML tags left over by container formats."""
    return _TAG_RE.sub(" ", text)


def graphemes(text: str) -> List[str]:
    """Split text into user-perceived characters."""
    return _GRAPHEME_RE.findall(text)


def grapheme_length(text: str) -> int:
    return len(graphemes(text))


def capitalize_first(text: str) -> str:
    """Upper-case the first grapheme and leave the rest untouched.

    Working on the whole grapheme keeps combining marks attached, so
    ``"e\\u0301cole"`` becomes ``"E\\u0301cole"``.
    """
    clusters = graphemes(text)
    if not clusters:
        return text
    return clusters[0].upper() + "".join(clusters[1:])
