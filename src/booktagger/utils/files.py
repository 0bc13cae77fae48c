"""Utility helpers for working with files."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Iterator, Sequence

DOCUMENT_SUFFIXES = (".pdf", ".epub")


def iter_document_paths(
    inputs: Iterable[Path], suffixes: Sequence[str] = DOCUMENT_SUFFIXES
) -> Iterator[Path]:
    """Yield document paths from input paths, descending into directories."""
    wanted = {suffix.lower() for suffix in suffixes}
    for item in inputs:
        if item.is_dir():
            children = sorted(child for child in item.rglob("*") if child.is_file())
            yield from iter_document_paths(children, suffixes)
        elif item.is_file() and item.suffix.lower() in wanted:
            yield item


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()
