"""Exception types raised by the keyword pipeline."""

from __future__ import annotations

from pathlib import Path


class BookTaggerError(Exception):
    """Base class for pipeline errors."""


class DecodeError(BookTaggerError):
    """A source file could not be turned into text."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class EmptyDocumentError(BookTaggerError):
    """Decoded text produced no usable tokens after filtering."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"No usable tokens in {path}")
        self.path = Path(path)


class CorpusInvariantError(BookTaggerError):
    """Corpus statistics are inconsistent; results cannot be trusted."""


class PipelineError(BookTaggerError):
    """A document failed and the run is configured to stop."""


class ExportError(BookTaggerError):
    """The output artifact could not be written."""
