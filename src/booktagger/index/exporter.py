"""Collect document records and write the JSON artifact."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Literal

from booktagger.errors import ExportError, PipelineError
from booktagger.models import DocumentRecord
from booktagger.utils.files import compute_sha256

LOGGER = logging.getLogger(__name__)

OnError = Literal["skip", "fail"]


def generate_id() -> str:
    """Random, collision-resistant document identifier."""
    return uuid.uuid4().hex


def content_id(path: Path) -> str:
    """Identifier derived from file content; stable across runs."""
    return compute_sha256(path)


@dataclass(frozen=True, slots=True)
class FailedDocument:
    path: Path
    reason: str


class CorpusExporter:
    """Holds the finished records of a run.

    Only complete :class:`DocumentRecord` objects are ever added, so a
    document that failed upstream is either absent (``on_error="skip"``)
    or aborts the run (``on_error="fail"``).
    """

    def __init__(self, on_error: OnError = "skip") -> None:
        if on_error not in ("skip", "fail"):
            raise ValueError(f"Unknown error policy: {on_error}")
        self.on_error = on_error
        self._records: Dict[str, DocumentRecord] = {}
        self._failures: List[FailedDocument] = []

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[DocumentRecord]:
        return sorted(self._records.values(), key=lambda record: str(record.path))

    @property
    def failures(self) -> List[FailedDocument]:
        return list(self._failures)

    def add(self, record: DocumentRecord) -> None:
        if record.doc_id in self._records:
            raise ExportError(f"Duplicate document id {record.doc_id} for {record.path}")
        self._records[record.doc_id] = record

    def record_failure(self, path: Path, reason: str) -> None:
        if self.on_error == "fail":
            raise PipelineError(f"Failed to process {path}: {reason}")
        LOGGER.warning("Omitting %s: %s", path, reason)
        self._failures.append(FailedDocument(Path(path), reason))

    def to_dict(self) -> Dict[str, Dict[str, object]]:
        return {record.doc_id: record.to_dict() for record in self.records}

    def write(self, path: Path) -> Path:
        """Write all records as JSON, replacing ``path`` atomically.

        Raises:
            ExportError: If the file cannot be written.
        """
        path = Path(path)
        payload = json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
            ) as handle:
                tmp_name = handle.name
                handle.write(payload)
                handle.write("\n")
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ExportError(f"Cannot write {path}: {exc}") from exc
        LOGGER.info("Wrote %d documents to %s", len(self._records), path)
        return path
