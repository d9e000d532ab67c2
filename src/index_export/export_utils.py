"""Shared pieces of the export engines: preconditions, output sinks and run stats."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TextIO

from index_export.errors import ConfigurationError
from index_export.index import IndexAccessor

logger = logging.getLogger(__name__)

OUTPUT_BUFFER_SIZE = 1 << 20


@dataclass
class ExportStats:
    """Counters reported at the end of a run."""
    documents: int = 0
    written: int = 0
    skipped: int = 0
    terms_written: int = 0
    terms_pruned: int = 0
    lookup_failures: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


def check_id_field(index: IndexAccessor, id_field: str) -> int:
    """
    Validate the id field against the first document of the index.

    Returns:
        Number of documents in the index.

    Raises:
        ConfigurationError: the index is empty or document 0 has no ``id_field``.
    """
    num_docs = index.num_docs()
    if num_docs <= 0:
        raise ConfigurationError("No document is in the index!")
    if index.docid(0, id_field) is None:
        logger.info("%s is a wrong document ID field name!", id_field)
        raise ConfigurationError(f"{id_field} is a wrong document ID field name!")
    return num_docs


def require_docid(index: IndexAccessor, ordinal: int, id_field: str) -> str:
    docid = index.docid(ordinal, id_field)
    if docid is None:
        raise ConfigurationError(f"Document {ordinal} has no {id_field} field")
    return docid


def open_output(path: str | Path) -> TextIO:
    """Open a buffered UTF-8 output file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "w", encoding="utf-8", newline="\n", buffering=OUTPUT_BUFFER_SIZE)


def log_progress(ordinal: int, every: int, what: str = "docs") -> None:
    if every > 0 and ordinal % every == 0:
        logger.info("%d %s processed", ordinal, what)
