"""
Raw document dump.

Writes every stored raw document as

    <doc> DOC_ID
    RAW TEXT
    </doc>

optionally restricted to the docids of a filter file (run-file style rows,
docid in the third column) and optionally with HTML markup stripped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from bs4 import BeautifulSoup

from index_export.config import DEFAULT_PROGRESS_EVERY, FIELD_RAW, ExportConfig
from index_export.errors import FilterFileError, NotStoredError
from index_export.export_utils import ExportStats, check_id_field, log_progress, open_output, require_docid
from index_export.index import IndexAccessor, open_index

logger = logging.getLogger(__name__)

_COLUMN_SEPARATOR = re.compile(r"[\s\t]+")
DOCID_COLUMN = 2


# Elements rendered on their own line; inline elements join their neighbours
BLOCK_TAGS = (
    "address", "article", "aside", "blockquote", "body", "br", "caption", "dd", "div",
    "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3",
    "h4", "h5", "h6", "head", "header", "hr", "html", "li", "main", "nav", "ol", "p",
    "pre", "section", "table", "tbody", "td", "tfoot", "th", "thead", "title", "tr", "ul",
)


def strip_markup(html: str) -> str:
    """
    Plain-text rendering of an HTML document with whitespace normalized.

    Block-level elements and ``<br>`` separate words; inline elements do not,
    so ``H<sub>2</sub>O`` renders as ``H2O``.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(list(BLOCK_TAGS)):
        tag.insert_before(" ")
        tag.insert_after(" ")
    return " ".join(soup.get_text().split())


def load_docid_filter(path: str | Path) -> set[str]:
    """
    Load the docids of a whitespace/tab-delimited file (third column).

    Raises:
        FilterFileError: a non-blank line has fewer than three columns.
    """
    docids = set()
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            columns = _COLUMN_SEPARATOR.split(line)
            if len(columns) <= DOCID_COLUMN:
                raise FilterFileError(
                    f"{path}:{line_no}: expected at least {DOCID_COLUMN + 1} columns, got {len(columns)}"
                )
            docids.add(columns[DOCID_COLUMN])
    logger.info("Loaded %d docids from %s", len(docids), path)
    return docids


def format_raw_document(docid: str, text: str) -> str:
    return f"<doc> {docid}\n{text}\n</doc>\n"


class RawDumpEngine:
    """
    Dumps the stored raw text of an index.

    Args:
        index: Open index snapshot with stored raw documents.
        raw_field: Stored field holding the raw text.
        progress_every: Log progress every N documents (0 disables).
    """

    def __init__(
        self,
        index: IndexAccessor,
        raw_field: str = FIELD_RAW,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
    ):
        self.index = index
        self.raw_field = raw_field
        self.progress_every = progress_every

    def iter_documents(
        self,
        id_field: str,
        docid_filter: set[str] | None = None,
        strip: bool = False,
        stats: ExportStats | None = None,
    ) -> Iterator[tuple[str, str]]:
        """Yield ``(docid, text)`` of the selected documents in ordinal order."""
        num_docs = check_id_field(self.index, id_field)
        return self._documents(num_docs, id_field, docid_filter, strip, stats or ExportStats())

    def _documents(
        self,
        num_docs: int,
        id_field: str,
        docid_filter: set[str] | None,
        strip: bool,
        stats: ExportStats,
    ) -> Iterator[tuple[str, str]]:
        for ordinal in range(num_docs):
            docid = require_docid(self.index, ordinal, id_field)
            log_progress(ordinal, self.progress_every)
            stats.documents += 1
            if docid_filter is not None and docid not in docid_filter:
                stats.skipped += 1
                continue

            text = self.index.stored_field(ordinal, self.raw_field)
            if text is None:
                raise NotStoredError("Raw documents not stored!")
            if strip:
                text = strip_markup(text)
            yield docid, text

    def run(
        self,
        id_field: str,
        output: str | Path,
        docid_filter: set[str] | None = None,
        strip: bool = False,
    ) -> ExportStats:
        """Write the raw dump to ``output``."""
        stats = ExportStats()
        documents = self.iter_documents(id_field, docid_filter, strip, stats)
        with open_output(output) as out:
            for docid, text in documents:
                out.write(format_raw_document(docid, text))
                stats.written += 1
        logger.info("Wrote %d raw documents to %s (%d filtered out)", stats.written, output, stats.skipped)
        return stats


def dump_raw_documents(config: ExportConfig) -> ExportStats:
    """Open the configured index and write its raw documents."""
    docid_filter = load_docid_filter(config.filter_path) if config.filter_path else None
    with open_index(config.index_path, analyzer=config.analyzer) as index:
        return RawDumpEngine(index).run(
            config.docid_field,
            config.output_path,
            docid_filter=docid_filter,
            strip=config.strip_markup,
        )
