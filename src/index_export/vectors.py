"""
TF-IDF vector dump.

Writes one block per non-empty document:

    DOC_ID#1
    TERM#1 TF_IDF#1
    ...
    TERM#N TF_IDF#N
    [empty line]

Weights have exactly 6 fractional digits. Terms pruned by the drop threshold
are omitted; a document whose terms are all pruned keeps its header and
empty line. Documents with an empty term vector are skipped with a warning.

Usage:
    from index_export.index import open_index
    from index_export.vectors import VectorDumpEngine

    with open_index("indexes/robust04") as index:
        VectorDumpEngine(index).run("id", "robust04.tfidf", drop_threshold=5)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from index_export.config import DEFAULT_PROGRESS_EVERY, FIELD_BODY, ExportConfig, resolve_drop_threshold
from index_export.errors import NotStoredError
from index_export.export_utils import ExportStats, check_id_field, log_progress, open_output, require_docid
from index_export.index import IndexAccessor, open_index
from index_export.tfidf import DocFrequencyCache, TfidfComputer

logger = logging.getLogger(__name__)

# Spelling of +inf weights in existing Anserini dumps
INFINITE_WEIGHT = "Infinity"


def format_weight(weight: np.float32) -> str:
    if np.isposinf(weight):
        return INFINITE_WEIGHT
    return f"{float(weight):.6f}"


@dataclass
class TfidfRecord:
    """TF-IDF weights of one document, in term-vector order."""
    docid: str
    weights: list[tuple[str, np.float32]]

    def format(self) -> str:
        lines = [f"{self.docid}\n"]
        lines.extend(f"{term} {format_weight(weight)}\n" for term, weight in self.weights)
        lines.append("\n")
        return "".join(lines)


class VectorDumpEngine:
    """
    Dumps TF-IDF document vectors of an index.

    Args:
        index: Open index snapshot with stored term vectors.
        body_field: Field whose term vectors are weighted.
        progress_every: Log progress every N documents (0 disables).
    """

    def __init__(
        self,
        index: IndexAccessor,
        body_field: str = FIELD_BODY,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
    ):
        self.index = index
        self.body_field = body_field
        self.progress_every = progress_every

    def iter_records(
        self,
        id_field: str,
        drop_threshold: int = 0,
        stats: ExportStats | None = None,
    ) -> Iterator[TfidfRecord]:
        """
        Yield the TF-IDF record of every non-empty document in ordinal order.

        The id field is validated before the iterator is returned.

        Raises:
            ConfigurationError: empty index or wrong id field.
            NotStoredError: (while iterating) term vectors were not stored.
        """
        num_docs = check_id_field(self.index, id_field)
        return self._records(num_docs, id_field, drop_threshold, stats or ExportStats())

    def _records(
        self, num_docs: int, id_field: str, drop_threshold: int, stats: ExportStats
    ) -> Iterator[TfidfRecord]:
        num_non_empty = self.index.num_non_empty_docs(self.body_field)
        cache = DocFrequencyCache(self.index)
        computer = TfidfComputer(cache)

        for ordinal in range(num_docs):
            docid = require_docid(self.index, ordinal, id_field)
            vector = self.index.term_vector(ordinal, self.body_field)
            if vector is None:
                raise NotStoredError("Document vector not stored!")

            stats.documents += 1
            if not vector:
                logger.warning("Empty document with id %s", docid)
                stats.skipped += 1
            else:
                weights = []
                for term, term_freq in vector.items():
                    weight = computer.weight(term, term_freq, num_non_empty, drop_threshold)
                    if weight == 0:
                        stats.terms_pruned += 1
                        continue
                    weights.append((term.text, weight))
                stats.terms_written += len(weights)
                yield TfidfRecord(docid, weights)

            log_progress(ordinal, self.progress_every)

        stats.lookup_failures = cache.failures

    def run(self, id_field: str, output: str | Path, drop_threshold: int = 0) -> ExportStats:
        """
        Write the TF-IDF dump to ``output``.

        Nothing is written when the id field check fails. A ``NotStoredError``
        mid-run leaves the blocks written so far in place.
        """
        stats = ExportStats()
        records = self.iter_records(id_field, drop_threshold, stats)
        with open_output(output) as out:
            for record in records:
                out.write(record.format())
                stats.written += 1
        logger.info(
            "Wrote %d TF-IDF vectors to %s (%d empty, %d terms pruned)",
            stats.written, output, stats.skipped, stats.terms_pruned,
        )
        return stats


def dump_tfidf_vectors(config: ExportConfig) -> ExportStats:
    """Open the configured index and write its TF-IDF vectors."""
    with open_index(config.index_path, analyzer=config.analyzer) as index:
        threshold = resolve_drop_threshold(
            config.drop_df_by_num,
            config.drop_df_by_ratio,
            index.num_non_empty_docs(FIELD_BODY),
        )
        logger.info("Dropping terms with document frequency below %d", threshold)
        return VectorDumpEngine(index).run(config.docid_field, config.output_path, threshold)
