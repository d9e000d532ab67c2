"""
Read-only access to a built document index.

The export engines only see the ``IndexAccessor`` protocol. Two snapshots
implement it:

- ``LuceneIndexAccessor``: an Anserini/Pyserini Lucene index on disk. Requires
  pyserini and Java 21; documents must have been indexed with
  ``-storeDocvectors`` (term vectors) and ``-storeRaw`` (raw text) for the
  vector and raw dumps respectively.
- ``InMemoryIndex``: a small index built in Python from raw texts, with the
  same field layout (``id``, ``contents``, ``raw``).

Usage:
    from index_export.index import open_index

    with open_index("indexes/lucene-index.robust04") as index:
        print(index.num_docs(), index.num_non_empty_docs("contents"))
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from index_export.analysis import Analyzer, build_analyzer, tokenize
from index_export.config import FIELD_BODY, FIELD_ID, FIELD_RAW

logger = logging.getLogger(__name__)

JSONL_SUFFIXES = (".jsonl", ".json")


@dataclass(frozen=True)
class Term:
    """A (field, text) pair, as Lucene's ``Term``."""
    field: str
    text: str

    def __str__(self) -> str:
        return f"{self.field}:{self.text}"


class IndexAccessor(Protocol):
    """Protocol defining the index operations the export engines need."""

    def num_docs(self) -> int: ...

    def num_non_empty_docs(self, field: str) -> int: ...

    def stored_field(self, ordinal: int, field: str) -> str | None: ...

    def term_vector(self, ordinal: int, field: str) -> dict[Term, int] | None: ...

    def document_frequency(self, term: Term) -> int: ...

    def resolve_ordinal(self, docid: str) -> int: ...

    def docid(self, ordinal: int, id_field: str) -> str | None: ...

    def close(self) -> None: ...

    def __enter__(self) -> IndexAccessor: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...


class _Snapshot:
    """Shared context-manager behavior of index snapshots."""

    def docid(self, ordinal: int, id_field: str) -> str | None:
        return self.stored_field(ordinal, id_field)

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class InMemoryIndex(_Snapshot):
    """
    Index snapshot held in memory.

    Term vectors are built with ``analyzer`` and iterate in sorted term order,
    like a Lucene TermsEnum.

    Args:
        documents: Raw document texts, in ordinal order.
        ids: Document IDs (default: "0".."N-1").
        analyzer: Callable producing the indexed terms of a text.
        store_vectors: Keep term vectors (as ``-storeDocvectors``).
        store_raw: Keep the raw text (as ``-storeRaw``).
    """

    def __init__(
        self,
        documents: list[str],
        ids: list[str] | None = None,
        analyzer: Analyzer = tokenize,
        store_vectors: bool = True,
        store_raw: bool = True,
    ):
        self.ids = ids or [str(i) for i in range(len(documents))]
        if len(self.ids) != len(documents):
            raise ValueError(f"Got {len(self.ids)} ids for {len(documents)} documents")

        self._id_to_idx = {doc_id: i for i, doc_id in enumerate(self.ids)}
        self._stored: list[dict[str, str]] = []
        self._vectors: list[dict[Term, int] | None] = []
        self._df: Counter[Term] = Counter()
        self._non_empty = 0

        for doc_id, text in zip(self.ids, documents):
            fields = {FIELD_ID: doc_id}
            if store_raw:
                fields[FIELD_RAW] = text
            self._stored.append(fields)

            counts = Counter(analyzer(text))
            if counts:
                self._non_empty += 1
            vector = {Term(FIELD_BODY, t): counts[t] for t in sorted(counts)}
            self._df.update(vector.keys())
            self._vectors.append(vector if store_vectors else None)

    @classmethod
    def from_jsonl(cls, path: str | Path, analyzer: Analyzer = tokenize, **kwargs) -> InMemoryIndex:
        """Load an Anserini JsonCollection file: one ``{"id", "contents"}`` object per line."""
        ids = []
        documents = []
        with open(path, encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                doc = json.loads(line)
                ids.append(str(doc["id"]))
                documents.append(doc["contents"])
        logger.info("Loaded %d documents from %s", len(documents), path)
        return cls(documents, ids, analyzer=analyzer, **kwargs)

    def __len__(self) -> int:
        return len(self.ids)

    def num_docs(self) -> int:
        return len(self.ids)

    def num_non_empty_docs(self, field: str) -> int:
        return self._non_empty if field == FIELD_BODY else 0

    def stored_field(self, ordinal: int, field: str) -> str | None:
        return self._stored[ordinal].get(field)

    def term_vector(self, ordinal: int, field: str) -> dict[Term, int] | None:
        if field != FIELD_BODY:
            return None
        return self._vectors[ordinal]

    def document_frequency(self, term: Term) -> int:
        return self._df[term]

    def resolve_ordinal(self, docid: str) -> int:
        return self._id_to_idx[docid]


class LuceneIndexAccessor(_Snapshot):
    """
    Snapshot of a Lucene index opened through Pyserini.

    Note: requires pyserini and Java 21 to be installed.
    """

    def __init__(self, index_dir: str | Path):
        try:
            from pyserini.index.lucene import LuceneIndexReader
            from pyserini.pyclass import autoclass
        except ImportError as e:
            raise ImportError(
                "Pyserini is required to read Lucene indexes. "
                "Install with: pip install pyserini\n"
                "Note: Pyserini requires Java 21 to be installed."
            ) from e

        self.index_dir = Path(index_dir)
        self._index_reader = LuceneIndexReader(str(self.index_dir))
        self._reader = self._index_reader.reader
        self._stored_fields = self._reader.storedFields()
        self._term_vectors = self._reader.termVectors()
        self._JTerm = autoclass("org.apache.lucene.index.Term")

    def num_docs(self) -> int:
        return int(self._reader.numDocs())

    def num_non_empty_docs(self, field: str) -> int:
        return int(self._reader.getDocCount(field))

    def stored_field(self, ordinal: int, field: str) -> str | None:
        value = self._stored_fields.document(ordinal).get(field)
        return str(value) if value is not None else None

    def term_vector(self, ordinal: int, field: str) -> dict[Term, int] | None:
        terms = self._term_vectors.get(ordinal, field)
        if terms is None:
            return None
        terms_enum = terms.iterator()
        if terms_enum is None:
            return None

        vector = {}
        while True:
            term_bytes = terms_enum.next()
            if term_bytes is None:
                break
            vector[Term(field, term_bytes.utf8ToString())] = int(terms_enum.totalTermFreq())
        return vector

    def document_frequency(self, term: Term) -> int:
        return int(self._reader.docFreq(self._JTerm(term.field, term.text)))

    def resolve_ordinal(self, docid: str) -> int:
        ordinal = self._index_reader.convert_collection_docid_to_internal_docid(docid)
        if ordinal is None or ordinal < 0:
            raise KeyError(docid)
        return int(ordinal)

    def close(self) -> None:
        self._reader.close()


def open_index(path: str | Path, analyzer: Analyzer | str | None = None) -> IndexAccessor:
    """
    Open a read-only index snapshot.

    A directory is opened as a Lucene index; a ``.jsonl``/``.json`` file is
    loaded into an ``InMemoryIndex`` analyzed with ``analyzer`` (a callable,
    or an analyzer name for ``build_analyzer``).
    """
    path = Path(path)
    if path.is_file() and path.suffix in JSONL_SUFFIXES:
        if isinstance(analyzer, str):
            analyzer = build_analyzer(analyzer)
        return InMemoryIndex.from_jsonl(path, analyzer=analyzer or tokenize)
    return LuceneIndexAccessor(path)


__all__ = [
    "Term",
    "IndexAccessor",
    "InMemoryIndex",
    "LuceneIndexAccessor",
    "open_index",
]
