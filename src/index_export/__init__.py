"""Export raw documents, TF-IDF vectors and tokenized topics from a document index."""

from index_export.errors import (
    ConfigurationError,
    DegenerateIndexError,
    ErrorKind,
    ExportError,
    FilterFileError,
    InputFormatError,
    NotStoredError,
    TopicFileError,
)
from index_export.index import InMemoryIndex, LuceneIndexAccessor, Term, open_index
from index_export.raw import RawDumpEngine, load_docid_filter, strip_markup
from index_export.tfidf import DocFrequencyCache, TfidfComputer, tfidf_weight
from index_export.topics import TopicTokenizeEngine
from index_export.vectors import VectorDumpEngine

__all__ = [
    "ConfigurationError",
    "DegenerateIndexError",
    "ErrorKind",
    "ExportError",
    "FilterFileError",
    "InputFormatError",
    "NotStoredError",
    "TopicFileError",
    "InMemoryIndex",
    "LuceneIndexAccessor",
    "Term",
    "open_index",
    "RawDumpEngine",
    "load_docid_filter",
    "strip_markup",
    "DocFrequencyCache",
    "TfidfComputer",
    "tfidf_weight",
    "TopicTokenizeEngine",
    "VectorDumpEngine",
]
