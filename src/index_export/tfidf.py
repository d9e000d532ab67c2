"""
TF-IDF weighting with document-frequency pruning.

Weight of a term in a document:
    w(t, d) = tf(t, d) * ln(N / df(t))     if df(t) >= threshold
    w(t, d) = 0                            otherwise (pruned)

where N is the number of non-empty documents of the body field. Weights are
32-bit floats. A zero weight always means "pruned" and is never written.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from index_export.errors import DegenerateIndexError
from index_export.index import IndexAccessor, Term

logger = logging.getLogger(__name__)

# Returned by DocFrequencyCache.get when the index lookup failed
LOOKUP_FAILED = -1


def tfidf_weight(term_freq: int, doc_freq: int, num_docs: int, drop_threshold: int = 0) -> np.float32:
    """
    Compute a single TF-IDF weight.

    Args:
        term_freq: Occurrences of the term in the document (> 0).
        doc_freq: Documents containing the term.
        num_docs: Non-empty documents in the corpus.
        drop_threshold: Terms with df below this are pruned to 0.

    Returns:
        The weight as float32. ``inf`` when ``doc_freq`` is 0 and passes the threshold.
    """
    if doc_freq < drop_threshold:
        return np.float32(0.0)
    if doc_freq == 0:
        return np.float32(math.inf)
    return np.float32(term_freq * math.log(num_docs / doc_freq))


class DocFrequencyCache:
    """
    Per-run memo of document frequencies.

    Failed lookups are logged and reported as ``LOOKUP_FAILED`` without being
    cached, so a later occurrence of the term queries the index again.
    """

    def __init__(self, index: IndexAccessor):
        self.index = index
        self._df: dict[Term, int] = {}
        self.hits = 0
        self.misses = 0
        self.failures = 0

    def __len__(self) -> int:
        return len(self._df)

    def __contains__(self, term: Term) -> bool:
        return term in self._df

    def get(self, term: Term) -> int:
        if term in self._df:
            self.hits += 1
            return self._df[term]

        self.misses += 1
        try:
            doc_freq = self.index.document_frequency(term)
        except Exception:
            self.failures += 1
            logger.exception("Cannot find term %s in index", term)
            return LOOKUP_FAILED

        self._df[term] = doc_freq
        return doc_freq


class TfidfComputer:
    """Applies the weighting policy with document frequencies from a cache."""

    def __init__(self, cache: DocFrequencyCache):
        self.cache = cache

    def weight(self, term: Term, term_freq: int, num_docs: int, drop_threshold: int = 0) -> np.float32:
        doc_freq = self.cache.get(term)
        if doc_freq == LOOKUP_FAILED:
            # Known quirk: a failed lookup counts as df=0. It is pruned by any
            # positive threshold and weighs +inf otherwise, which the vector
            # dump writes as "Infinity".
            if drop_threshold <= 0:
                logger.warning("Document frequency of %s unknown, writing an infinite weight", term)
            return tfidf_weight(term_freq, 0, num_docs, drop_threshold)

        if doc_freq == 0 and drop_threshold <= 0:
            raise DegenerateIndexError(
                f"Index reports document frequency 0 for term {term} found in a document vector"
            )
        return tfidf_weight(term_freq, doc_freq, num_docs, drop_threshold)


__all__ = [
    "LOOKUP_FAILED",
    "DocFrequencyCache",
    "TfidfComputer",
    "tfidf_weight",
]
