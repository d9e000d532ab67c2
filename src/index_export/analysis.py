"""
Text analysis used for topic tokenization and in-memory indexes.

Two analyzers share one interface (``analyzer(text) -> list[str]``):

- ``LuceneAnalyzer`` wraps Pyserini's Lucene English analyzer (requires Java 21).
- ``EnglishAnalyzer`` approximates Lucene's EnglishAnalyzer in Python:
  word tokenization, possessive removal, lowercasing, the 33-word Lucene
  stoplist and NLTK's Porter stemmer (original algorithm, as Lucene's
  PorterStemFilter).

Usage:
    from index_export.analysis import build_analyzer

    analyzer = build_analyzer("auto", keep_stopwords=False)
    tokens = analyzer("International Organized Crime")
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from nltk.stem.porter import PorterStemmer

logger = logging.getLogger(__name__)

Analyzer = Callable[[str], list[str]]

# Lucene EnglishAnalyzer default stop set
LUCENE_STOPWORDS: frozenset[str] = frozenset(
    [
        "a", "an", "and", "are", "as", "at", "be", "but", "by", "for", "if", "in",
        "into", "is", "it", "no", "not", "of", "on", "or", "such", "that", "the",
        "their", "then", "there", "these", "they", "this", "to", "was", "will", "with",
    ]
)

ANALYZER_NAMES = ("auto", "lucene", "porter")

_TOKEN_PATTERN = re.compile(r"\w+(?:['’]\w+)*")
_POSSESSIVE_PATTERN = re.compile(r"['’]s$")


def tokenize(text: str) -> list[str]:
    """Tokenizes the input text into a list of lowercase terms."""
    return re.findall(r"\w+", text.lower())


class EnglishAnalyzer:
    """
    Lucene-style English analyzer on top of NLTK.

    Args:
        stopwords: Terms dropped after lowercasing (default: Lucene's stoplist).
        stem: Apply Porter stemming.
    """

    def __init__(self, stopwords: frozenset[str] = LUCENE_STOPWORDS, stem: bool = True):
        self.stopwords = stopwords
        self._stemmer = PorterStemmer(mode=PorterStemmer.ORIGINAL_ALGORITHM) if stem else None

    def __call__(self, text: str) -> list[str]:
        tokens = []
        for token in _TOKEN_PATTERN.findall(text.lower()):
            token = _POSSESSIVE_PATTERN.sub("", token)
            if not token or token in self.stopwords:
                continue
            if self._stemmer is not None:
                token = self._stemmer.stem(token)
            tokens.append(token)
        return tokens


class LuceneAnalyzer:
    """
    Pyserini's Lucene DefaultEnglishAnalyzer.

    Note: requires pyserini and a Java 21 runtime.
    """

    def __init__(self, keep_stopwords: bool = False):
        try:
            from pyserini.analysis import Analyzer as PyseriniAnalyzer
            from pyserini.analysis import get_lucene_analyzer
        except ImportError as e:
            raise ImportError(
                "Pyserini is required for the Lucene analyzer. "
                "Install with: pip install pyserini\n"
                "Note: Pyserini requires Java 21 to be installed."
            ) from e

        self._analyzer = PyseriniAnalyzer(get_lucene_analyzer(stopwords=not keep_stopwords))

    def __call__(self, text: str) -> list[str]:
        return list(self._analyzer.analyze(text))


def build_analyzer(name: str = "auto", keep_stopwords: bool = False) -> Analyzer:
    """
    Build an analyzer by name.

    ``auto`` prefers the Lucene analyzer and falls back to ``EnglishAnalyzer``
    when Pyserini or the JVM cannot be loaded.
    """
    if name not in ANALYZER_NAMES:
        raise ValueError(f"Unknown analyzer '{name}', expected one of {ANALYZER_NAMES}")

    if name == "porter":
        return EnglishAnalyzer(stopwords=frozenset() if keep_stopwords else LUCENE_STOPWORDS)
    if name == "lucene":
        return LuceneAnalyzer(keep_stopwords=keep_stopwords)

    try:
        return LuceneAnalyzer(keep_stopwords=keep_stopwords)
    except Exception as e:
        logger.warning("Lucene analyzer unavailable (%s), using NLTK Porter analyzer", e)
        return EnglishAnalyzer(stopwords=frozenset() if keep_stopwords else LUCENE_STOPWORDS)


__all__ = [
    "Analyzer",
    "ANALYZER_NAMES",
    "EnglishAnalyzer",
    "LuceneAnalyzer",
    "LUCENE_STOPWORDS",
    "build_analyzer",
    "tokenize",
]
