import math

import numpy as np
import pytest

from index_export.config import resolve_drop_threshold
from index_export.errors import DegenerateIndexError
from index_export.index import InMemoryIndex, Term
from index_export.tfidf import LOOKUP_FAILED, DocFrequencyCache, TfidfComputer, tfidf_weight


class FlakyIndex(InMemoryIndex):
    """Fails the first ``failures`` document-frequency lookups of ``bad_term``."""

    def __init__(self, *args, bad_term: str, failures: int = 1, **kwargs):
        super().__init__(*args, **kwargs)
        self.bad_term = bad_term
        self.failures = failures
        self.lookups = 0

    def document_frequency(self, term):
        self.lookups += 1
        if term.text == self.bad_term and self.failures > 0:
            self.failures -= 1
            raise RuntimeError("lookup failed")
        return super().document_frequency(term)


class TestTfidfWeight:
    @pytest.mark.parametrize(
        "tf, df, n, expected",
        [
            (2, 2, 3, "0.810930"),
            (1, 2, 3, "0.405465"),
            (1, 1, 3, "1.098612"),
        ],
    )
    def test_weights(self, tf, df, n, expected):
        weight = tfidf_weight(tf, df, n)
        assert f"{float(weight):.6f}" == expected

    def test_weight_is_float32(self):
        assert isinstance(tfidf_weight(1, 1, 3), np.float32)

    def test_matches_formula(self):
        weight = tfidf_weight(3, 4, 100, drop_threshold=2)
        assert np.isclose(weight, 3 * math.log(100 / 4), rtol=1e-6)

    def test_positive_when_df_below_num_docs(self):
        assert tfidf_weight(1, 99, 100) > 0

    def test_below_threshold_is_pruned(self):
        assert tfidf_weight(5, 1, 3, drop_threshold=2) == 0

    def test_threshold_is_inclusive(self):
        assert tfidf_weight(1, 2, 3, drop_threshold=2) > 0

    def test_zero_df_is_infinite(self):
        assert math.isinf(tfidf_weight(1, 0, 3))


class TestDocFrequencyCache:
    def test_memoizes(self, pets_index):
        cache = DocFrequencyCache(pets_index)
        cat = Term("contents", "cat")
        assert cache.get(cat) == 2
        assert cache.get(cat) == 2
        assert cache.misses == 1
        assert cache.hits == 1
        assert len(cache) == 1

    def test_failure_returns_sentinel_and_is_not_cached(self):
        index = FlakyIndex(["cat dog"], bad_term="cat")
        cache = DocFrequencyCache(index)
        cat = Term("contents", "cat")

        assert cache.get(cat) == LOOKUP_FAILED
        assert cat not in cache
        assert cache.failures == 1

        # Retried on the next occurrence
        assert cache.get(cat) == 1
        assert index.lookups == 2

    def test_absent_term_is_zero(self, pets_index):
        assert DocFrequencyCache(pets_index).get(Term("contents", "bird")) == 0


class TestTfidfComputer:
    def test_uses_cached_df(self, pets_index):
        computer = TfidfComputer(DocFrequencyCache(pets_index))
        weight = computer.weight(Term("contents", "cat"), 2, 3)
        assert f"{float(weight):.6f}" == "0.810930"

    def test_failed_lookup_pruned_by_threshold(self):
        index = FlakyIndex(["cat dog", "dog"], bad_term="cat")
        computer = TfidfComputer(DocFrequencyCache(index))
        assert computer.weight(Term("contents", "cat"), 1, 2, drop_threshold=1) == 0

    def test_failed_lookup_without_threshold_is_infinite(self):
        index = FlakyIndex(["cat dog", "dog"], bad_term="cat")
        computer = TfidfComputer(DocFrequencyCache(index))
        assert math.isinf(computer.weight(Term("contents", "cat"), 1, 2))

    def test_zero_df_from_index_raises(self, pets_index):
        computer = TfidfComputer(DocFrequencyCache(pets_index))
        with pytest.raises(DegenerateIndexError):
            computer.weight(Term("contents", "bird"), 1, 3)

    def test_zero_df_from_index_pruned_by_threshold(self, pets_index):
        computer = TfidfComputer(DocFrequencyCache(pets_index))
        assert computer.weight(Term("contents", "bird"), 1, 3, drop_threshold=1) == 0


class TestDropThreshold:
    @pytest.mark.parametrize(
        "num, ratio, non_empty, expected",
        [
            (5, 0.0, 100, 5),
            (5, 0.5, 100, 5),
            (0, 0.25, 100, 25),
            (0, 0.015, 100, 1),
            (0, 0.0, 100, 0),
            (-1, 0.0, 100, 0),
        ],
    )
    def test_resolve(self, num, ratio, non_empty, expected):
        assert resolve_drop_threshold(num, ratio, non_empty) == expected
