import pytest

from index_export.index import InMemoryIndex, Term, open_index


class TestInMemoryIndex:
    def test_counts(self):
        index = InMemoryIndex(["cat cat", "", "dog"], ids=["d1", "d2", "d3"])
        assert index.num_docs() == 3
        assert index.num_non_empty_docs("contents") == 2

    def test_resolve_ordinal(self, pets_index):
        assert [pets_index.resolve_ordinal(d) for d in ("d1", "d2", "d3")] == [0, 1, 2]
        with pytest.raises(KeyError):
            pets_index.resolve_ordinal("d9")

    def test_docid_and_stored_fields(self, pets_index):
        assert pets_index.docid(1, "id") == "d2"
        assert pets_index.stored_field(1, "raw") == "cat"
        assert pets_index.docid(1, "docno") is None

    def test_term_vector_sorted(self):
        index = InMemoryIndex(["pear apple pear"])
        assert list(index.term_vector(0, "contents").items()) == [
            (Term("contents", "apple"), 1),
            (Term("contents", "pear"), 2),
        ]

    def test_document_frequency(self, pets_index):
        assert pets_index.document_frequency(Term("contents", "cat")) == 2
        assert pets_index.document_frequency(Term("contents", "emu")) == 0

    def test_mismatched_ids(self):
        with pytest.raises(ValueError):
            InMemoryIndex(["a", "b"], ids=["only-one"])


def test_open_index_jsonl(tmp_path):
    collection = tmp_path / "docs.jsonl"
    collection.write_text('{"id": "x", "contents": "hello world"}\n\n{"id": 7, "contents": "hi"}\n')
    with open_index(collection, analyzer=str.split) as index:
        assert index.num_docs() == 2
        assert index.resolve_ordinal("7") == 1
