import pytest

from index_export.config import ExportConfig
from index_export.errors import ConfigurationError, FilterFileError, NotStoredError
from index_export.index import InMemoryIndex
from index_export.raw import RawDumpEngine, dump_raw_documents, load_docid_filter, strip_markup


@pytest.fixture
def html_index():
    return InMemoryIndex(
        [
            "<html><body><p>Cats  purr</p></body></html>",
            "<html><head><title>Dogs</title></head><body>bark</body></html>",
            "plain text",
        ],
        ids=["d1", "d2", "d3"],
    )


class TestRawDump:
    def test_all_documents(self, pets_index, tmp_path):
        output = tmp_path / "raw.txt"
        stats = RawDumpEngine(pets_index).run("id", output)

        assert output.read_text() == (
            "<doc> d1\ncat cat\n</doc>\n"
            "<doc> d2\ncat\n</doc>\n"
            "<doc> d3\ndog\n</doc>\n"
        )
        assert stats.written == 3

    def test_filter(self, pets_index, tmp_path):
        output = tmp_path / "raw.txt"
        RawDumpEngine(pets_index).run("id", output, docid_filter={"d3", "d1", "d9"})

        assert output.read_text() == "<doc> d1\ncat cat\n</doc>\n<doc> d3\ndog\n</doc>\n"

    def test_strip_markup(self, html_index, tmp_path):
        output = tmp_path / "raw.txt"
        RawDumpEngine(html_index).run("id", output, strip=True)

        assert output.read_text() == (
            "<doc> d1\nCats purr\n</doc>\n"
            "<doc> d2\nDogs bark\n</doc>\n"
            "<doc> d3\nplain text\n</doc>\n"
        )

    def test_markup_kept_by_default(self, html_index):
        documents = list(RawDumpEngine(html_index).iter_documents("id"))
        assert documents[0] == ("d1", "<html><body><p>Cats  purr</p></body></html>")

    def test_raw_not_stored(self, tmp_path):
        index = InMemoryIndex(["cat"], store_raw=False)
        with pytest.raises(NotStoredError, match="Raw documents not stored"):
            RawDumpEngine(index).run("id", tmp_path / "raw.txt")

    def test_filtered_documents_need_no_raw_field(self, tmp_path):
        index = InMemoryIndex(["cat"], ids=["d1"], store_raw=False)
        output = tmp_path / "raw.txt"
        RawDumpEngine(index).run("id", output, docid_filter={"d2"})
        assert output.read_text() == ""

    def test_wrong_id_field(self, pets_index, tmp_path):
        output = tmp_path / "raw.txt"
        with pytest.raises(ConfigurationError):
            RawDumpEngine(pets_index).run("docno", output)
        assert not output.exists()


class TestStripMarkup:
    @pytest.mark.parametrize(
        "html, expected",
        [
            ("<p>Hello <b>world</b></p>", "Hello world"),
            ("no markup", "no markup"),
            ("<div>\n  spaced \n\n out </div>", "spaced out"),
            ("", ""),
            ("<p>Hel<b>lo</b> world H<sub>2</sub>O</p>", "Hello world H2O"),
            ("<p>one</p><p>two</p>", "one two"),
            ("line<br>break", "line break"),
            ("<ul><li>a</li><li>b</li></ul>", "a b"),
            ("<span>in</span><em>line</em>", "inline"),
        ],
    )
    def test_strip(self, html, expected):
        assert strip_markup(html) == expected


class TestDocidFilter:
    def test_third_column(self, tmp_path):
        path = tmp_path / "run.txt"
        path.write_text("301 Q0 d1 1 12.5 bm25\n301\tQ0\td3\t2\t11.0\tbm25\n\n302  Q0  d1 1 9.0 bm25\n")
        assert load_docid_filter(path) == {"d1", "d3"}

    def test_short_line_fails(self, tmp_path):
        path = tmp_path / "run.txt"
        path.write_text("301 Q0 d1 1 12.5 bm25\n302 Q0\n")
        with pytest.raises(FilterFileError, match=":2:"):
            load_docid_filter(path)


def test_dump_raw_documents_with_filter(tmp_path):
    collection = tmp_path / "docs.jsonl"
    collection.write_text(
        '{"id": "d1", "contents": "<p>first</p>"}\n'
        '{"id": "d2", "contents": "<p>second</p>"}\n'
        '{"id": "d3", "contents": "<p>third</p>"}\n'
    )
    run = tmp_path / "run.txt"
    run.write_text("1 Q0 d3 1 2.0 x\n1 Q0 d1 2 1.0 x\n")
    output = tmp_path / "raw.txt"

    dump_raw_documents(
        ExportConfig(
            index_path=collection,
            output_path=output,
            filter_path=run,
            strip_markup=True,
            analyzer="porter",
        )
    )
    assert output.read_text() == "<doc> d1\nfirst\n</doc>\n<doc> d3\nthird\n</doc>\n"
