"""
Topic (query) file readers.

Each reader maps a topic file to ``{topic_id: {field: text}}`` sorted by id.
Readers are looked up by name in ``TOPIC_READERS``:

    trec    TREC ad hoc ``<top>`` blocks (fields: title, description, narrative)
    webxml  TREC Web track XML (fields: title, description, subtopicN)
    tsv     ``id<TAB>query`` lines (field: title)
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from collections.abc import Callable
from pathlib import Path

from index_export.errors import ConfigurationError, TopicFileError

Topics = dict[int, dict[str, str]]
TopicReader = Callable[[str | Path], Topics]

_TOP_BLOCK = re.compile(r"<top>(.*?)</top>", re.DOTALL)
_NUM = re.compile(r"<num>\s*(?:Number:)?\s*(\d+)")
_SECTIONS = {
    "title": (re.compile(r"<title>([^<]*)"), re.compile(r"^\s*Topic:")),
    "description": (re.compile(r"<desc>([^<]*)"), re.compile(r"^\s*Description:")),
    "narrative": (re.compile(r"<narr>([^<]*)"), re.compile(r"^\s*Narrative:")),
}


def _normalize(text: str) -> str:
    return " ".join(text.split())


def _topic_id(value: str, path: str | Path) -> int:
    try:
        return int(value)
    except ValueError:
        raise TopicFileError(f"{path}: topic id '{value}' is not an integer") from None


def read_trec_topics(path: str | Path) -> Topics:
    """Read TREC ad hoc topics."""
    with open(path, encoding="utf-8") as f:
        content = f.read()

    topics: Topics = {}
    for block in _TOP_BLOCK.findall(content):
        num = _NUM.search(block)
        if num is None:
            raise TopicFileError(f"{path}: <top> block without <num>")

        fields = {}
        for field, (pattern, prefix) in _SECTIONS.items():
            match = pattern.search(block)
            if match is not None:
                fields[field] = _normalize(prefix.sub("", match.group(1)))
        topics[_topic_id(num.group(1), path)] = fields
    return dict(sorted(topics.items()))


def read_webxml_topics(path: str | Path) -> Topics:
    """
    Read TREC Web track XML topics.

    ``<query>`` becomes the title; each ``<subtopic number="N">`` becomes
    field ``subtopicN``.
    """
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise TopicFileError(f"{path}: {e}") from e

    topics: Topics = {}
    for topic in root.iter("topic"):
        number = topic.get("number")
        if number is None:
            raise TopicFileError(f"{path}: <topic> without number attribute")

        fields = {}
        query = topic.findtext("query")
        if query is not None:
            fields["title"] = _normalize(query)
        description = topic.findtext("description")
        if description is not None:
            fields["description"] = _normalize(description)
        for position, subtopic in enumerate(topic.iter("subtopic"), start=1):
            subtopic_number = subtopic.get("number", str(position))
            fields[f"subtopic{subtopic_number}"] = _normalize(subtopic.text or "")
        topics[_topic_id(number, path)] = fields
    return dict(sorted(topics.items()))


def read_tsv_topics(path: str | Path) -> Topics:
    """Read ``id<TAB>query`` topics."""
    topics: Topics = {}
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            line = line.rstrip("\n")
            if not line.strip():
                continue
            parts = line.split("\t", 1)
            if len(parts) != 2:
                raise TopicFileError(f"{path}:{line_no}: expected 'id<TAB>query'")
            topics[_topic_id(parts[0].strip(), path)] = {"title": parts[1].strip()}
    return dict(sorted(topics.items()))


TOPIC_READERS: dict[str, TopicReader] = {
    "trec": read_trec_topics,
    "webxml": read_webxml_topics,
    "tsv": read_tsv_topics,
}


def get_topic_reader(name: str) -> TopicReader:
    """Look up a reader by (case-insensitive) name."""
    try:
        return TOPIC_READERS[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown topic reader '{name}', expected one of {sorted(TOPIC_READERS)}"
        ) from None
