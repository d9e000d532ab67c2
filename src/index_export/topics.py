"""
Topic tokenization.

Writes one block per topic, in the order of the topic collection:

    TOPIC_ID
    TOKEN#1 TOKEN#2 ... TOKEN#N
    [empty line]
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path

from index_export.analysis import Analyzer, build_analyzer
from index_export.config import DEFAULT_TOPIC_FIELD, TopicConfig
from index_export.export_utils import ExportStats, open_output
from index_export.topic_readers import get_topic_reader

logger = logging.getLogger(__name__)


def format_topic(topic_id: int, tokens: list[str]) -> str:
    return f"{topic_id}\n{' '.join(tokens)}\n\n"


class TopicTokenizeEngine:
    """Runs one field of every topic through an analyzer."""

    def __init__(self, analyzer: Analyzer):
        self.analyzer = analyzer

    def iter_tokens(
        self,
        topics: Mapping[int, Mapping[str, str]],
        field: str = DEFAULT_TOPIC_FIELD,
        stats: ExportStats | None = None,
    ) -> Iterator[tuple[int, list[str]]]:
        stats = stats if stats is not None else ExportStats()
        for topic_id, fields in topics.items():
            stats.documents += 1
            text = fields.get(field)
            if text is None:
                logger.debug("Topic %s has no %s field", topic_id, field)
                stats.skipped += 1
                text = ""
            yield topic_id, self.analyzer(text)

    def run(
        self,
        topics: Mapping[int, Mapping[str, str]],
        output: str | Path,
        field: str = DEFAULT_TOPIC_FIELD,
    ) -> ExportStats:
        """Write the tokenized topics to ``output``."""
        stats = ExportStats()
        with open_output(output) as out:
            for topic_id, tokens in self.iter_tokens(topics, field, stats):
                out.write(format_topic(topic_id, tokens))
                stats.written += 1
                stats.terms_written += len(tokens)
        logger.info("Wrote %d tokenized topics to %s", stats.written, output)
        return stats


def tokenize_topics(config: TopicConfig) -> ExportStats:
    """Read, tokenize and write the configured topic file."""
    reader = get_topic_reader(config.topic_reader)
    topics = reader(config.input_path)
    logger.info("Read %d topics from %s", len(topics), config.input_path)
    analyzer = build_analyzer(config.analyzer, keep_stopwords=config.keep_stopwords)
    return TopicTokenizeEngine(analyzer).run(topics, config.output_path, config.topic_field)
