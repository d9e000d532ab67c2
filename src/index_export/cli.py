"""
Command-line entry point.

Examples:
  # TF-IDF vectors, dropping terms that occur in fewer than 5 documents
  index-export vectors --index indexes/robust04 --output robust04.tfidf --drop-df-by-num 5

  # Raw documents of a run file's docids, HTML stripped
  index-export raw --index indexes/cw09b --output docs.txt --filter run.txt --strip-markup

  # Tokenized TREC topic titles
  index-export topics --input topics.301-450.txt --topic-reader trec --output topics.tok
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from index_export.analysis import ANALYZER_NAMES
from index_export.config import (
    DEFAULT_ANALYZER,
    DEFAULT_DOCID_FIELD,
    DEFAULT_TOPIC_FIELD,
    ExportConfig,
    TopicConfig,
)
from index_export.errors import ExportError
from index_export.raw import dump_raw_documents
from index_export.topic_readers import TOPIC_READERS
from index_export.topics import tokenize_topics
from index_export.vectors import dump_tfidf_vectors

logger = logging.getLogger("index_export")


def _add_index_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--index", "-i", type=Path, required=True,
        help="Lucene index directory (or a JSONL collection file)"
    )
    parser.add_argument("--output", "-o", type=Path, required=True, help="Output path")
    parser.add_argument(
        "--docid-field", default=DEFAULT_DOCID_FIELD,
        help=f"Stored field holding the document ID (default: {DEFAULT_DOCID_FIELD})"
    )
    parser.add_argument(
        "--analyzer", choices=ANALYZER_NAMES, default=DEFAULT_ANALYZER,
        help="Analyzer for JSONL collections; ignored for Lucene indexes (default: %(default)s)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="index-export",
        description="Export raw documents, TF-IDF vectors or tokenized topics from an index.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    vectors = subparsers.add_parser("vectors", help="Dump TF-IDF document vectors")
    _add_index_arguments(vectors)
    vectors.add_argument(
        "--drop-df-by-num", type=int, default=0,
        help="Drop terms with document frequency below this number"
    )
    vectors.add_argument(
        "--drop-df-by-ratio", type=float, default=0.0,
        help="Drop terms with document frequency below this ratio of non-empty documents"
    )

    raw = subparsers.add_parser("raw", help="Dump raw documents")
    _add_index_arguments(raw)
    raw.add_argument(
        "--filter", type=Path, default=None,
        help="Only dump docids listed in the third column of this file"
    )
    raw.add_argument("--strip-markup", action="store_true", help="Strip HTML markup from documents")

    topics = subparsers.add_parser("topics", help="Tokenize query topics")
    topics.add_argument("--input", type=Path, required=True, help="Topic file")
    topics.add_argument(
        "--topic-reader", type=str.lower, choices=sorted(TOPIC_READERS), required=True,
        help="Topic file format"
    )
    topics.add_argument("--output", "-o", type=Path, required=True, help="Output path")
    topics.add_argument(
        "--topic-field", default=DEFAULT_TOPIC_FIELD,
        help=f"Topic field to tokenize (default: {DEFAULT_TOPIC_FIELD})"
    )
    topics.add_argument("--keep-stopwords", action="store_true", help="Keep stopwords in the topics")
    topics.add_argument(
        "--analyzer", choices=ANALYZER_NAMES, default=DEFAULT_ANALYZER,
        help="Analyzer (default: %(default)s)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "vectors":
            stats = dump_tfidf_vectors(
                ExportConfig(
                    index_path=args.index,
                    output_path=args.output,
                    docid_field=args.docid_field,
                    drop_df_by_num=args.drop_df_by_num,
                    drop_df_by_ratio=args.drop_df_by_ratio,
                    analyzer=args.analyzer,
                )
            )
        elif args.command == "raw":
            stats = dump_raw_documents(
                ExportConfig(
                    index_path=args.index,
                    output_path=args.output,
                    docid_field=args.docid_field,
                    filter_path=args.filter,
                    strip_markup=args.strip_markup,
                    analyzer=args.analyzer,
                )
            )
        else:
            stats = tokenize_topics(
                TopicConfig(
                    input_path=args.input,
                    output_path=args.output,
                    topic_reader=args.topic_reader,
                    topic_field=args.topic_field,
                    keep_stopwords=args.keep_stopwords,
                    analyzer=args.analyzer,
                )
            )
    except ExportError as e:
        logger.error("%s", e.message)
        return 1

    logger.debug("Run stats: %s", stats.as_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
