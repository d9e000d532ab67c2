"""
Export defaults and per-run configuration.

Defaults follow the Anserini index layout and can be overridden via
environment variables:
    INDEX_EXPORT_DOCID_FIELD=id          # Stored field holding the external docid
    INDEX_EXPORT_BODY_FIELD=contents     # Field whose term vectors are exported
    INDEX_EXPORT_RAW_FIELD=raw           # Stored field holding the raw document
    INDEX_EXPORT_PROGRESS_EVERY=100000   # Log progress every N documents
    INDEX_EXPORT_ANALYZER=auto           # auto, lucene or porter
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

FIELD_ID = "id"
FIELD_BODY = os.environ.get("INDEX_EXPORT_BODY_FIELD", "contents")
FIELD_RAW = os.environ.get("INDEX_EXPORT_RAW_FIELD", "raw")

DEFAULT_DOCID_FIELD = os.environ.get("INDEX_EXPORT_DOCID_FIELD", FIELD_ID)
DEFAULT_PROGRESS_EVERY = int(os.environ.get("INDEX_EXPORT_PROGRESS_EVERY", "100000"))
DEFAULT_ANALYZER = os.environ.get("INDEX_EXPORT_ANALYZER", "auto")
DEFAULT_TOPIC_FIELD = "title"


@dataclass
class ExportConfig:
    """Settings for one index export run."""
    index_path: Path
    output_path: Path
    docid_field: str = DEFAULT_DOCID_FIELD
    # TF-IDF pruning
    drop_df_by_num: int = 0
    drop_df_by_ratio: float = 0.0
    # Raw dump
    filter_path: Path | None = None
    strip_markup: bool = False
    # Analyzer for JSONL collections loaded in memory
    analyzer: str = DEFAULT_ANALYZER


@dataclass
class TopicConfig:
    """Settings for one topic tokenization run."""
    input_path: Path
    output_path: Path
    topic_reader: str
    topic_field: str = DEFAULT_TOPIC_FIELD
    keep_stopwords: bool = False
    analyzer: str = DEFAULT_ANALYZER


def resolve_drop_threshold(num_threshold: int, ratio_threshold: float, num_non_empty_docs: int) -> int:
    """
    Resolve the document-frequency drop threshold.

    An absolute count wins when positive; otherwise a positive ratio is applied
    to the number of non-empty documents (truncated). Both unset means no pruning.
    """
    if num_threshold > 0:
        return num_threshold
    if ratio_threshold > 0:
        return int(num_non_empty_docs * ratio_threshold)
    return 0
