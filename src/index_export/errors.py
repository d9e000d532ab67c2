"""Error taxonomy shared by the export engines.

Every fatal condition raised by an engine is an ``ExportError`` tagged with an
``ErrorKind``. Soft conditions (empty documents, failed document-frequency
lookups, missing topic fields) are logged and never raised.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    CONFIGURATION = "configuration"
    NOT_STORED = "not_stored"
    INPUT_FORMAT = "input_format"
    DEGENERATE_INDEX = "degenerate_index"


class ExportError(Exception):
    """Base class for fatal export errors."""

    kind: ErrorKind = ErrorKind.CONFIGURATION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ExportError):
    """Wrong document id field, empty index, unknown topic reader."""

    kind = ErrorKind.CONFIGURATION


class NotStoredError(ExportError):
    """A field the export needs was not stored when the index was built."""

    kind = ErrorKind.NOT_STORED


class InputFormatError(ExportError):
    """An auxiliary input file could not be parsed."""

    kind = ErrorKind.INPUT_FORMAT


class FilterFileError(InputFormatError):
    pass


class TopicFileError(InputFormatError):
    pass


class DegenerateIndexError(ExportError):
    """The index reports a document frequency of zero for a term it contains."""

    kind = ErrorKind.DEGENERATE_INDEX


__all__ = [
    "ErrorKind",
    "ExportError",
    "ConfigurationError",
    "NotStoredError",
    "InputFormatError",
    "FilterFileError",
    "TopicFileError",
    "DegenerateIndexError",
]
