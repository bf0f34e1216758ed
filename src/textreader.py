"""Public SDK surface for the text reader.

This module provides a stable import path for library users.
It re-exports the configuration, decoding, and sink entry points.
"""

from __future__ import annotations

from core.config import ReaderConfig
from core.errors import (
    ReaderColumnSpecError,
    ReaderConfigError,
    ReaderDependencyError,
    ReaderError,
    ReaderIngestError,
    ReaderProjectionError,
)
from core.types import IndexDirective, LiteralDirective, Record, ReaderRunOptions, SourceReadResult
from ingest.column_spec import format_columns, parse_columns
from ingest.line_decoder import LineDecoder
from ingest.pipeline import TextReaderRunner, read_source, read_text_files
from ingest.projector import decode_null, project
from ingest.sinks import CollectingRecordSink, JsonlRecordSink, RecordSink
from ingest.tokenizer import tokenize

__all__ = [
    "CollectingRecordSink",
    "IndexDirective",
    "JsonlRecordSink",
    "LineDecoder",
    "LiteralDirective",
    "ReaderColumnSpecError",
    "ReaderConfig",
    "ReaderConfigError",
    "ReaderDependencyError",
    "ReaderError",
    "ReaderIngestError",
    "ReaderProjectionError",
    "ReaderRunOptions",
    "Record",
    "RecordSink",
    "SourceReadResult",
    "TextReaderRunner",
    "decode_null",
    "format_columns",
    "parse_columns",
    "project",
    "read_source",
    "read_text_files",
    "tokenize",
]
