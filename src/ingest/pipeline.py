"""Reader orchestration.

This module drives configured sources through the line decoder and into
a record sink, one source at a time and one line at a time.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.config import ReaderConfig
from core.errors import ReaderConfigError, ReaderIngestError, ReaderProjectionError
from core.logging_config import get_logger
from core.types import Record, ReaderRunOptions, SchemaFields, SourceReadResult
from ingest.column_spec import format_columns
from ingest.line_decoder import LineDecoder
from ingest.sinks import RecordSink
from ingest.source_reader import expand_source_uris, iter_source_lines, open_text_source

_LOGGER = get_logger(__name__)


def read_source(
    lines: Iterable[str],
    decoder: LineDecoder,
    sink: RecordSink,
    source_uri: str = "<stream>",
) -> int:
    """Decode every line of one source and send the records to a sink.

    Processing stops at the first failing line; records of earlier lines
    have already been sent, the failing line produces none.

    Args:
        lines: Lines without terminators, in source order.
        decoder: Decoder bound to the run configuration.
        sink: Destination for decoded records.
        source_uri: Source location for log context.

    Returns:
        Number of records sent.

    Raises:
        ReaderProjectionError: If a line lacks a referenced column.
        ReaderIngestError: If the underlying stream fails.
    """
    record_count = 0
    for line_number, line in enumerate(lines, 1):
        try:
            record = decoder.decode(line)
        except ReaderProjectionError as error:
            _LOGGER.error(
                "line_decode_failed",
                source_uri=source_uri,
                line_number=line_number,
                position=error.position,
                token_count=error.token_count,
            )
            raise
        sink.send(record)
        record_count += 1
    return record_count


class TextReaderRunner:
    """Runner that reads every configured source into one sink."""

    def __init__(
        self,
        config: ReaderConfig,
        sink: RecordSink,
        options: ReaderRunOptions | None = None,
    ) -> None:
        self._config = config
        self._sink = sink
        self._options = options or ReaderRunOptions()
        self._decoder = LineDecoder.from_config(config)

    def run(self, source_uris: Sequence[str] | None = None) -> list[SourceReadResult]:
        """Read sources in order and return one result per file.

        Args:
            source_uris: Locations to read; defaults to the configured files.

        Returns:
            Per-file read results in processing order.

        Raises:
            ReaderConfigError: If no source is configured.
            ReaderIngestError: If a location cannot be listed or, unless
                failed sources are skipped, a file cannot be read.
            ReaderProjectionError: Unless failed sources are skipped, when a
                line lacks a referenced column.
        """
        locations = list(source_uris) if source_uris is not None else list(self._config.files)
        if not locations:
            raise ReaderConfigError(
                "No sources to read: files option is empty. "
                "Configure files or pass source paths explicitly."
            )
        files = expand_source_uris(locations, self._config)
        self._declare_schema(self._config.schema_fields)
        results = [self._read_file(source_uri) for source_uri in files]
        _LOGGER.info(
            "reader_run_completed",
            source_count=len(results),
            failed_source_count=sum(1 for result in results if not result.succeeded),
            record_count=sum(result.record_count for result in results),
        )
        return results

    def _declare_schema(self, fields: SchemaFields | None) -> None:
        self._sink.declare(fields)
        _LOGGER.info(
            "schema_declared",
            fields=list(fields) if fields is not None else None,
            columns=format_columns(self._decoder.directives) or None,
        )

    def _read_file(self, source_uri: str) -> SourceReadResult:
        counting_sink = _CountingSink(self._sink)
        _LOGGER.info("source_read_started", source_uri=source_uri)
        try:
            with open_text_source(source_uri, self._config) as stream:
                read_source(
                    iter_source_lines(stream, source_uri),
                    self._decoder,
                    counting_sink,
                    source_uri,
                )
        except (ReaderProjectionError, ReaderIngestError) as error:
            _LOGGER.error(
                "source_read_failed",
                source_uri=source_uri,
                record_count=counting_sink.count,
                error=str(error),
                skipped=self._options.skip_failed_sources,
            )
            if not self._options.skip_failed_sources:
                raise
            return SourceReadResult(
                source_uri=source_uri, record_count=counting_sink.count, error=str(error)
            )
        _LOGGER.info(
            "source_read_completed", source_uri=source_uri, record_count=counting_sink.count
        )
        return SourceReadResult(source_uri=source_uri, record_count=counting_sink.count)


def read_text_files(
    config: ReaderConfig,
    sink: RecordSink,
    options: ReaderRunOptions | None = None,
    source_uris: Sequence[str] | None = None,
) -> list[SourceReadResult]:
    """Read configured delimited text files into a sink.

    Args:
        config: Validated reader configuration.
        sink: Destination for the schema and decoded records.
        options: Run-level options such as skipping failed sources.
        source_uris: Optional locations overriding the configured files.

    Returns:
        Per-file read results.

    Raises:
        ReaderConfigError: If no source is configured.
        ReaderIngestError: If a source cannot be listed or read.
        ReaderProjectionError: If a line lacks a referenced column.
    """
    runner = TextReaderRunner(config, sink, options)
    return runner.run(source_uris)


class _CountingSink:
    """Sink wrapper counting records forwarded for one source."""

    def __init__(self, sink: RecordSink) -> None:
        self._sink = sink
        self.count = 0

    def declare(self, fields: SchemaFields | None) -> None:
        self._sink.declare(fields)

    def send(self, record: Record) -> None:
        self._sink.send(record)
        self.count += 1
