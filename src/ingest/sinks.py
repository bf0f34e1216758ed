"""Record sinks.

A sink receives the declared output fields once, then every decoded
record of a run in source order.
"""

from __future__ import annotations

import json
from typing import Protocol, TextIO

from core.types import Record, SchemaFields


class RecordSink(Protocol):
    """Downstream consumer of decoded records."""

    def declare(self, fields: SchemaFields | None) -> None:
        """Receive the configured output field names before any record."""

    def send(self, record: Record) -> None:
        """Receive one decoded record."""


class CollectingRecordSink:
    """In-memory sink that keeps every record it receives."""

    def __init__(self) -> None:
        self.fields: SchemaFields | None = None
        self.records: list[Record] = []

    def declare(self, fields: SchemaFields | None) -> None:
        self.fields = fields

    def send(self, record: Record) -> None:
        self.records.append(record)

    def rows(self) -> list[list[str | None]]:
        """Return collected record values as plain lists."""
        return [list(record.values) for record in self.records]


class JsonlRecordSink:
    """Sink that writes one JSON document per record.

    Records whose arity matches the declared fields are written as JSON
    objects keyed by field name, unless field names repeat; all others
    are written as JSON arrays.
    Null cells are written as ``null``.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._fields: SchemaFields | None = None

    def declare(self, fields: SchemaFields | None) -> None:
        self._fields = fields

    def send(self, record: Record) -> None:
        payload: object = list(record.values)
        if self._keys_record(record):
            payload = dict(zip(self._fields, record.values))
        self._stream.write(json.dumps(payload, ensure_ascii=False))
        self._stream.write("\n")

    def _keys_record(self, record: Record) -> bool:
        fields = self._fields
        if fields is None or len(fields) != record.arity:
            return False
        return len(set(fields)) == len(fields)
