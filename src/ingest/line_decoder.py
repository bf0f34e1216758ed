"""Line-to-record decoding.

This module binds the tokenizer and projector to one resolved
configuration. A decoder keeps no state between lines.
"""

from __future__ import annotations

from core.config import ReaderConfig
from core.types import ColumnDirective, Record
from ingest.projector import project
from ingest.tokenizer import tokenize


class LineDecoder:
    """Decode raw text lines into records."""

    def __init__(
        self,
        separator: str,
        null_sentinel: str,
        directives: tuple[ColumnDirective, ...] = (),
    ) -> None:
        self._separator = separator
        self._null_sentinel = null_sentinel
        self._directives = directives

    @classmethod
    def from_config(cls, config: ReaderConfig) -> "LineDecoder":
        """Build a decoder from validated reader configuration."""
        return cls(
            separator=config.fields_separator,
            null_sentinel=config.null_format,
            directives=config.column_directives,
        )

    @property
    def directives(self) -> tuple[ColumnDirective, ...]:
        """Parsed column specification; empty for pass-through."""
        return self._directives

    def decode(self, line: str) -> Record:
        """Tokenize and project one line.

        Args:
            line: Raw line without its terminator.

        Returns:
            Decoded record.

        Raises:
            ReaderProjectionError: If the line lacks a referenced column.
        """
        tokens = tokenize(line, self._separator)
        return project(tokens, self._directives, self._null_sentinel)
