"""Shared typed models.

This module defines immutable data models used by the decoding engine,
the source readers, and sinks to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

Cell = Union[str, None]
SchemaFields = tuple[str, ...]


@dataclass(frozen=True)
class LiteralDirective:
    """Column directive that emits a fixed value.

    Attributes:
        value: Text emitted for every line, marker already stripped.
    """

    value: str


@dataclass(frozen=True)
class IndexDirective:
    """Column directive that selects one input token.

    Attributes:
        position: One-based token position in the input line.
    """

    position: int


ColumnDirective = Union[LiteralDirective, IndexDirective]


@dataclass(frozen=True)
class Record:
    """One decoded output line.

    Attributes:
        values: Ordered cells; ``None`` marks a null field.
    """

    values: tuple[Cell, ...]

    def __len__(self) -> int:
        return len(self.values)

    @property
    def arity(self) -> int:
        """Number of output cells."""
        return len(self.values)


@dataclass(frozen=True)
class ReaderRunOptions:
    """Run-level reader options.

    Attributes:
        skip_failed_sources: Continue with the next source when one fails.
    """

    skip_failed_sources: bool = False


@dataclass(frozen=True)
class SourceReadResult:
    """Outcome of reading one source.

    Attributes:
        source_uri: Location that was read.
        record_count: Records sent to the sink from this source.
        error: Failure message when the source was skipped.
    """

    source_uri: str
    record_count: int
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the whole source was decoded."""
        return self.error is None
