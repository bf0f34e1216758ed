"""Text reader exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Configuration problems and per-line data problems raise distinct types
so callers can tell a broken job definition from broken input.
"""

from __future__ import annotations


class ReaderError(Exception):
    """Base exception for all text reader failures."""


class ReaderConfigError(ReaderError):
    """Raised for invalid reader configuration."""


class ReaderColumnSpecError(ReaderConfigError):
    """Raised for a malformed column-specification directive.

    Attributes:
        directive: Offending directive text, exactly as configured.
        directive_number: One-based position of the directive in the spec.
    """

    def __init__(self, message: str, directive: str, directive_number: int) -> None:
        super().__init__(message)
        self.directive = directive
        self.directive_number = directive_number


class ReaderProjectionError(ReaderError):
    """Raised when a column index is absent from an input line.

    Attributes:
        position: One-based column index that was requested.
        token_count: Number of tokens the line actually had.
    """

    def __init__(self, message: str, position: int, token_count: int) -> None:
        super().__init__(message)
        self.position = position
        self.token_count = token_count


class ReaderIngestError(ReaderError):
    """Raised for source listing, read, and decode failures."""


class ReaderDependencyError(ReaderError):
    """Raised when an optional runtime dependency is missing."""
