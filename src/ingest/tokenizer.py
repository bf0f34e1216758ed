"""Line tokenizer for delimited text.

This module splits one raw line into field strings.
Every empty field is preserved so column positions stay stable.
"""

from __future__ import annotations

from core.errors import ReaderConfigError


def tokenize(line: str, separator: str) -> list[str]:
    """Split a line on every occurrence of a separator.

    Consecutive, leading, and trailing separators all yield empty tokens,
    so the result always has ``line.count(separator) + 1`` entries.

    Args:
        line: Raw line without its line terminator.
        separator: Literal separator string, not a pattern.

    Returns:
        Ordered raw field strings.

    Raises:
        ReaderConfigError: If the separator is empty.
    """
    if not separator:
        raise ReaderConfigError(
            "Cannot tokenize line: separator must not be empty. "
            "Configure fieldsSeparator with at least one character."
        )
    return line.split(separator)
