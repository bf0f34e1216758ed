"""Record projection and null decoding.

This module turns tokenized fields into output records, either passing
tokens through or selecting, reordering, and injecting columns.
"""

from __future__ import annotations

from typing import Sequence

from core.errors import ReaderProjectionError
from core.types import Cell, ColumnDirective, LiteralDirective, Record


def project(
    tokens: Sequence[str],
    directives: Sequence[ColumnDirective],
    null_sentinel: str,
) -> Record:
    """Build the output record for one tokenized line.

    Literal directive values go through null decoding like tokens do, so
    a literal equal to the null sentinel yields a null cell.

    Args:
        tokens: Raw field strings from the tokenizer.
        directives: Parsed column specification; empty for pass-through.
        null_sentinel: Token that decodes to a null cell.

    Returns:
        Record whose arity is the directive count, or the token count in
        pass-through mode.

    Raises:
        ReaderProjectionError: If an index directive exceeds the token count.
    """
    if not directives:
        return Record(values=tuple(decode_null(token, null_sentinel) for token in tokens))
    return Record(
        values=tuple(
            decode_null(_resolve(directive, tokens), null_sentinel) for directive in directives
        )
    )


def decode_null(value: str, null_sentinel: str) -> Cell:
    """Return None when a value is exactly the null sentinel."""
    if value == null_sentinel:
        return None
    return value


def _resolve(directive: ColumnDirective, tokens: Sequence[str]) -> str:
    if isinstance(directive, LiteralDirective):
        return directive.value
    # Positions are 1-based and never wrap to the end of the line.
    if directive.position < 1:
        raise _out_of_range(directive.position, tokens)
    try:
        return tokens[directive.position - 1]
    except IndexError as error:
        raise _out_of_range(directive.position, tokens) from error


def _out_of_range(position: int, tokens: Sequence[str]) -> ReaderProjectionError:
    return ReaderProjectionError(
        f"Column index {position} is out of range for a line with "
        f"{len(tokens)} field(s). Check the columns option against the input data.",
        position=position,
        token_count=len(tokens),
    )
