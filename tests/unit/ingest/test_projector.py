"""Unit tests for record projection and null decoding."""

from __future__ import annotations

import pytest

from core.errors import ReaderProjectionError
from core.types import IndexDirective, LiteralDirective
from ingest.column_spec import parse_columns
from ingest.projector import decode_null, project

NULL = "\\N"


def test_project_passthrough_keeps_arity_and_order() -> None:
    """Pass-through mode should decode every token in order."""
    record = project(["a", NULL, "", "d"], (), NULL)

    assert record.values == ("a", None, "", "d")


def test_project_applies_column_spec_example() -> None:
    """Literal and index directives should produce the projected row."""
    record = project(["a", "b", "c"], parse_columns("#foo,2,#bar,1"), NULL)

    assert record.values == ("foo", "b", "bar", "a")


def test_project_arity_follows_directives() -> None:
    """Projection arity should equal the number of directives."""
    directives = parse_columns("1,1,1,1,1")

    assert project(["x", "y"], directives, NULL).arity == 5


def test_project_decodes_selected_null_token() -> None:
    """Selected tokens equal to the sentinel should become null."""
    record = project(["a", NULL, "c"], (IndexDirective(2), IndexDirective(3)), NULL)

    assert record.values == (None, "c")


def test_project_decodes_literal_equal_to_sentinel() -> None:
    """A literal directive equal to the sentinel should decode to null."""
    record = project(["a"], (LiteralDirective(NULL), IndexDirective(1)), NULL)

    assert record.values == (None, "a")


def test_project_raises_for_missing_column() -> None:
    """An index beyond the token count should be a projection error."""
    with pytest.raises(ReaderProjectionError) as error_info:
        project(["a", "b", "c"], (IndexDirective(5),), NULL)

    error = error_info.value
    assert (error.position, error.token_count) == (5, 3)
    assert isinstance(error.__cause__, IndexError)


def test_decode_null_is_exact_match() -> None:
    """Only exact sentinel matches should decode to null."""
    assert decode_null(NULL, NULL) is None
    assert decode_null("", NULL) == ""
    assert decode_null(" \\N", NULL) == " \\N"
    assert decode_null("\\N\\N", NULL) == "\\N\\N"


def test_decode_null_with_empty_sentinel_nulls_empty_fields() -> None:
    """An empty sentinel should turn empty tokens into nulls."""
    assert project(["", "a"], (), "").values == (None, "a")


@pytest.mark.parametrize("position", [0, -1])
def test_project_rejects_non_positive_index(position: int) -> None:
    """Zero and negative indexes should not read from the end of the line."""
    with pytest.raises(ReaderProjectionError) as error_info:
        project(["a", "b", "c"], (IndexDirective(position),), NULL)

    assert (error_info.value.position, error_info.value.token_count) == (position, 3)
