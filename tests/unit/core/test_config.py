"""Unit tests for reader config parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import ReaderConfig, parse_schema_fields, unescape_literal
from core.errors import ReaderColumnSpecError, ReaderConfigError
from core.types import IndexDirective, LiteralDirective
from tests.fixture_paths import fixture_uri


def test_from_mapping_applies_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """An empty option bag should resolve to the documented defaults."""
    monkeypatch.delenv("TEXTREADER_S3_REGION", raising=False)
    monkeypatch.delenv("TEXTREADER_S3_PROFILE", raising=False)

    config = ReaderConfig.from_mapping({})

    assert config == ReaderConfig(
        fields_separator="\t",
        encoding="UTF-8",
        null_format="\\N",
    )


def test_from_mapping_unescapes_separator_but_not_null_format() -> None:
    """Only the separator should be escape-decoded."""
    config = ReaderConfig.from_mapping({"fieldsSeparator": "\\u0001", "nullFormat": "\\N"})

    assert config.fields_separator == "\x01" and config.null_format == "\\N"


def test_from_mapping_parses_columns_eagerly() -> None:
    """Column directives should be parsed when the config is built."""
    config = ReaderConfig.from_mapping({"columns": "#foo,2"})

    assert config.column_directives == (LiteralDirective("foo"), IndexDirective(2))


@pytest.mark.parametrize("columns", ["0", "x"])
def test_from_mapping_rejects_invalid_columns(columns: str) -> None:
    """Invalid columns should fail before any source is touched."""
    with pytest.raises(ReaderColumnSpecError):
        ReaderConfig.from_mapping({"columns": columns, "files": ["/does/not/exist"]})


def test_from_mapping_rejects_unknown_keys() -> None:
    """Misspelled options should not be silently ignored."""
    with pytest.raises(ReaderConfigError):
        ReaderConfig.from_mapping({"fieldSeparator": ","})


@pytest.mark.parametrize(
    "options",
    [{"fieldsSeparator": ""}, {"encoding": "no-such-codec"}, {"nullFormat": 5}, {"files": 3}],
)
def test_from_mapping_rejects_invalid_values(options: dict[str, object]) -> None:
    """Invalid option values should raise configuration errors."""
    with pytest.raises(ReaderConfigError):
        ReaderConfig.from_mapping(options)


def test_from_mapping_reads_lists_and_remote_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Comma-separated strings and env defaults should be resolved."""
    monkeypatch.setenv("TEXTREADER_S3_REGION", "eu-west-1")

    config = ReaderConfig.from_mapping(
        {
            "files": "a.tsv,b.tsv",
            "hdfsConfPath": "/etc/hadoop/core-site.xml,/etc/hadoop/hdfs-site.xml",
            "hadoopUser": "etl",
            "s3Profile": "reader",
        }
    )

    assert config.files == ("a.tsv", "b.tsv")
    assert len(config.hdfs_conf_paths) == 2 and config.hadoop_user == "etl"
    assert (config.s3_region, config.s3_profile) == ("eu-west-1", "reader")


def test_from_yaml_reads_nested_reader_section() -> None:
    """YAML files may nest options under a reader key."""
    config = ReaderConfig.from_yaml(fixture_uri("config/reader.yaml"))

    assert config.fields_separator == "\t"
    assert config.schema_fields == ("source", "order_id", "customer")
    assert config.columns == "#orders,1,2"


def test_from_yaml_accepts_flat_options_and_integer_columns() -> None:
    """Root-level options and a bare integer column should load."""
    config = ReaderConfig.from_yaml(fixture_uri("config/flat.yaml"))

    assert config.fields_separator == "|" and config.column_directives == (IndexDirective(2),)


@pytest.mark.parametrize("name", ["config/invalid_columns.yaml", "config/unknown_key.yaml"])
def test_from_yaml_rejects_invalid_files(name: str) -> None:
    """Invalid YAML configs should raise configuration errors."""
    with pytest.raises(ReaderConfigError):
        ReaderConfig.from_yaml(fixture_uri(name))


def test_from_yaml_rejects_missing_and_malformed_files(tmp_path: Path) -> None:
    """Missing files and YAML syntax errors should be configuration errors."""
    broken = tmp_path / "broken.yaml"
    broken.write_text("reader: [unclosed", encoding="utf-8")

    with pytest.raises(ReaderConfigError):
        ReaderConfig.from_yaml(str(tmp_path / "missing.yaml"))
    with pytest.raises(ReaderConfigError):
        ReaderConfig.from_yaml(str(broken))


@pytest.mark.parametrize(
    ("literal", "expected"),
    [
        ("\\t", "\t"),
        ("\\\\t", "\\t"),
        ("\\001", "\x01"),
        ("\\u00e9|", "é|"),
        ("a\\q", "a\\q"),
        ("|", "|"),
        ("\\r\\n", "\r\n"),
    ],
)
def test_unescape_literal_decodes_java_escapes(literal: str, expected: str) -> None:
    """Configuration literals should decode Java-style escapes."""
    assert unescape_literal(literal) == expected


def test_parse_schema_fields_trims_around_commas() -> None:
    """Schema names should be split on commas ignoring surrounding spaces."""
    assert parse_schema_fields(" id ,name,  score ,") == ("id", "name", "score")
    assert parse_schema_fields("  ") is None


@pytest.mark.parametrize("columns", ["0", "x", "0,x"])
def test_direct_construction_rejects_invalid_columns(columns: str) -> None:
    """Building the config directly should validate columns too."""
    with pytest.raises(ReaderColumnSpecError):
        ReaderConfig(columns=columns)


def test_direct_construction_derives_directives_from_columns() -> None:
    """The raw columns string should define the parsed directives."""
    config = ReaderConfig(columns="#k,2", column_directives=(IndexDirective(9),))

    assert config.column_directives == (LiteralDirective("k"), IndexDirective(2))


def test_direct_construction_rejects_non_positive_directives() -> None:
    """Directives passed without a columns string should still be checked."""
    with pytest.raises(ReaderColumnSpecError) as error_info:
        ReaderConfig(column_directives=(LiteralDirective("a"), IndexDirective(0)))

    assert error_info.value.directive_number == 2


def test_direct_construction_rejects_empty_separator() -> None:
    """An empty separator should be rejected at construction time."""
    with pytest.raises(ReaderConfigError):
        ReaderConfig(fields_separator="")
