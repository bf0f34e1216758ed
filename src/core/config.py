"""Reader configuration model.

This module owns all option parsing and validation for the reader.
Other modules consume a typed config object instead of raw key lookups.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
import os
from pathlib import Path
import re
from typing import Mapping

import yaml

from core.constants import (
    COLUMNS_KEY,
    CONFIG_FILE_SECTION,
    DEFAULT_ENCODING,
    DEFAULT_FIELDS_SEPARATOR,
    DEFAULT_NULL_FORMAT,
    ENCODING_KEY,
    FIELDS_SEPARATOR_KEY,
    FILES_KEY,
    HADOOP_USER_KEY,
    HDFS_CONF_PATH_KEY,
    NULL_FORMAT_KEY,
    RECOGNIZED_CONFIG_KEYS,
    S3_PROFILE_ENV,
    S3_PROFILE_KEY,
    S3_REGION_ENV,
    S3_REGION_KEY,
    SCHEMA_FIELD_PATTERN,
    SCHEMA_KEY,
)
from core.errors import ReaderColumnSpecError, ReaderConfigError
from core.types import ColumnDirective, IndexDirective, SchemaFields
from ingest.column_spec import parse_columns

_ESCAPE_PATTERN = re.compile(r"\\(u+[0-9a-fA-F]{4}|[0-3][0-7]{2}|[0-7]{1,2}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "'": "'",
    '"': '"',
    "\\": "\\",
}


@dataclass(frozen=True)
class ReaderConfig:
    """Validated reader configuration.

    Attributes:
        fields_separator: Unescaped field separator, never empty.
        encoding: Character encoding applied when opening sources.
        null_format: Token that decodes to a null cell.
        columns: Raw column specification, or None for pass-through.
        column_directives: Parsed column specification; rebuilt from
            ``columns`` whenever ``columns`` is set.
        schema_fields: Declared output field names, if configured.
        files: Source locations to read, in order.
        hadoop_user: Optional user name for HDFS access.
        hdfs_conf_paths: Hadoop XML configuration files for HDFS access.
        s3_region: Optional AWS region for S3 sources.
        s3_profile: Optional AWS profile for S3 sources.
    """

    fields_separator: str = "\t"
    encoding: str = DEFAULT_ENCODING
    null_format: str = DEFAULT_NULL_FORMAT
    columns: str | None = None
    column_directives: tuple[ColumnDirective, ...] = ()
    schema_fields: SchemaFields | None = None
    files: tuple[str, ...] = ()
    hadoop_user: str | None = None
    hdfs_conf_paths: tuple[str, ...] = ()
    s3_region: str | None = None
    s3_profile: str | None = None

    def __post_init__(self) -> None:
        if not self.fields_separator:
            raise ReaderConfigError(
                f"Invalid {FIELDS_SEPARATOR_KEY} value: separator must not be empty. "
                "Set a separator such as '\\t' or ','."
            )
        if self.columns is not None:
            object.__setattr__(self, "column_directives", parse_columns(self.columns))
        _validate_directives(self.column_directives)

    @classmethod
    def from_mapping(cls, options: Mapping[str, object]) -> "ReaderConfig":
        """Build config from a raw key-value option bag.

        Args:
            options: Reader options keyed by their configuration names.

        Returns:
            A validated config object.

        Raises:
            ReaderConfigError: If keys or values are invalid.
            ReaderColumnSpecError: If the column specification is malformed.
        """
        _validate_keys(options)
        raw_separator = _optional_string(options, FIELDS_SEPARATOR_KEY)
        if raw_separator is None:
            raw_separator = DEFAULT_FIELDS_SEPARATOR
        columns = _optional_columns(options)
        return cls(
            fields_separator=parse_fields_separator(raw_separator),
            encoding=_parse_encoding(_optional_string(options, ENCODING_KEY) or DEFAULT_ENCODING),
            null_format=_null_format(options),
            columns=columns,
            schema_fields=parse_schema_fields(_optional_string(options, SCHEMA_KEY)),
            files=_parse_string_list(options.get(FILES_KEY), FILES_KEY),
            hadoop_user=_optional_string(options, HADOOP_USER_KEY),
            hdfs_conf_paths=_parse_string_list(options.get(HDFS_CONF_PATH_KEY), HDFS_CONF_PATH_KEY),
            s3_region=_optional_string(options, S3_REGION_KEY) or os.getenv(S3_REGION_ENV),
            s3_profile=_optional_string(options, S3_PROFILE_KEY) or os.getenv(S3_PROFILE_ENV),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "ReaderConfig":
        """Build config from a YAML file.

        The options may sit at the document root or under a ``reader`` key.

        Args:
            config_path: Path to the YAML configuration file.

        Returns:
            A validated config object.

        Raises:
            ReaderConfigError: If the file is missing, unreadable, or invalid.
        """
        return cls.from_mapping(load_yaml_options(config_path))


def load_yaml_options(config_path: str) -> dict[str, object]:
    """Load the raw reader option bag from a YAML file.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Reader options keyed by their configuration names.

    Raises:
        ReaderConfigError: If the file is missing, unreadable, or invalid.
    """
    config_file = Path(config_path).expanduser().resolve()
    if not config_file.exists():
        raise ReaderConfigError(
            f"Reader config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except OSError as error:
        raise ReaderConfigError(
            f"Failed to read reader config at {config_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise ReaderConfigError(
            f"Failed to parse YAML reader config at {config_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if isinstance(payload, Mapping) and CONFIG_FILE_SECTION in payload:
        payload = payload[CONFIG_FILE_SECTION]
    if not isinstance(payload, Mapping):
        raise ReaderConfigError(
            f"Invalid reader config at {config_file}: expected a mapping of options, "
            f"got {type(payload).__name__}."
        )
    return {str(key): value for key, value in payload.items()}


def parse_fields_separator(raw_separator: str) -> str:
    """Unescape and validate the configured field separator.

    Args:
        raw_separator: Separator in configuration-literal form, e.g. ``\\t``.

    Returns:
        Separator used verbatim for splitting.

    Raises:
        ReaderConfigError: If the separator is empty.
    """
    separator = unescape_literal(raw_separator)
    if not separator:
        raise ReaderConfigError(
            f"Invalid {FIELDS_SEPARATOR_KEY} value: separator must not be empty. "
            "Set a separator such as '\\t' or ','."
        )
    return separator


def unescape_literal(value: str) -> str:
    """Decode Java-style backslash escapes in a configuration literal.

    Supports ``\\b \\f \\n \\r \\t \\' \\" \\\\``, octal escapes and
    ``\\uXXXX``. Unknown escapes are kept as written.
    """
    return _ESCAPE_PATTERN.sub(_replace_escape, value)


def parse_schema_fields(raw_schema: str | None) -> SchemaFields | None:
    """Split a comma-separated schema into field names.

    Args:
        raw_schema: Raw schema option value.

    Returns:
        Field names, or None when no schema is configured.
    """
    if raw_schema is None or not raw_schema.strip():
        return None
    names = re.split(SCHEMA_FIELD_PATTERN, raw_schema.strip())
    while names and not names[-1]:
        names.pop()
    return tuple(names)


def _replace_escape(match: re.Match[str]) -> str:
    body = match.group(1)
    if body[0] == "u" and len(body) > 1:
        return chr(int(body.lstrip("u"), 16))
    if body[0] in "01234567":
        return chr(int(body, 8))
    return _SIMPLE_ESCAPES.get(body, match.group(0))


def _validate_keys(options: Mapping[str, object]) -> None:
    unknown_keys = sorted(str(key) for key in options if key not in RECOGNIZED_CONFIG_KEYS)
    if unknown_keys:
        raise ReaderConfigError(
            f"Unknown reader option(s): {', '.join(unknown_keys)}. "
            f"Supported options: {', '.join(RECOGNIZED_CONFIG_KEYS)}."
        )


def _validate_directives(directives: tuple[ColumnDirective, ...]) -> None:
    for directive_number, directive in enumerate(directives, 1):
        if isinstance(directive, IndexDirective) and directive.position < 1:
            raise ReaderColumnSpecError(
                f"Invalid column directive #{directive_number} '{directive.position}': "
                "column indexes are 1-based and must be positive.",
                directive=str(directive.position),
                directive_number=directive_number,
            )


def _optional_string(options: Mapping[str, object], key: str) -> str | None:
    value = options.get(key)
    if value is None or isinstance(value, str):
        return value
    raise ReaderConfigError(
        f"Invalid {key} value: expected string, got {type(value).__name__}."
    )


def _optional_columns(options: Mapping[str, object]) -> str | None:
    value = options.get(COLUMNS_KEY)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return _optional_string(options, COLUMNS_KEY)


def _null_format(options: Mapping[str, object]) -> str:
    value = _optional_string(options, NULL_FORMAT_KEY)
    return DEFAULT_NULL_FORMAT if value is None else value


def _parse_encoding(encoding: str) -> str:
    try:
        codecs.lookup(encoding)
    except LookupError as error:
        raise ReaderConfigError(
            f"Invalid {ENCODING_KEY} value: unknown encoding '{encoding}'. "
            "Use a Python codec name such as UTF-8 or GBK."
        ) from error
    return encoding


def _parse_string_list(value: object, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item for item in value.split(",") if item)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ReaderConfigError(
        f"Invalid {key} value: expected a comma-separated string or a list of strings."
    )
