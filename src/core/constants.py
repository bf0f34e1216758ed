"""Core constants used across text reader modules.

This module centralizes option names and defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

FIELDS_SEPARATOR_KEY = "fieldsSeparator"
ENCODING_KEY = "encoding"
NULL_FORMAT_KEY = "nullFormat"
COLUMNS_KEY = "columns"
SCHEMA_KEY = "schema"
FILES_KEY = "files"
HADOOP_USER_KEY = "hadoopUser"
HDFS_CONF_PATH_KEY = "hdfsConfPath"
S3_REGION_KEY = "s3Region"
S3_PROFILE_KEY = "s3Profile"
RECOGNIZED_CONFIG_KEYS = (
    FIELDS_SEPARATOR_KEY,
    ENCODING_KEY,
    NULL_FORMAT_KEY,
    COLUMNS_KEY,
    SCHEMA_KEY,
    FILES_KEY,
    HADOOP_USER_KEY,
    HDFS_CONF_PATH_KEY,
    S3_REGION_KEY,
    S3_PROFILE_KEY,
)
CONFIG_FILE_SECTION = "reader"

DEFAULT_FIELDS_SEPARATOR = "\\t"
DEFAULT_ENCODING = "UTF-8"
DEFAULT_NULL_FORMAT = "\\N"

COLUMN_DIRECTIVE_SEPARATOR = ","
LITERAL_DIRECTIVE_MARKER = "#"
SCHEMA_FIELD_PATTERN = r"\s*,\s*"

S3_REGION_ENV = "TEXTREADER_S3_REGION"
S3_PROFILE_ENV = "TEXTREADER_S3_PROFILE"

GZIP_SUFFIXES = (".gz", ".gzip")
BZIP2_SUFFIXES = (".bz2",)
LZMA_SUFFIXES = (".xz", ".lzma")
IGNORED_FILE_PREFIXES = (".", "_")
