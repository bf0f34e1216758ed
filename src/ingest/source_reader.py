"""Source listing and opening for the text reader.

This module resolves configured locations into concrete files on local
disk, S3, or HDFS, and opens each one as a decoded stream of text lines.
Compression is picked from the file suffix.
"""

from __future__ import annotations

import bz2
from contextlib import ExitStack, contextmanager
import gzip
import io
import lzma
from pathlib import Path
from typing import Any, BinaryIO, Iterable, Iterator, TextIO
import zlib

from core.config import ReaderConfig
from core.constants import BZIP2_SUFFIXES, GZIP_SUFFIXES, IGNORED_FILE_PREFIXES, LZMA_SUFFIXES
from core.errors import ReaderDependencyError, ReaderIngestError
from core.s3_uri import HdfsLocation, S3Location, parse_hdfs_uri, parse_s3_uri
from ingest.hadoop_conf import load_hadoop_conf

_STREAM_ERRORS = (OSError, EOFError, UnicodeDecodeError, lzma.LZMAError, zlib.error)


def expand_source_uris(source_uris: Iterable[str], config: ReaderConfig) -> list[str]:
    """Resolve configured locations into readable file URIs.

    Directories and prefixes expand to their files in sorted order; names
    starting with ``.`` or ``_`` (such as ``_SUCCESS`` markers) are skipped.

    Args:
        source_uris: Files, directories, ``s3://`` keys or prefixes, and
            ``hdfs://`` paths.
        config: Reader configuration for remote access settings.

    Returns:
        Ordered file URIs.

    Raises:
        ReaderIngestError: If a location is missing or holds no files.
    """
    expanded: list[str] = []
    for source_uri in source_uris:
        if source_uri.startswith("s3://"):
            files = _expand_s3(parse_s3_uri(source_uri), config)
        elif source_uri.startswith("hdfs://"):
            files = _expand_hdfs(parse_hdfs_uri(source_uri), config)
        else:
            files = _expand_local(_local_path(source_uri))
        if not files:
            raise ReaderIngestError(
                f"No readable files found for {source_uri}. "
                "Check the location or remove it from the files option."
            )
        expanded.extend(files)
    return expanded


@contextmanager
def open_text_source(source_uri: str, config: ReaderConfig) -> Iterator[TextIO]:
    """Open one source as a decompressed, decoded text stream.

    The stream and every underlying handle are closed when the block
    exits, including on errors.

    Args:
        source_uri: Local path, ``file://``, ``s3://``, or ``hdfs://`` URI.
        config: Reader configuration with encoding and access settings.

    Yields:
        Text stream using universal newlines.

    Raises:
        ReaderIngestError: If the source cannot be opened.
    """
    with ExitStack() as stack:
        raw_stream = stack.enter_context(_open_binary(source_uri, config))
        byte_stream = stack.enter_context(_decompress(raw_stream, source_uri))
        text_stream = io.TextIOWrapper(byte_stream, encoding=config.encoding, newline=None)
        stack.callback(text_stream.close)
        yield text_stream


def iter_source_lines(stream: TextIO, source_uri: str) -> Iterator[str]:
    """Yield lines without terminators, wrapping stream failures.

    Args:
        stream: Text stream from :func:`open_text_source`.
        source_uri: Source location for error context.

    Yields:
        Lines in input order.

    Raises:
        ReaderIngestError: If reading or character decoding fails.
    """
    try:
        for line in stream:
            yield line[:-1] if line.endswith("\n") else line
    except _STREAM_ERRORS as error:
        raise ReaderIngestError(
            f"Failed to read source {source_uri}: {error}. "
            "Check the file's compression and encoding settings."
        ) from error


def compression_for(source_uri: str) -> str | None:
    """Return the compression name implied by a file suffix."""
    suffix = Path(source_uri).suffix.lower()
    if suffix in GZIP_SUFFIXES:
        return "gzip"
    if suffix in BZIP2_SUFFIXES:
        return "bz2"
    if suffix in LZMA_SUFFIXES:
        return "lzma"
    return None


@contextmanager
def _open_binary(source_uri: str, config: ReaderConfig) -> Iterator[BinaryIO]:
    if source_uri.startswith("s3://"):
        stream = _open_s3(parse_s3_uri(source_uri), config)
    elif source_uri.startswith("hdfs://"):
        stream = _open_hdfs(parse_hdfs_uri(source_uri), config)
    else:
        stream = _open_local(_local_path(source_uri))
    try:
        yield stream
    finally:
        stream.close()


@contextmanager
def _decompress(stream: BinaryIO, source_uri: str) -> Iterator[BinaryIO]:
    compression = compression_for(source_uri)
    if compression is None:
        yield stream
        return
    if compression == "gzip":
        decompressed: Any = gzip.GzipFile(fileobj=stream, mode="rb")
    elif compression == "bz2":
        decompressed = bz2.BZ2File(stream, mode="rb")
    else:
        decompressed = lzma.LZMAFile(stream, mode="rb")
    with decompressed:
        yield decompressed


def _local_path(source_uri: str) -> Path:
    return Path(source_uri.removeprefix("file://")).expanduser()


def _expand_local(source_path: Path) -> list[str]:
    if not source_path.exists():
        raise ReaderIngestError(
            f"Failed to read source at {source_path}: path does not exist. "
            "Provide an existing file or directory."
        )
    if source_path.is_file():
        return [str(source_path)]
    return [
        str(file_path)
        for file_path in sorted(source_path.rglob("*"))
        if file_path.is_file() and not _is_ignored_name(file_path.name)
    ]


def _open_local(source_path: Path) -> BinaryIO:
    try:
        return open(source_path, "rb")
    except OSError as error:
        raise ReaderIngestError(
            f"Failed to open source {source_path}: {error}. "
            "Check that the file exists and is readable."
        ) from error


def _expand_s3(location: S3Location, config: ReaderConfig) -> list[str]:
    if not location.is_prefix:
        return [location.uri_for(location.key)]
    s3_client = _create_s3_client(config)
    paginator = s3_client.get_paginator("list_objects_v2")
    pages = paginator.paginate(Bucket=location.bucket, Prefix=location.key)
    keys: list[str] = []
    for page in pages:
        for obj in page.get("Contents", []):
            key = obj["Key"]
            if not key.endswith("/") and not _is_ignored_name(key.rsplit("/", 1)[-1]):
                keys.append(key)
    return [location.uri_for(key) for key in sorted(keys)]


def _open_s3(location: S3Location, config: ReaderConfig) -> BinaryIO:
    s3_client = _create_s3_client(config)
    try:
        body = s3_client.get_object(Bucket=location.bucket, Key=location.key)["Body"].read()
    except Exception as error:
        raise ReaderIngestError(
            f"Failed to download s3://{location.bucket}/{location.key}: {error}. "
            "Check AWS credentials and the object key."
        ) from error
    return io.BytesIO(body)


def _create_s3_client(config: ReaderConfig) -> Any:
    """Create a boto3 S3 client.

    Raises:
        ReaderDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise ReaderDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install boto3 to read from s3:// sources."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _expand_hdfs(location: HdfsLocation, config: ReaderConfig) -> list[str]:
    pyarrow_fs = _import_pyarrow_fs()
    filesystem = _create_hdfs_filesystem(location, config)
    info = filesystem.get_file_info(location.path)
    if info.type == pyarrow_fs.FileType.NotFound:
        raise ReaderIngestError(
            f"Failed to read source at {location.uri_for(location.path)}: path does not exist. "
            "Provide an existing HDFS file or directory."
        )
    if info.type == pyarrow_fs.FileType.File:
        return [location.uri_for(location.path)]
    selector = pyarrow_fs.FileSelector(location.path, recursive=True)
    return [
        location.uri_for(entry.path)
        for entry in sorted(filesystem.get_file_info(selector), key=lambda entry: entry.path)
        if entry.type == pyarrow_fs.FileType.File and not _is_ignored_name(entry.base_name)
    ]


def _open_hdfs(location: HdfsLocation, config: ReaderConfig) -> BinaryIO:
    filesystem = _create_hdfs_filesystem(location, config)
    try:
        return filesystem.open_input_stream(location.path, compression=None)
    except OSError as error:
        raise ReaderIngestError(
            f"Failed to open source {location.uri_for(location.path)}: {error}. "
            "Check HDFS permissions and the hadoopUser option."
        ) from error


def _create_hdfs_filesystem(location: HdfsLocation, config: ReaderConfig) -> Any:
    """Connect a pyarrow HDFS client for a namenode.

    Raises:
        ReaderDependencyError: If pyarrow is missing.
        ReaderIngestError: If the connection fails.
    """
    pyarrow_fs = _import_pyarrow_fs()
    extra_conf = load_hadoop_conf(config.hdfs_conf_paths) or None
    try:
        return pyarrow_fs.HadoopFileSystem(
            location.host,
            port=location.port,
            user=config.hadoop_user,
            extra_conf=extra_conf,
        )
    except OSError as error:
        raise ReaderIngestError(
            f"Failed to connect to HDFS at {location.host}:{location.port}: {error}. "
            "Check the namenode address and Hadoop client installation."
        ) from error


def _import_pyarrow_fs() -> Any:
    try:
        import pyarrow.fs as pyarrow_fs
    except ImportError as error:
        raise ReaderDependencyError(
            "HDFS support requires pyarrow, but it is not installed. "
            "Install pyarrow to read from hdfs:// sources."
        ) from error
    return pyarrow_fs


def _is_ignored_name(name: str) -> bool:
    return name.startswith(IGNORED_FILE_PREFIXES)
