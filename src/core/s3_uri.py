"""Object-store URI parsing helpers.

This module centralizes ``s3://`` and ``hdfs://`` URI parsing so source
listing and source opening validate locations the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlparse

from core.errors import ReaderIngestError

DEFAULT_HDFS_PORT = 8020


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    key: str

    @property
    def is_prefix(self) -> bool:
        """Whether the location names a key prefix rather than one object."""
        return self.key == "" or self.key.endswith("/")

    def uri_for(self, key: str) -> str:
        """Build the URI of another object in the same bucket."""
        return f"s3://{self.bucket}/{key}"


@dataclass(frozen=True)
class HdfsLocation:
    """Parsed HDFS location model."""

    host: str
    port: int
    path: str

    def uri_for(self, path: str) -> str:
        """Build the URI of another path on the same namenode."""
        return f"hdfs://{self.host}:{self.port}{path}"


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket/key`` or ``s3://bucket/prefix/``.

    Returns:
        Parsed bucket and key pair.

    Raises:
        ReaderIngestError: If the bucket is missing.
    """
    stripped_uri = uri.removeprefix("s3://")
    bucket, _, key = stripped_uri.partition("/")
    if not bucket:
        raise ReaderIngestError(
            f"Invalid S3 URI '{uri}': expected s3://bucket/key. Provide a bucket name."
        )
    return S3Location(bucket=bucket, key=key)


def parse_hdfs_uri(uri: str) -> HdfsLocation:
    """Parse and validate an HDFS URI.

    Args:
        uri: URI in format ``hdfs://namenode[:port]/path``.

    Returns:
        Parsed namenode and absolute path.

    Raises:
        ReaderIngestError: If the namenode or path is missing.
    """
    parsed = urlparse(uri)
    if not parsed.hostname or not parsed.path:
        raise ReaderIngestError(
            f"Invalid HDFS URI '{uri}': expected hdfs://namenode[:port]/path. "
            "Provide both namenode and path."
        )
    return HdfsLocation(
        host=parsed.hostname,
        port=parsed.port or DEFAULT_HDFS_PORT,
        path=parsed.path,
    )
