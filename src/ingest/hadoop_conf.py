"""Hadoop XML configuration loading.

Hadoop client settings (``core-site.xml``, ``hdfs-site.xml``) are merged
into one flat mapping that is passed to the HDFS client as extra config.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
import xml.etree.ElementTree as ElementTree

from core.errors import ReaderConfigError


def load_hadoop_conf(conf_paths: Iterable[str]) -> dict[str, str]:
    """Merge Hadoop ``<property>`` entries from XML files.

    Later files override earlier ones, as Hadoop resources do.

    Args:
        conf_paths: Local XML configuration file paths.

    Returns:
        Property names mapped to values.

    Raises:
        ReaderConfigError: If a file is missing or not valid XML.
    """
    properties: dict[str, str] = {}
    for conf_path in conf_paths:
        properties.update(_read_properties(Path(conf_path.removeprefix("file://")).expanduser()))
    return properties


def _read_properties(conf_file: Path) -> dict[str, str]:
    if not conf_file.is_file():
        raise ReaderConfigError(
            f"Hadoop configuration file does not exist at {conf_file}. "
            "Fix hdfsConfPath and retry."
        )
    try:
        root = ElementTree.parse(conf_file).getroot()
    except ElementTree.ParseError as error:
        raise ReaderConfigError(
            f"Failed to parse Hadoop configuration at {conf_file}: {error}. "
            "Fix the XML syntax and retry."
        ) from error
    properties: dict[str, str] = {}
    for prop in root.iter("property"):
        name = prop.findtext("name")
        if name:
            properties[name.strip()] = (prop.findtext("value") or "").strip()
    return properties
