"""Text reader CLI entry points.

This module exposes commands for reading delimited text and checking
column specifications. It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Any, Sequence, TextIO

from core.config import ReaderConfig, load_yaml_options
from core.constants import (
    COLUMNS_KEY,
    ENCODING_KEY,
    FIELDS_SEPARATOR_KEY,
    NULL_FORMAT_KEY,
    SCHEMA_KEY,
)
from core.types import LiteralDirective, ReaderRunOptions, SourceReadResult
from ingest.column_spec import parse_columns
from ingest.pipeline import read_text_files
from ingest.sinks import JsonlRecordSink


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="textreader", description="Delimited text reader CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_read_command(subparsers)
    _add_check_columns_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the text reader CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "read":
        return _run_read_command(args)
    if args.command == "check-columns":
        return _run_check_columns_command(args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_read_command(args: argparse.Namespace) -> int:
    """Handle read command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code, 1 when any source was skipped.
    """
    config = _build_config(args)
    options = ReaderRunOptions(skip_failed_sources=args.skip_failed_sources)
    source_uris = args.sources or None
    if args.output:
        with Path(args.output).expanduser().open("w", encoding="utf-8") as output:
            results = _read_into(output, config, options, source_uris)
    else:
        results = _read_into(sys.stdout, config, options, source_uris)
    for result in results:
        print(
            f"{result.source_uri}\t{result.record_count}\t{result.error or 'ok'}",
            file=sys.stderr,
        )
    return 0 if all(result.succeeded for result in results) else 1


def _run_check_columns_command(args: argparse.Namespace) -> int:
    """Handle check-columns command.

    Args:
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    directives = parse_columns(args.columns)
    if not directives:
        print("passthrough")
    for directive in directives:
        if isinstance(directive, LiteralDirective):
            print(f"literal\t{directive.value}")
        else:
            print(f"index\t{directive.position}")
    return 0


def _read_into(
    output: TextIO,
    config: ReaderConfig,
    options: ReaderRunOptions,
    source_uris: list[str] | None,
) -> list[SourceReadResult]:
    return read_text_files(config, JsonlRecordSink(output), options, source_uris)


def _build_config(args: argparse.Namespace) -> ReaderConfig:
    """Merge config-file options with command-line overrides."""
    options: dict[str, object] = load_yaml_options(args.config) if args.config else {}
    overrides = {
        FIELDS_SEPARATOR_KEY: args.fields_separator,
        ENCODING_KEY: args.encoding,
        NULL_FORMAT_KEY: args.null_format,
        COLUMNS_KEY: args.columns,
        SCHEMA_KEY: args.schema,
    }
    options.update({key: value for key, value in overrides.items() if value is not None})
    return ReaderConfig.from_mapping(options)


def _add_read_command(subparsers: Any) -> None:
    """Register read subcommand."""
    parser = subparsers.add_parser("read", help="Decode delimited text files into JSON lines")
    parser.add_argument(
        "sources",
        nargs="*",
        help="Files, directories, s3:// or hdfs:// locations; overrides configured files",
    )
    parser.add_argument("--config", help="YAML file with reader options")
    parser.add_argument("--fields-separator", help="Field separator, escapes allowed, e.g. '\\t'")
    parser.add_argument("--encoding", help="Source character encoding")
    parser.add_argument("--null-format", help="Token decoded as null")
    parser.add_argument("--columns", help="Column specification, e.g. '#src,2,1'")
    parser.add_argument("--schema", help="Comma-separated output field names")
    parser.add_argument("--output", help="Write JSON lines to this file instead of stdout")
    parser.add_argument(
        "--skip-failed-sources",
        action="store_true",
        help="Continue with the next source when one fails",
    )


def _add_check_columns_command(subparsers: Any) -> None:
    """Register check-columns subcommand."""
    parser = subparsers.add_parser("check-columns", help="Validate a column specification")
    parser.add_argument("columns", help="Column specification to parse")
