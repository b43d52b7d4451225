# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI harness for reading docstring annotations from a source tree."""

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from docnotes.locator import is_method_reference
from docnotes.model import Missing
from docnotes.reader import AnnotationReader, AnnotationResult, AnnotationsResult
from docnotes.source_index import SourceError, SourceIndexLocator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeclarationAnnotations:
    """Represent the annotations read for one indexed declaration."""

    identity: str
    kind: str
    file_path: str
    line: int
    annotations: dict[str, str]


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="docnotes")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan")
    scan_parser.add_argument("--path", required=True, help="Root path to index.")
    scan_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    scan_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    scan_parser.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Index files matched by the root .gitignore as well.",
    )

    get_parser = subparsers.add_parser("get")
    get_parser.add_argument("--path", required=True, help="Root path to index.")
    get_parser.add_argument(
        "--declaration",
        required=True,
        help="Class path (pkg.mod.Class) or method (pkg.mod.Class#method).",
    )
    get_parser.add_argument(
        "--name", required=False, help="Print only this annotation value."
    )
    get_parser.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Index files matched by the root .gitignore as well.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.verbose:
        logging.getLogger("docnotes").setLevel(logging.DEBUG)

    root_path = Path(args.path)
    if not root_path.is_dir():
        logger.warning(f"Path is not a directory (path={root_path})")
        stderr.write(f"Path is not a directory: {root_path}\n")
        return 2

    locator = SourceIndexLocator.from_root(
        root_path, respect_gitignore=not args.no_gitignore
    )
    _write_errors(errors=locator.errors, stderr=stderr)
    reader = AnnotationReader(locator=locator)
    if args.command == "scan":
        return _run_scan(
            args=args, locator=locator, reader=reader, stdout=stdout, stderr=stderr
        )
    if args.command == "get":
        return _run_get(args=args, reader=reader, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_scan(
    args: argparse.Namespace,
    locator: SourceIndexLocator,
    reader: AnnotationReader,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run scan command.

    Args:
        args: Parsed CLI arguments.
        locator: Source index of the scanned root.
        reader: Annotation reader bound to ``locator``.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    results = collect_annotations(locator=locator, reader=reader)
    logger.info(
        f"Annotation scan completed (path={args.path} declarations={len(results)})"
    )
    if args.format == "json":
        payload = {
            "declarations": [asdict(result) for result in results],
            "errors": [asdict(error) for error in locator.errors],
        }
        if args.output:
            output_path = Path(args.output)
            try:
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(
                    json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
                )
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(payload=payload, stdout=stdout)
    else:
        _write_table(results=results, root_path=Path(args.path), stdout=stdout)
    return 0


def _run_get(
    args: argparse.Namespace,
    reader: AnnotationReader,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run get command.

    Args:
        args: Parsed CLI arguments.
        reader: Annotation reader bound to the indexed root.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code; 1 when the declaration or annotation is missing.
    """
    reference = args.declaration
    is_method = is_method_reference(reference)
    if args.name is None:
        result: AnnotationsResult | AnnotationResult = (
            reader.annotations_for_method(reference)
            if is_method
            else reader.annotations_for_class(reference)
        )
    else:
        result = (
            reader.annotation_for_method(reference, args.name)
            if is_method
            else reader.annotation_for_class(reference, args.name)
        )

    if result is Missing.NOT_FOUND:
        stderr.write(f"Declaration not found: {reference}\n")
        return 1
    if result is Missing.NOT_SET:
        stderr.write(f"Annotation not set: {args.name}\n")
        return 1
    if isinstance(result, str):
        stdout.write(f"{result}\n")
    else:
        _write_json(payload=dict(result), stdout=stdout)
    return 0


def collect_annotations(
    locator: SourceIndexLocator, reader: AnnotationReader
) -> list[DeclarationAnnotations]:
    """Read annotations for every indexed declaration.

    Args:
        locator: Source index to enumerate.
        reader: Annotation reader bound to ``locator``.

    Returns:
        One entry per declaration in discovery order.
    """
    results: list[DeclarationAnnotations] = []
    for item in locator.declarations:
        if item.kind == "method":
            annotations = reader.annotations_for_method(item.identity)
        else:
            annotations = reader.annotations_for_class(item.identity)
        results.append(
            DeclarationAnnotations(
                identity=item.identity,
                kind=item.kind,
                file_path=item.file_path,
                line=item.line,
                annotations=dict(annotations) if annotations else {},
            )
        )
    return results


def _write_errors(errors: list[SourceError], stderr: TextIO) -> None:
    """Write source index errors to stderr.

    Args:
        errors: Files that could not be indexed.
        stderr: Standard error stream.
    """
    for error in errors:
        stderr.write(f"source_error: {error}\n")


def _write_json(payload: object, stdout: TextIO) -> None:
    """Write a payload in JSON format.

    Args:
        payload: JSON serializable payload.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_table(
    results: list[DeclarationAnnotations], root_path: Path, stdout: TextIO
) -> None:
    """Write annotations as one table per source file.

    Args:
        results: Annotations per declaration.
        root_path: Root path used for indexing.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    results_by_file: dict[str, list[DeclarationAnnotations]] = {}
    for result in results:
        results_by_file.setdefault(result.file_path, []).append(result)

    for file_path in sorted(results_by_file):
        full_path = str((root_path / file_path).resolve())
        console.rule(f"{full_path}", style=Style(color="cyan"), characters="-")
        table = Table(show_header=True, show_lines=True, expand=True)
        table.add_column("kind", ratio=1, overflow="fold")
        table.add_column("declaration", ratio=3, overflow="fold")
        table.add_column("line", ratio=1, justify="right", overflow="fold")
        table.add_column("annotation", ratio=3, overflow="fold")
        table.add_column("value", ratio=4, overflow="fold")
        for result in results_by_file[file_path]:
            if not result.annotations:
                table.add_row(result.kind, result.identity, str(result.line), "", "")
                continue
            for name, value in result.annotations.items():
                table.add_row(
                    result.kind, result.identity, str(result.line), f"@{name}", value
                )
        console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
