# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for breaking API change detection."""

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict, replace
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table
from rich.text import Text

from sigdiff.analyzer import AnalyzerError, FileChange
from sigdiff.config import (
    OUTPUT_FORMATS,
    ConfigError,
    ScanConfig,
    load_config,
    validate_max_workers,
)
from sigdiff.findings import Finding
from sigdiff.scanner import BreakingChangeScanner, ScanResult

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "symbol": 2,
    "title": 3,
    "description": 6,
    "remediation": 3,
}


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
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument("--config", required=False, help="Configuration file path.")
    shared.add_argument(
        "--ignore",
        action="append",
        default=[],
        help="Gitignore-style pattern of paths to skip; repeatable.",
    )
    shared.add_argument("--format", choices=OUTPUT_FORMATS, default=None, help="Output format.")
    shared.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )
    shared.add_argument("--workers", type=int, default=None, help="Worker threads.")
    shared.add_argument("--verbose", action="store_true", help="Enable debug logging.")

    parser = argparse.ArgumentParser(prog="sigdiff")
    subparsers = parser.add_subparsers(dest="command", required=True)
    compare_parser = subparsers.add_parser("compare", parents=[shared])
    compare_parser.add_argument("--old", required=True, help="Old revision of the file.")
    compare_parser.add_argument("--new", required=True, help="New revision of the file.")
    compare_parser.add_argument(
        "--path",
        required=False,
        help="Path reported on findings and used for language dispatch.",
    )

    scan_parser = subparsers.add_parser("scan", parents=[shared])
    scan_parser.add_argument("--old-root", required=True, help="Old revision tree.")
    scan_parser.add_argument("--new-root", required=True, help="New revision tree.")
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 without findings, 1 with findings, 2 on errors.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    search_root = Path(args.new_root) if args.command == "scan" else Path.cwd()
    try:
        config = _merge_cli_options(
            load_config(Path(args.config) if args.config else None, search_root=search_root),
            args=args,
        )
        scanner = BreakingChangeScanner.from_config(config)
    except ConfigError as exc:
        logger.warning(f"Invalid configuration (error={exc})")
        stderr.write(f"Invalid configuration: {exc}\n")
        return 2

    if args.command == "compare":
        return _run_compare(args=args, config=config, scanner=scanner, stdout=stdout, stderr=stderr)
    if args.command == "scan":
        return _run_scan(args=args, config=config, scanner=scanner, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _merge_cli_options(config: ScanConfig, args: argparse.Namespace) -> ScanConfig:
    """Apply CLI flags over file configuration.

    Raises:
        ConfigError: If a flag value is invalid.
    """
    if args.ignore:
        config = replace(config, ignored_paths=(*config.ignored_paths, *args.ignore))
    if args.format is not None:
        config = replace(config, output_format=args.format)
    if args.workers is not None:
        config = replace(config, max_workers=validate_max_workers(args.workers))
    return config


def _run_compare(
    args: argparse.Namespace,
    config: ScanConfig,
    scanner: BreakingChangeScanner,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run compare command over two revisions of one file."""
    old_path = Path(args.old)
    new_path = Path(args.new)
    for path in (old_path, new_path):
        if not path.is_file():
            logger.warning(f"Path does not exist (path={path})")
            stderr.write(f"Path does not exist: {path}\n")
            return 2
    try:
        old_content = old_path.read_text(encoding="utf-8")
        new_content = new_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Failed reading revision (error={exc})")
        stderr.write(f"Failed reading revision: {exc}\n")
        return 2

    display_path = args.path or new_path.as_posix()
    result = scanner.scan(
        [FileChange(path=display_path, old_content=old_content, new_content=new_content)]
    )
    return _emit_result(result=result, config=config, output=args.output, stdout=stdout, stderr=stderr)


def _run_scan(
    args: argparse.Namespace,
    config: ScanConfig,
    scanner: BreakingChangeScanner,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Run scan command over two revision trees paired by relative path."""
    old_root = Path(args.old_root)
    new_root = Path(args.new_root)
    for root in (old_root, new_root):
        if not root.is_dir():
            logger.warning(f"Path must be a directory (path={root})")
            stderr.write(f"Path must be a directory: {root}\n")
            return 2

    relative_paths = sorted(_list_files(old_root) | _list_files(new_root))
    changes: list[FileChange] = []
    read_errors: list[AnalyzerError] = []
    for relative_path in relative_paths:
        if not scanner.should_analyze(relative_path):
            continue
        try:
            old_content = _read_revision(old_root / relative_path)
            new_content = _read_revision(new_root / relative_path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Failed reading revision (file_path={relative_path} error={exc})")
            read_errors.append(AnalyzerError(file_path=relative_path, message=str(exc)))
            continue
        changes.append(
            FileChange(path=relative_path, old_content=old_content, new_content=new_content)
        )

    result = scanner.scan(changes)
    if read_errors:
        result = replace(result, errors=[*read_errors, *result.errors])
    return _emit_result(result=result, config=config, output=args.output, stdout=stdout, stderr=stderr)


def _list_files(root: Path) -> set[str]:
    """List regular files below ``root`` as POSIX relative paths, skipping ``.git``."""
    files: set[str] = set()
    for current, dir_names, file_names in os.walk(root):
        dir_names[:] = sorted(name for name in dir_names if name != ".git")
        base = Path(current)
        for file_name in file_names:
            files.add((base / file_name).relative_to(root).as_posix())
    return files


def _read_revision(path: Path) -> str | None:
    """Read one revision, returning ``None`` when the file does not exist.

    Raises:
        OSError: If the file exists but cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def _emit_result(
    result: ScanResult,
    config: ScanConfig,
    output: str | None,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    """Write findings in the configured format and derive the exit code."""
    _write_errors(errors=result.errors, stderr=stderr)
    if config.output_format == "json":
        if output:
            try:
                _write_json_file(result=result, output_path=Path(output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {output}\n")
                return 2
        else:
            _write_json(result=result, stdout=stdout)
    else:
        _write_table(result=result, stdout=stdout)
    return 1 if result.findings else 0


def _write_errors(errors: list[AnalyzerError], stderr: TextIO) -> None:
    """Write skipped-file errors to stderr.

    Args:
        errors: Recoverable analyzer errors.
        stderr: Standard error stream.
    """
    for error in errors:
        stderr.write(f"analyzer_error: {error.file_path}: {error.message}\n")


def _payload(result: ScanResult) -> dict[str, object]:
    return {
        "findings": [finding.to_dict() for finding in result.findings],
        "errors": [asdict(error) for error in result.errors],
    }


def _write_json(result: ScanResult, stdout: TextIO) -> None:
    """Write findings and errors in JSON format.

    Args:
        result: Scan result.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(_payload(result), indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(result: ScanResult, output_path: Path) -> None:
    """Write raw JSON payload to an output file.

    Args:
        result: Scan result.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(_payload(result), indent=2, sort_keys=True), encoding="utf-8")


def _write_table(result: ScanResult, stdout: TextIO) -> None:
    """Write findings as one table per file followed by a summary line.

    Args:
        result: Scan result.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    findings_by_file: dict[str, list[Finding]] = {}
    for finding in result.findings:
        findings_by_file.setdefault(finding.file_path, []).append(finding)

    for file_path in sorted(findings_by_file):
        console.rule(file_path, style=Style(color="cyan"), characters="-")
        table = Table(show_header=True, show_lines=True, expand=True)
        for column, ratio in TABLE_COLUMN_RATIOS.items():
            table.add_column(column, ratio=ratio, overflow="fold")
        for finding in findings_by_file[file_path]:
            table.add_row(
                Text(str(finding.metadata.get("symbol", ""))),
                Text(finding.title),
                Text(finding.description),
                Text(finding.remediation),
            )
        console.print(table)
    console.print(
        f"files_analyzed={result.files_analyzed} findings={len(result.findings)} "
        f"errors={len(result.errors)} extractors={','.join(result.extractors_run) or 'none'}",
        markup=False,
        highlight=False,
    )


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
