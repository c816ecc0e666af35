# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for contract glue generation."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from contractgen import (
    GenerationError,
    GeneratorConfig,
    ProjectScan,
    collect_project,
    generate,
    to_snake_case,
    to_yocto,
)
from contractgen.model import MethodRecord

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "method": 2,
    "export": 2,
    "flags": 3,
    "min_deposit": 3,
    "file_path": 2,
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
    parser = argparse.ArgumentParser(prog="contractgen")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate")
    generate_parser.add_argument(
        "--path", required=True, help="Contract project root to scan."
    )
    generate_parser.add_argument(
        "--output",
        required=False,
        help="Output file path. Defaults to generated_build.go inside --path.",
    )
    generate_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the generated source instead of writing a file.",
    )
    generate_parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of threads used to parse source files.",
    )

    inspect_parser = subparsers.add_parser("inspect")
    inspect_parser.add_argument(
        "--path", required=True, help="Contract project root to scan."
    )
    inspect_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    inspect_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
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

    root_path = Path(args.path)
    if not root_path.is_dir():
        logger.warning(f"Path is not a directory (path={root_path})")
        stderr.write(f"Path is not a directory: {root_path}\n")
        return 2

    if args.command == "generate":
        return _run_generate(args=args, stdout=stdout, stderr=stderr)
    if args.command == "inspect":
        return _run_inspect(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_generate(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run generate command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    try:
        config = GeneratorConfig(max_workers=args.workers)
    except ValueError as exc:
        stderr.write(f"Invalid configuration: {exc}\n")
        return 2

    root_path = Path(args.path).resolve()
    try:
        source = generate(root_path, config)
    except GenerationError as exc:
        logger.warning(f"Code generation failed (path={root_path} error={exc})")
        stderr.write(f"code generation failed: {exc}\n")
        return 2

    if args.stdout:
        stdout.write(source)
        return 0

    output_path = (
        Path(args.output) if args.output else root_path / config.output_file_name
    )
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(source, encoding="utf-8")
    except OSError as exc:
        logger.warning(
            f"Failed to write generated file (output_path={output_path} error={exc})"
        )
        stderr.write(f"Failed to write generated file: {output_path}\n")
        return 2
    stdout.write(f"{output_path}\n")
    return 0


def _run_inspect(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run inspect command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    root_path = Path(args.path).resolve()
    try:
        scan = collect_project(root_path)
    except GenerationError as exc:
        logger.warning(f"Scan failed (path={root_path} error={exc})")
        stderr.write(f"scan failed: {exc}\n")
        return 2

    for skipped in scan.skipped:
        stderr.write(f"{skipped.file_path}: {skipped.message}\n")

    if args.format == "table":
        _write_table(scan=scan, stdout=stdout)
        return 0

    payload = json.dumps(_scan_payload(scan), indent=2, sort_keys=True)
    if not args.output:
        stdout.write(payload)
        stdout.write("\n")
        return 0
    try:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
    except OSError as exc:
        logger.warning(
            f"Failed to write JSON output file (output_path={args.output} error={exc})"
        )
        stderr.write(f"Failed to write JSON output file: {args.output}\n")
        return 2
    return 0


def _method_flags(method: MethodRecord) -> list[str]:
    flags = {
        "public": method.is_public,
        "private": method.is_private,
        "view": method.is_view,
        "mutating": method.is_mutating,
        "payable": method.is_payable,
        "init": method.is_init,
        "promise_callback": method.is_promise_callback,
    }
    return [name for name, enabled in flags.items() if enabled]


def _scan_payload(scan: ProjectScan) -> dict[str, object]:
    """Build the JSON document for an inspected project.

    Args:
        scan: Aggregated extraction results.

    Returns:
        JSON-serializable payload.
    """
    methods = []
    for method in scan.methods:
        methods.append(
            {
                "name": method.name,
                "receiver_type": method.receiver_type,
                "export_name": to_snake_case(method.name) if method.is_exported else None,
                "flags": _method_flags(method),
                "min_deposit": method.min_deposit,
                "min_deposit_yocto": to_yocto(method.min_deposit)
                if method.min_deposit
                else None,
                "params": [asdict(param) for param in method.params],
                "returns": list(method.returns),
                "file_path": method.relative_path,
            }
        )
    return {
        "states": [
            {
                "name": state.name,
                "fields": [asdict(field) for field in state.fields],
                "file_path": state.relative_path,
            }
            for state in scan.states
        ],
        "methods": methods,
        "files": [file_record.relative_path for file_record in scan.files],
        "skipped": [asdict(skipped) for skipped in scan.skipped],
    }


def _write_table(scan: ProjectScan, stdout: TextIO) -> None:
    """Write discovered state and methods as Rich tables.

    Args:
        scan: Aggregated extraction results.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    for state in scan.states:
        console.rule(
            f"state {state.name} ({state.relative_path})",
            style=Style(color="cyan"),
            characters="-",
        )
        state_table = Table(show_header=True, expand=True)
        state_table.add_column("field", overflow="fold")
        state_table.add_column("type", overflow="fold")
        for field in state.fields:
            state_table.add_row(field.name, field.type)
        console.print(state_table)

    console.rule("methods", style=Style(color="cyan"), characters="-")
    table = Table(show_header=True, show_lines=True, expand=True)
    for column, ratio in TABLE_COLUMN_RATIOS.items():
        table.add_column(column, ratio=ratio, overflow="fold")
    for method in scan.methods:
        table.add_row(
            method.name,
            to_snake_case(method.name) if method.is_exported else "-",
            ",".join(_method_flags(method)),
            to_yocto(method.min_deposit) if method.min_deposit else "-",
            method.relative_path,
        )
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
