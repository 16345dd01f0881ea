# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command-line interface for sprite builds, watching and serving."""

import argparse
import json
import logging
import sys
import time
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from spriteify.assembler import IdentifierCollisionError
from spriteify.config import ConfigurationError, SpriteConfig
from spriteify.dev_server import create_app, module_url
from spriteify.duplication import DuplicationChecker, DuplicationGroup
from spriteify.factory import create_orchestrator
from spriteify.orchestrator import BuildReport, IncrementalOrchestrator
from spriteify.output import ArtifactWriteError
from spriteify.watcher import IconWatcher

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_THRESHOLD: float = 0.9


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="spriteify")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_command = subparsers.add_parser("build", help="Build sprite and types once.")
    _add_config_arguments(build_command)

    watch_parser = subparsers.add_parser(
        "watch", help="Build, then rebuild whenever icons change."
    )
    _add_config_arguments(watch_parser)

    serve_parser = subparsers.add_parser(
        "serve", help="Serve the injection module and rebuild on changes."
    )
    _add_config_arguments(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    serve_parser.add_argument("--port", type=int, default=5174, help="Bind port.")

    duplicates_parser = subparsers.add_parser(
        "duplicates", help="Report identical and near-identical icons."
    )
    _add_config_arguments(duplicates_parser)
    duplicates_parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_DUPLICATE_THRESHOLD,
        help="Markup similarity threshold for near-duplicates.",
    )
    duplicates_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    return parser


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", required=True, help="Icon source directory.")
    parser.add_argument("--output", required=True, help="Artifact output directory.")
    parser.add_argument("--cwd", required=False, help="Base directory for relative paths.")
    parser.add_argument("--file-name", default="sprite.svg", help="Sprite file name.")
    parser.add_argument(
        "--type-file-name", default="types.ts", help="Type manifest file name."
    )
    parser.add_argument(
        "--grouped", action="store_true", help="Emit one sprite per subdirectory."
    )
    parser.add_argument(
        "--no-types", action="store_true", help="Skip the type manifest."
    )
    parser.add_argument(
        "--optimize", action="store_true", help="Optimize icons with Scour."
    )
    parser.add_argument(
        "--optimizer-config",
        required=False,
        help="JSON object of Scour option overrides.",
    )
    parser.add_argument(
        "--symbol-id", required=False, help="Identifier template containing [name]."
    )
    parser.add_argument(
        "--inject", choices=("first", "last"), default="last", help="Container position."
    )
    parser.add_argument(
        "--dom-id", default="__svg__icons__dom__", help="Injected container id."
    )


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
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        orchestrator = create_orchestrator(config_from_args(args))
    except ConfigurationError as exc:
        logger.warning(f"Invalid configuration (error={exc})")
        stderr.write(f"Invalid configuration: {exc}\n")
        return 2

    if args.command == "build":
        return _run_build(orchestrator=orchestrator, stdout=stdout, stderr=stderr)
    if args.command == "watch":
        return _run_watch(orchestrator=orchestrator, stdout=stdout, stderr=stderr)
    if args.command == "serve":
        return _run_serve(args=args, orchestrator=orchestrator, stdout=stdout, stderr=stderr)
    if args.command == "duplicates":
        return _run_duplicates(args=args, orchestrator=orchestrator, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def config_from_args(args: argparse.Namespace) -> SpriteConfig:
    """Build the sprite configuration from parsed arguments.

    Raises:
        ConfigurationError: If ``--optimizer-config`` is not a JSON object.
    """
    optimizer_config: dict = {}
    if args.optimizer_config:
        try:
            optimizer_config = json.loads(args.optimizer_config)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"optimizer config is not valid JSON: {exc}") from exc
        if not isinstance(optimizer_config, dict):
            raise ConfigurationError("optimizer config must be a JSON object.")
    return SpriteConfig(
        input_dir=Path(args.input),
        output_dir=Path(args.output),
        cwd=Path(args.cwd) if args.cwd else None,
        file_name=args.file_name,
        type_file_name=args.type_file_name,
        grouped=args.grouped,
        with_types=not args.no_types,
        inject=args.inject,
        dom_id=args.dom_id,
        optimize=args.optimize,
        optimizer_config=optimizer_config,
        symbol_id=args.symbol_id,
    )


def _run_build(orchestrator: IncrementalOrchestrator, stdout: TextIO, stderr: TextIO) -> int:
    report = _build_once(orchestrator=orchestrator, stderr=stderr)
    if report is None:
        return 1
    _write_errors(report=report, stderr=stderr)
    _write_report(report=report, root_path=orchestrator.config.output_dir, stdout=stdout)
    return 0


def _run_watch(orchestrator: IncrementalOrchestrator, stdout: TextIO, stderr: TextIO) -> int:
    report = _build_once(orchestrator=orchestrator, stderr=stderr)
    if report is not None:
        _write_errors(report=report, stderr=stderr)
        _write_report(report=report, root_path=orchestrator.config.output_dir, stdout=stdout)
    watcher = IconWatcher(orchestrator)
    watcher.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
    return 0


def _run_serve(
    args: argparse.Namespace,
    orchestrator: IncrementalOrchestrator,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    report = _build_once(orchestrator=orchestrator, stderr=stderr)
    if report is not None:
        _write_errors(report=report, stderr=stderr)
    watcher = IconWatcher(orchestrator)
    watcher.start()
    stdout.write(
        f"Serving sprite module at http://{args.host}:{args.port}"
        f"{module_url(orchestrator.config.dom_id)}\n"
    )
    try:
        uvicorn.run(create_app(orchestrator), host=args.host, port=args.port, log_config=None)
    finally:
        watcher.stop()
    return 0


def _run_duplicates(
    args: argparse.Namespace,
    orchestrator: IncrementalOrchestrator,
    stdout: TextIO,
    stderr: TextIO,
) -> int:
    try:
        checker = DuplicationChecker(threshold=args.threshold)
    except ValueError as exc:
        stderr.write(f"Invalid threshold: {exc}\n")
        return 2
    report = _build_once(orchestrator=orchestrator, stderr=stderr)
    if report is None:
        return 1
    _write_errors(report=report, stderr=stderr)
    result = checker.check(cache=orchestrator.cache)
    groups = result.exact_groups + result.fuzzy_groups
    if args.format == "json":
        payload = {
            "exact_groups": [asdict(group) for group in result.exact_groups],
            "fuzzy_groups": [asdict(group) for group in result.fuzzy_groups],
        }
        console = Console(file=stdout, force_terminal=False, color_system="truecolor")
        console.print(
            json.dumps(payload, indent=2, sort_keys=True),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    else:
        _write_duplicate_table(groups=groups, stdout=stdout)
    return 0


def _build_once(orchestrator: IncrementalOrchestrator, stderr: TextIO) -> BuildReport | None:
    """Run one build, reporting fatal errors to stderr.

    Returns:
        Build report, or ``None`` when the build failed.
    """
    try:
        return orchestrator.build()
    except IdentifierCollisionError as exc:
        logger.error(f"Sprite build aborted (error={exc})")
        stderr.write(f"Identifier collision: {exc}\n")
    except ArtifactWriteError as exc:
        logger.error(f"Sprite build aborted (path={exc.path} error={exc})")
        stderr.write(f"Write failed: {exc}\n")
    return None


def _write_errors(report: BuildReport, stderr: TextIO) -> None:
    """Write recoverable compile errors to stderr."""
    for error in report.errors:
        stderr.write(f"compile_error: {error.file_path}: {error.message}\n")


def _write_report(report: BuildReport, root_path: Path, stdout: TextIO) -> None:
    """Write the build summary and artifact states as a table."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.rule(f"{root_path}", style=Style(color="cyan"), characters="-")
    console.print(
        f"sources={report.source_count} compiled={len(report.compiled)} "
        f"reused={len(report.reused)} errors={len(report.errors)} "
        f"duplicates={len(report.duplicates)}",
        markup=False,
        highlight=False,
    )
    table = Table(show_header=True, expand=True)
    table.add_column("artifact", ratio=4, overflow="fold")
    table.add_column("status", ratio=1)
    for status, paths in (
        ("written", report.written),
        ("unchanged", report.unchanged),
        ("deleted", report.deleted),
    ):
        for path in paths:
            table.add_row(str(path), status)
    console.print(table)


def _write_duplicate_table(groups: list[DuplicationGroup], stdout: TextIO) -> None:
    """Write duplication groups as a table."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, show_lines=True, expand=True)
    table.add_column("group", ratio=1)
    table.add_column("match", ratio=1)
    table.add_column("identifier", ratio=2, overflow="fold")
    table.add_column("file_path", ratio=3, overflow="fold")
    table.add_column("best_ratio", ratio=1, justify="right")
    table.add_column("avg_ratio", ratio=1, justify="right")
    for group in groups:
        for member in group.members:
            table.add_row(
                str(group.group_id),
                group.match_type,
                member.identifier,
                member.file_path,
                f"{member.best_ratio:.2f}",
                f"{member.avg_ratio:.2f}",
            )
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
