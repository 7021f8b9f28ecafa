"""
repograph CLI entry point.

Usage:
    repograph build ARCHIVE [--root NAME] [--output PATH] [--indent N]
                            [--categorize] [--log-level LEVEL]
    repograph --help
    repograph --version

Logs go to stderr; the graph JSON goes to stdout unless --output is given.
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path
from typing import List, Optional

from repograph_core import __version__
from repograph_core.categorization import GraphSession, OllamaCategorizer
from repograph_core.config import settings
from repograph_core.exceptions import ArchiveError
from repograph_core.graph import GraphConstructor
from repograph_core.logging_service import LoggingService
from repograph_core.models import Graph
from repograph_core.utils import configure_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repograph", description="Build a file dependency graph from a zipped repository"
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_parser = subparsers.add_parser("build", help="Build the dependency graph of an archive")
    build_parser.add_argument("archive", type=Path, help="Path to a .zip repository snapshot")
    build_parser.add_argument(
        "--root",
        default=None,
        help="Top-level folder to strip from paths (default: discovered; '' disables)",
    )
    build_parser.add_argument(
        "--output", "-o", type=Path, default=None, help="Write JSON here instead of stdout"
    )
    build_parser.add_argument("--indent", type=int, default=None, help="JSON indentation")
    build_parser.add_argument(
        "--categorize",
        action="store_true",
        help="Group files into categories with the configured Ollama model",
    )
    build_parser.add_argument(
        "--log-level",
        default=None,
        help=f"Log level (default: {settings.log_level})",
    )

    return parser


async def categorize_graph(graph: Graph) -> Graph:
    """Run Ollama categorization; on failure print a warning and keep the graph."""
    session = GraphSession(graph)
    async with OllamaCategorizer.from_settings(settings) as categorizer:
        outcome = await session.categorize(categorizer, timeout=settings.categorizer_timeout)

    if outcome.warning:
        print(f"Warning: {outcome.warning}", file=sys.stderr)
    return session.current or graph


def build_command(args: argparse.Namespace) -> int:
    """
    Build the graph for ``args.archive`` and write it as JSON.

    Returns:
        Process exit code
    """
    try:
        archive = args.archive.read_bytes()
    except OSError as exc:
        print(f"Error: cannot read {args.archive}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    logger = get_logger("repograph.cli")
    start = time.perf_counter()
    try:
        graph = GraphConstructor(settings=settings).construct(archive, root_folder=args.root)
    except ArchiveError as exc:
        logger.error(
            "build_failed",
            archive=str(args.archive),
            error_code=exc.error_code,
            error=exc.message,
        )
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    if args.categorize:
        graph = asyncio.run(categorize_graph(graph))

    LoggingService.log_performance(
        "build",
        (time.perf_counter() - start) * 1000,
        metadata={"node_count": len(graph.nodes), "edge_count": len(graph.edges)},
    )

    payload = graph.to_json(indent=args.indent)
    if args.output is not None:
        args.output.write_text(payload + "\n", encoding="utf-8")
        print(
            f"Wrote {len(graph.nodes)} files and {len(graph.edges)} dependencies to {args.output}",
            file=sys.stderr,
        )
    else:
        sys.stdout.write(payload + "\n")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "build":
        try:
            configure_logging(level=args.log_level)
        except ValueError as exc:
            parser.error(str(exc))
        sys.exit(build_command(args))
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    main()
