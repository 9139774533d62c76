"""Command Line Interface for the Mycelia compiler.

This module provides a CLI for compiling tagged markdown/MDX documents into a
knowledge graph and for inspecting previously written graph artifacts.

The CLI supports the following commands:
    - compile: Compile files, directories or glob patterns and write artifacts
    - validate: Check the integrity of a graph.json artifact
    - project: Project a graph.json artifact into a renderable tree

Example Usage:
    mycelia compile content/ --out-dir .mycelia
    mycelia validate .mycelia/graph.json
    mycelia project .mycelia/graph.json --output tree.json
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from mycelia.core.exceptions import ConfigurationError, SerializationError, StorageError
from mycelia.core.graph_operations.serialization import TreeSerializer
from mycelia.core.graph_operations.validation import validate_graph
from mycelia.core.renderable import project_graph
from mycelia.infrastructure.sources import ArtifactWriter, SourceLoader, load_graph
from mycelia.parser.compiler import compile_sources
from mycelia.parser.types import CompilerConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    """Configure the root logger for command line use."""
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)


async def run_compile(args: argparse.Namespace) -> int:
    """Compile sources and write the graph and renderable tree artifacts.

    Returns:
        int: 1 when any error diagnostic was produced, 0 otherwise.
    """
    try:
        config = CompilerConfig(infer_references=not args.no_infer_references)
    except (ConfigurationError, TypeError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    loader = SourceLoader()
    loaded = await loader.load(loader.discover(args.paths))
    result = compile_sources(loaded.sources, config=config)
    errors = loaded.errors + result.errors

    graph = result.graph
    tree = project_graph(graph)

    print(f"Files:    {len(loaded.sources) + len(loaded.errors)}")
    print(f"Nodes:    {graph.meta.stats.node_count}")
    print(f"Edges:    {graph.meta.stats.edge_count}")
    print(f"Errors:   {len(errors)}")
    print(f"Warnings: {len(result.warnings)}")
    for error in errors:
        print(f"  {error}")
    for warning in result.warnings:
        print(f"  warning: {warning}")

    if not args.no_write:
        try:
            paths = await ArtifactWriter().write(args.out_dir, graph, tree)
        except StorageError as e:
            print(str(e), file=sys.stderr)
            return 1
        for name, path in paths.items():
            print(f"Wrote {name}: {path}")

    return 1 if errors else 0


async def run_validate(args: argparse.Namespace) -> int:
    """Validate a graph artifact.

    Returns:
        int: 0 when the graph is valid, 1 otherwise.
    """
    try:
        graph = await load_graph(args.graph)
    except (SerializationError, StorageError) as e:
        print(str(e), file=sys.stderr)
        return 1

    result = validate_graph(graph)
    print("Graph is valid" if result.valid else "Graph is invalid")
    for error in result.errors:
        print(f"  error: {error}")
    for warning in result.warnings:
        print(f"  warning: {warning}")
    return 0 if result.valid else 1


async def run_project(args: argparse.Namespace) -> int:
    """Project a graph artifact into a renderable tree."""
    try:
        graph = await load_graph(args.graph)
    except (SerializationError, StorageError) as e:
        print(str(e), file=sys.stderr)
        return 1

    tree = project_graph(graph)
    if args.output:
        try:
            await ArtifactWriter().write_tree(args.output, tree)
        except StorageError as e:
            print(str(e), file=sys.stderr)
            return 1
        print(f"Wrote renderable tree: {args.output}")
    else:
        print(TreeSerializer.to_json(tree, indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(description="Mycelia document compiler")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    compile_cmd = subparsers.add_parser("compile", help="Compile documents into a graph")
    compile_cmd.add_argument("paths", nargs="+", help="Files, directories or glob patterns")
    compile_cmd.add_argument("--out-dir", default=".mycelia", help="Artifact output directory")
    compile_cmd.add_argument(
        "--no-write", action="store_true", help="Compile and report without writing artifacts"
    )
    compile_cmd.add_argument(
        "--no-infer-references",
        action="store_true",
        help="Do not add references edges for node ids mentioned in content",
    )

    validate_cmd = subparsers.add_parser("validate", help="Validate a graph.json artifact")
    validate_cmd.add_argument("graph", help="Path to graph.json")

    project_cmd = subparsers.add_parser("project", help="Project graph.json into a tree")
    project_cmd.add_argument("graph", help="Path to graph.json")
    project_cmd.add_argument("--output", help="Write the tree here instead of stdout")

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Returns:
        int: Process exit status.
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "compile":
        return await run_compile(args)
    elif args.command == "validate":
        return await run_validate(args)
    elif args.command == "project":
        return await run_project(args)
    return 1


def run() -> None:
    """Console entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
