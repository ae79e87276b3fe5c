"""Main CLI entry point for depgraph.

Provides commands: graph, aggregate
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import FrozenSet, Optional

from rich.console import Console
from rich.logging import RichHandler

from depgraph.config import DepGraphConfig, load_config
from depgraph.errors import DependencyGraphError
from depgraph.export import GraphFormat, create_renderer
from depgraph.factory import AggregatingGraphFactory, GraphFactory, SimpleGraphFactory
from depgraph.filters import create_filter
from depgraph.graph import GraphAccumulator, IdentityMode, NodeResolution
from depgraph.sources import RESOLVERS, DependencyResolver, load_resolver

logger = logging.getLogger("depgraph.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] [%(levelname)s] %(message)s",
        handlers=[handler],
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "source",
        help="Resolver output to read (resolution report JSON or dependency:tree text)",
    )
    parser.add_argument(
        "--input-format",
        choices=sorted(RESOLVERS),
        default="report",
        help="Format of SOURCE (default: report)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="graph_format",
        choices=["dot", "json"],
        help="Output format (default: dot, or the configured format)",
    )
    parser.add_argument(
        "--jsonp",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Wrap JSON output as 'var graph = ...;' for the interactive viewer",
    )
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional configuration. Can be a path to a TOML/JSON file "
            "(e.g. depgraph.toml) or an inline TOML/JSON string."
        ),
    )
    parser.add_argument(
        "--module",
        help="Module to graph (default: the root module of SOURCE)",
    )
    parser.add_argument("--graph-name", help="Name of the rendered graph")
    parser.add_argument(
        "--includes",
        help="Comma-separated groupId:artifactId:type:classifier:version patterns to keep",
    )
    parser.add_argument(
        "--excludes",
        help="Comma-separated groupId:artifactId:type:classifier:version patterns to drop",
    )
    parser.add_argument(
        "--resolutions",
        help=(
            "Comma-separated resolution states to draw, e.g. INCLUDED,OMITTED_FOR_CONFLICT "
            "(default: all; aggregated DOT graphs: INCLUDED)"
        ),
    )
    parser.add_argument(
        "--merge-scopes",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Merge artifacts reached through different scopes into one node (default: on)",
    )
    parser.add_argument(
        "--show-group-ids",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show group ids on nodes",
    )
    parser.add_argument(
        "--show-versions",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show versions on nodes",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Depgraph - Dependency Graph Renderer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    graph_parser = subparsers.add_parser(
        "graph",
        help="Render the dependency graph of one module",
    )
    _add_common_arguments(graph_parser)
    graph_parser.add_argument(
        "--show-versions-on-edges",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Label conflicting dependencies with the omitted version",
    )

    aggregate_parser = subparsers.add_parser(
        "aggregate",
        help="Render all modules of a multi-module project as one graph",
    )
    _add_common_arguments(aggregate_parser)
    aggregate_parser.add_argument(
        "--include-parent-projects",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show parent modules with dotted edges to their child modules",
    )

    return parser


def build_config(args: argparse.Namespace) -> DepGraphConfig:
    """Overlay explicitly given command-line flags on the loaded configuration."""
    config = load_config(getattr(args, "config", None))

    updates = {}
    for name in (
        "graph_format",
        "jsonp",
        "includes",
        "excludes",
        "resolutions",
        "graph_name",
        "include_parent_projects",
    ):
        value = getattr(args, name, None)
        if value is not None:
            updates[name] = value
    merge_scopes = getattr(args, "merge_scopes", None)
    if merge_scopes is not None:
        updates["identity_mode"] = (
            IdentityMode.VERSIONLESS if merge_scopes else IdentityMode.VERSIONLESS_WITH_SCOPE
        )
    if updates:
        config = DepGraphConfig.model_validate({**config.model_dump(), **updates})

    style_flags = {}
    for flag, field_name in (
        ("show_group_ids", "show_group_id"),
        ("show_versions", "show_version_on_nodes"),
        ("show_versions_on_edges", "show_version_on_edges"),
    ):
        value = getattr(args, flag, None)
        if value is not None:
            style_flags[field_name] = value
    if args.command == "aggregate":
        # Aggregated graphs never label edges with conflict versions.
        style_flags["show_version_on_edges"] = False
    if style_flags:
        config = config.with_style(**style_flags)
    return config


def default_resolutions(command: str, graph_format: GraphFormat) -> Optional[FrozenSet[NodeResolution]]:
    """Resolution states kept when the configuration does not name any.

    Aggregated DOT graphs show included dependencies only; everything else
    keeps every state (``None``).
    """
    if command == "aggregate" and graph_format is GraphFormat.DOT:
        return frozenset({NodeResolution.INCLUDED})
    return None


def create_factory(
    command: str, resolver: DependencyResolver, config: DepGraphConfig
) -> GraphFactory:
    resolutions = config.resolutions
    if resolutions is None:
        resolutions = default_resolutions(command, config.graph_format)
    accumulator = GraphAccumulator(config.identity_mode, graph_name=config.graph_name)
    renderer = create_renderer(config.graph_format, config.style, jsonp=config.jsonp)
    artifact_filter = create_filter(config.includes, config.excludes)

    if command == "aggregate":
        return AggregatingGraphFactory(
            resolver,
            artifact_filter,
            accumulator,
            renderer,
            include_parent_projects=config.include_parent_projects,
            resolutions=resolutions,
        )
    return SimpleGraphFactory(resolver, artifact_filter, accumulator, renderer, resolutions)


def write_output(text: str, output: Optional[str]) -> None:
    if not output:
        sys.stdout.write(text)
        return
    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    logger.info("Graph written to %s", output_path)


def graph_command(args: argparse.Namespace) -> int:
    """Execute the graph or aggregate command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = build_config(args)
        resolver = load_resolver(args.source, args.input_format)
        project = resolver.tree.get(args.module) if args.module else resolver.tree.root
        factory = create_factory(args.command, resolver, config)
        rendered = factory.create_graph(project)
    except DependencyGraphError as exc:
        logger.error("Unable to create dependency graph: %s", exc)
        return 1

    try:
        write_output(rendered, args.output)
    except OSError as exc:
        logger.error("Unable to write graph file: %s", exc)
        return 1
    return 0


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command in ("graph", "aggregate"):
        return graph_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
